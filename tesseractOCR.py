"""
Tesseract OCR engine handle for MRZ recognition

The engine is acquired lazily on the first recognize() call, reused across
strategies and scans, and released once at shutdown. Recognition calls are
serialized with a lock since one handle may be shared by concurrent scans.
"""
import logging
import threading
from typing import Optional

import pytesseract
from PIL import Image

from config import config
from exceptions import OCREngineError

logger = logging.getLogger(__name__)

MRZ_WHITELIST = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789<"


def build_tesseract_config(psm: int = 6) -> str:
    """
    Tesseract CLI options for MRZ text

    Args:
        psm: Page segmentation mode (6 = single uniform block of text)

    Returns:
        Config string passed to pytesseract
    """
    return (
        f"--oem 3 --psm {psm} "
        f"-c tessedit_char_whitelist={MRZ_WHITELIST} "
        f"-c preserve_interword_spaces=0"
    )


class TesseractEngine:
    """Long-lived OCR collaborator exposing recognize(image) -> str"""

    def __init__(self, tesseract_cmd: Optional[str] = None, lang: Optional[str] = None,
                 timeout: Optional[float] = None, psm: int = 6):
        self.tesseract_cmd = tesseract_cmd if tesseract_cmd is not None else config.TESSERACT_CMD
        self.lang = lang or config.OCR_LANG
        self.timeout = timeout if timeout is not None else config.OCR_TIMEOUT
        self.tesseract_config = build_tesseract_config(psm)
        self.version = None
        self._acquired = False
        self._released = False
        self._lock = threading.Lock()

    @property
    def is_acquired(self) -> bool:
        return self._acquired

    def acquire(self):
        """Point pytesseract at the binary and check it responds (idempotent)"""
        if self._acquired:
            return

        if self._released:
            raise OCREngineError("Engine already released", component="TesseractEngine")

        if self.tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = self.tesseract_cmd
            logger.info(f"Using Tesseract: {self.tesseract_cmd}")

        try:
            self.version = pytesseract.get_tesseract_version()
        except (pytesseract.TesseractNotFoundError, OSError) as e:
            raise OCREngineError(
                "Tesseract binary not available",
                component="TesseractEngine",
                original_error=e
            )

        self._acquired = True
        logger.info(f"Tesseract engine ready (version {self.version}, lang={self.lang})")

    def recognize(self, image: Image.Image) -> str:
        """
        Run OCR on a prepared image

        Args:
            image: PIL Image (grayscale or binarized MRZ strip)

        Returns:
            Raw multi-line text

        Raises:
            OCREngineError: If the engine is unavailable or Tesseract fails
        """
        with self._lock:
            self.acquire()
            try:
                return pytesseract.image_to_string(
                    image,
                    lang=self.lang,
                    config=self.tesseract_config,
                    timeout=self.timeout or 0
                )
            except pytesseract.TesseractError as e:
                raise OCREngineError(
                    "Tesseract recognition failed",
                    component="TesseractEngine",
                    original_error=e
                )
            except RuntimeError as e:
                # pytesseract signals its timeout with a bare RuntimeError
                raise OCREngineError(
                    "Tesseract recognition timed out",
                    component="TesseractEngine",
                    original_error=e
                )

    def release(self):
        """Release the engine; calling it more than once is a no-op"""
        with self._lock:
            if self._released:
                return
            self._released = True
            if self._acquired:
                self._acquired = False
                logger.info("Tesseract engine released")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.release()
        return False
