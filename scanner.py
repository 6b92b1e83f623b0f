"""
Main MRZ scanner with multi-strategy fallback

Each strategy prepares the image differently (crop, resize, binarize) before
OCR. The first strategy that yields a fully valid MRZ ends the scan; otherwise
the best partial result across all strategies is returned.
"""
import logging
import time
from datetime import date
from typing import Callable, List, NamedTuple, Optional

from config import config
from exceptions import ImageDecodeError
from models import ParsedIdentity, ScanCode, ScanResult, Validation, ValidationStatus
from mrz_enhancer import prepare_for_strategy
from mrz_parser import parse_mrz
from mrz_postprocess import split_ocr_text
from tesseractOCR import TesseractEngine
from utils import ImageSource, load_image

logger = logging.getLogger(__name__)

STATUS_RANK = {
    ValidationStatus.ERROR: 0,
    ValidationStatus.PARTIAL: 1,
    ValidationStatus.OK: 2,
}


class ScanStrategy(NamedTuple):
    """One preprocessing recipe applied before OCR"""
    name: str
    crop_fraction: float  # bottom share of the image height, 0 = no crop
    binarize: bool
    max_dim: int


def build_strategies(crop_fraction: Optional[float] = None,
                     max_dim: Optional[int] = None) -> List[ScanStrategy]:
    """
    Default ordered strategy list

    Args:
        crop_fraction: Bottom crop fraction (defaults to MRZ_CROP_BOTTOM_FRACTION)
        max_dim: Maximum image side (defaults to MRZ_MAX_DIM)
    """
    f = config.MRZ_CROP_BOTTOM_FRACTION if crop_fraction is None else crop_fraction
    d = config.MRZ_MAX_DIM if max_dim is None else max_dim

    return [
        ScanStrategy("bottom-crop", f, True, d),
        ScanStrategy("larger-bottom", min(1.0, f + 0.12), True, d),
        ScanStrategy("full-resize-pre", 0, True, min(d, 1200)),
        ScanStrategy("grayscale-bottom", f, False, d),
    ]


def _rank(identity: ParsedIdentity):
    return STATUS_RANK[identity.status], identity.checksums.passed_count


class MRZScanner:
    """
    Runs the strategy loop against an OCR engine

    The scanner owns the engine it creates and releases it in close();
    an injected engine stays under the caller's control.
    """

    def __init__(self, engine=None, strategies: Optional[List[ScanStrategy]] = None,
                 allow_td3: Optional[bool] = None,
                 on_status: Optional[Callable[[str], None]] = None,
                 timeout: Optional[float] = None,
                 today: Optional[date] = None,
                 clock: Callable[[], float] = time.monotonic):
        self._owns_engine = engine is None
        self.engine = engine if engine is not None else TesseractEngine()
        self.strategies = list(strategies) if strategies is not None else build_strategies()
        self.allow_td3 = config.MRZ_ENABLE_TD3 if allow_td3 is None else allow_td3
        self.on_status = on_status
        self.timeout = config.SCAN_TIMEOUT if timeout is None else timeout
        self.today = today
        self._clock = clock

    def _notify(self, message: str):
        logger.info(message)
        if self.on_status is not None:
            try:
                self.on_status(message)
            except Exception as e:
                logger.warning(f"Status callback failed: {e}")

    def scan(self, image: ImageSource, timeout: Optional[float] = None) -> ScanResult:
        """
        Scan one ID card image

        Args:
            image: Any input accepted by utils.load_image
            timeout: Wall-clock budget in seconds for the whole scan
                     (overrides the scanner default, None = unlimited)

        Returns:
            ScanResult; never raises for bad images or OCR failures
        """
        start_time = self._clock()
        messages: List[str] = []

        try:
            source = load_image(image)
        except ImageDecodeError as e:
            logger.warning(f"Could not decode scan input: {e}")
            return ScanResult(
                code=ScanCode.NO_IMAGE,
                validation=Validation(messages=[f"Invalid image: {e.message}"])
            )

        if source is None:
            return ScanResult(
                code=ScanCode.NO_IMAGE,
                validation=Validation(messages=["No image provided"])
            )

        budget = self.timeout if timeout is None else timeout
        deadline = start_time + budget if budget is not None else None

        best: Optional[ParsedIdentity] = None
        best_strategy = ""
        best_raw = ""

        for index, strategy in enumerate(self.strategies, start=1):
            if deadline is not None and self._clock() >= deadline:
                logger.warning(f"Scan budget of {budget}s exhausted before strategy '{strategy.name}'")
                messages.append(f"Scan timed out after {budget}s; remaining strategies skipped")
                break

            self._notify(f"Trying strategy {index}/{len(self.strategies)}: {strategy.name}")
            step_start = self._clock()

            try:
                prepared = prepare_for_strategy(source, strategy)
                raw_text = self.engine.recognize(prepared) or ""
            except Exception as e:
                logger.warning(f"Strategy '{strategy.name}' failed: {e}")
                messages.append(f"Strategy '{strategy.name}' failed: {e}")
                continue

            logger.debug(f"OCR output for '{strategy.name}':\n{raw_text}")

            identity = parse_mrz(split_ocr_text(raw_text), allow_td3=self.allow_td3, today=self.today)
            logger.info(f"Strategy '{strategy.name}' took {self._clock() - step_start:.2f}s")

            if identity is None:
                logger.info(f"No MRZ detected with strategy '{strategy.name}'")
                continue

            if identity.status == ValidationStatus.OK:
                self._notify(f"Valid MRZ found with strategy '{strategy.name}'")
                return ScanResult(
                    code=ScanCode.OK,
                    data=identity,
                    validation=Validation(status=identity.status, messages=identity.messages + messages),
                    strategy=strategy.name,
                    raw_ocr=raw_text,
                )

            if best is None or _rank(identity) > _rank(best):
                best = identity
                best_strategy = strategy.name
                best_raw = raw_text

        if best is not None:
            self._notify(f"Returning best partial result from strategy '{best_strategy}'")
            return ScanResult(
                code=ScanCode.PARTIAL,
                data=best,
                validation=Validation(status=best.status, messages=best.messages + messages),
                strategy=best_strategy,
                raw_ocr=best_raw,
            )

        self._notify("No MRZ detected")
        return ScanResult(
            code=ScanCode.NO_MRZ_DETECTED,
            validation=Validation(status=ValidationStatus.ERROR, messages=messages or ["No MRZ detected"]),
        )

    def close(self):
        """Release the OCR engine if this scanner created it"""
        if self._owns_engine:
            self.engine.release()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


def scan_image(image: ImageSource, **kwargs) -> ScanResult:
    """
    One-shot scan with a scanner that is closed afterwards

    Args:
        image: Any input accepted by utils.load_image
        **kwargs: Forwarded to MRZScanner

    Returns:
        ScanResult
    """
    with MRZScanner(**kwargs) as scanner:
        return scanner.scan(image)
