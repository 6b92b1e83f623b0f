"""
Exceptions raised by the MRZ scanner collaborators
"""
from typing import Optional


class ScannerError(Exception):
    """Base exception for scanner errors"""

    def __init__(
        self,
        message: str,
        component: Optional[str] = None,
        original_error: Optional[Exception] = None
    ):
        self.message = message
        self.component = component
        self.original_error = original_error
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        msg = self.message
        if self.component:
            msg += f" (component: {self.component})"
        if self.original_error:
            msg += f" [original: {type(self.original_error).__name__}: {self.original_error}]"
        return msg


class ImageDecodeError(ScannerError):
    """Input could not be turned into an image"""
    pass


class OCREngineError(ScannerError):
    """OCR engine unavailable or recognition failed"""
    pass
