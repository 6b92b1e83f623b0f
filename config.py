"""
Configuration settings for the National ID MRZ Scanner
"""
import os
import logging.config
from typing import Optional
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name, "").strip().lower()
    if value in ["on", "true", "1", "enabled", "yes"]:
        return True
    if value in ["off", "false", "0", "disabled", "no"]:
        return False
    return default


def _env_float(name: str, default: Optional[float]) -> Optional[float]:
    value = os.getenv(name, "").strip()
    if not value:
        return default
    return float(value)


class Config:
    """Application configuration"""

    # API Settings
    API_TITLE = "National ID MRZ Scanner API"
    API_VERSION = "1.0.0"
    API_DESCRIPTION = """
    MRZ scanning API for photographed national ID cards.

    Features:
    - TD1 (3 x 30) machine readable zone decoding
    - Optional TD3 (2 x 44) passport support
    - ICAO 9303 check digit validation with partial results
    - Multiple crop/preprocessing strategies with early exit
    """

    # Tesseract OCR
    TESSERACT_CMD = os.getenv("TESSERACT_CMD", "")
    OCR_LANG = os.getenv("OCR_LANG", "eng")
    OCR_TIMEOUT = _env_float("OCR_TIMEOUT", 0)  # seconds per Tesseract call, 0 = no limit

    # MRZ Settings
    TD1_LINE_LENGTH = 30
    TD1_TOTAL_LINES = 3
    TD3_LINE_LENGTH = 44
    TD3_TOTAL_LINES = 2
    MRZ_ENABLE_TD3 = _env_bool("MRZ_ENABLE_TD3", False)

    # Scan strategies
    MRZ_MAX_DIM = int(os.getenv("MRZ_MAX_DIM", "1600"))
    MRZ_CROP_BOTTOM_FRACTION = float(os.getenv("MRZ_CROP_BOTTOM_FRACTION", "0.22"))
    SCAN_TIMEOUT = _env_float("SCAN_TIMEOUT", None)  # wall-clock budget for a whole scan

    # Image input
    MAX_IMAGE_SIZE = 10 * 1024 * 1024  # 10MB
    DOWNLOAD_TIMEOUT = 30  # seconds timeout for image download
    SUPPORTED_IMAGE_FORMATS = ["jpg", "jpeg", "png", "webp", "bmp"]

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
    LOG_FILE = os.getenv("LOG_FILE", "")

    @classmethod
    def log_config(cls) -> dict:
        """Build the dictConfig used by setup_logging"""
        handlers = {
            'default': {
                'level': cls.LOG_LEVEL,
                'formatter': 'standard',
                'class': 'logging.StreamHandler',
            },
        }
        if cls.LOG_FILE:
            handlers['file'] = {
                'level': cls.LOG_LEVEL,
                'formatter': 'standard',
                'class': 'logging.FileHandler',
                'filename': cls.LOG_FILE,
                'mode': 'a',
            }

        return {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {
                'standard': {
                    'format': '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
                },
            },
            'handlers': handlers,
            'loggers': {
                '': {
                    'handlers': list(handlers.keys()),
                    'level': cls.LOG_LEVEL,
                    'propagate': True
                }
            }
        }


# Create global config instance
config = Config()


def setup_logging():
    """Apply the logging configuration (call once from entry points)"""
    logging.config.dictConfig(config.log_config())
