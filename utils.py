"""
Utility functions for turning scan inputs into images
"""
import base64
import binascii
import io
import logging
import os
from pathlib import Path
from typing import Optional, Union

import numpy as np
import requests
from PIL import Image, UnidentifiedImageError

from config import config
from exceptions import ImageDecodeError

logger = logging.getLogger(__name__)

ImageSource = Union[Image.Image, np.ndarray, bytes, bytearray, str, Path, None]


def _open_image_bytes(image_bytes: bytes, component: str) -> Image.Image:
    if len(image_bytes) > config.MAX_IMAGE_SIZE:
        raise ImageDecodeError(f"Image too large: {len(image_bytes)} bytes", component=component)

    try:
        image = Image.open(io.BytesIO(image_bytes))
        image.load()
        return image
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise ImageDecodeError("Failed to decode image data", component=component, original_error=e)


def download_image(url: str) -> Image.Image:
    """
    Download image from URL and return as PIL Image

    Args:
        url: Image URL

    Returns:
        PIL Image object

    Raises:
        ImageDecodeError: If download fails or image is invalid
    """
    try:
        response = requests.get(url, timeout=config.DOWNLOAD_TIMEOUT, stream=True)
        response.raise_for_status()
    except requests.RequestException as e:
        raise ImageDecodeError("Failed to download image", component="download_image", original_error=e)

    # Check file size
    content_length = response.headers.get('content-length')
    if content_length:
        try:
            declared_size = int(content_length)
        except ValueError as e:
            raise ImageDecodeError(
                f"Invalid content-length header: {content_length!r}",
                component="download_image",
                original_error=e
            )
        if declared_size > config.MAX_IMAGE_SIZE:
            raise ImageDecodeError(f"Image too large: {content_length} bytes", component="download_image")

    try:
        content = response.content
    except requests.RequestException as e:
        raise ImageDecodeError("Failed to download image", component="download_image", original_error=e)

    return _open_image_bytes(content, "download_image")


def decode_base64_image(base64_string: str) -> Image.Image:
    """
    Decode base64 string (optionally a data URL) and return as PIL Image

    Args:
        base64_string: Base64 encoded image, e.g. "data:image/jpeg;base64,..."

    Returns:
        PIL Image object

    Raises:
        ImageDecodeError: If decoding fails or the data is not an image
    """
    # Remove data URI prefix if present (e.g., "data:image/jpeg;base64,")
    if ',' in base64_string and base64_string.startswith('data:'):
        base64_string = base64_string.split(',', 1)[1]

    try:
        image_bytes = base64.b64decode(base64_string.strip(), validate=False)
    except (binascii.Error, ValueError) as e:
        raise ImageDecodeError("Invalid base64 data", component="decode_base64_image", original_error=e)

    if not image_bytes:
        raise ImageDecodeError("Empty base64 payload", component="decode_base64_image")

    return _open_image_bytes(image_bytes, "decode_base64_image")


def load_image(source: ImageSource) -> Optional[Image.Image]:
    """
    Turn any supported scan input into a PIL Image

    Accepts a PIL Image, a numpy array, raw encoded bytes, a base64 string or
    data URL, an http(s) URL, or a filesystem path.

    Args:
        source: Image input

    Returns:
        PIL Image, or None when the input is missing or empty

    Raises:
        ImageDecodeError: If the input is present but cannot be decoded
    """
    if source is None:
        return None

    if isinstance(source, Image.Image):
        if source.width == 0 or source.height == 0:
            return None
        return source

    if isinstance(source, np.ndarray):
        if source.size == 0:
            return None
        try:
            return Image.fromarray(source)
        except (TypeError, ValueError) as e:
            raise ImageDecodeError("Unsupported array layout", component="load_image", original_error=e)

    if isinstance(source, (bytes, bytearray)):
        if not source:
            return None
        return _open_image_bytes(bytes(source), "load_image")

    if isinstance(source, Path):
        return _load_path(source)

    if isinstance(source, str):
        text = source.strip()
        if not text:
            return None
        if text.startswith(('http://', 'https://')):
            return download_image(text)
        if text.startswith('data:'):
            return decode_base64_image(text)
        if os.path.exists(text) or _looks_like_image_path(text):
            return _load_path(Path(text))
        return decode_base64_image(text)

    raise ImageDecodeError(f"Unsupported image source type: {type(source).__name__}", component="load_image")


def _looks_like_image_path(text: str) -> bool:
    # '.' is not in the base64 alphabet, so an image extension means a file name
    return Path(text).suffix.lower().lstrip('.') in config.SUPPORTED_IMAGE_FORMATS


def _load_path(path: Path) -> Image.Image:
    if not path.is_file():
        raise ImageDecodeError(f"Image file not found: {path}", component="load_image")

    extension = path.suffix.lower().lstrip('.')
    if extension and extension not in config.SUPPORTED_IMAGE_FORMATS:
        logger.warning(f"Unexpected image extension '{extension}' for {path}")

    try:
        image_bytes = path.read_bytes()
    except OSError as e:
        raise ImageDecodeError(f"Cannot read image file: {path}", component="load_image", original_error=e)

    return _open_image_bytes(image_bytes, "load_image")
