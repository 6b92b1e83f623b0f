"""
Image preparation for MRZ OCR strategies (resize, bottom crop, grayscale, binarize)
"""
import math

import cv2
import numpy as np
from PIL import Image

MIN_CROP_HEIGHT = 10


def _to_rgb(image: Image.Image) -> Image.Image:
    if image.mode not in ("RGB", "L"):
        return image.convert("RGB")
    return image


def resize_if_needed(image: Image.Image, max_dim: int) -> Image.Image:
    """
    Downscale so the longest side is at most max_dim, keeping the aspect ratio

    Args:
        image: PIL Image
        max_dim: Maximum allowed width or height in pixels

    Returns:
        Resized image, or the original when it already fits
    """
    width, height = image.size
    longest = max(width, height)
    if not max_dim or longest <= max_dim:
        return image

    scale = max_dim / float(longest)
    new_size = (max(1, int(round(width * scale))), max(1, int(round(height * scale))))

    img_array = np.array(_to_rgb(image))
    resized = cv2.resize(img_array, new_size, interpolation=cv2.INTER_AREA)
    return Image.fromarray(resized)


def crop_bottom_strip(image: Image.Image, fraction: float) -> Image.Image:
    """
    Keep the bottom part of the image where the MRZ is printed

    The strip is floor(height * fraction) pixels tall, at least 10 pixels and
    never taller than the image. A fraction of 0 leaves the image uncropped.
    """
    if not fraction or fraction <= 0:
        return image

    width, height = image.size
    strip_height = min(height, max(MIN_CROP_HEIGHT, int(math.floor(height * fraction))))
    return image.crop((0, height - strip_height, width, height))


def to_grayscale(image: Image.Image) -> Image.Image:
    """Convert to single-channel grayscale"""
    img_array = np.array(_to_rgb(image))
    if len(img_array.shape) == 3:
        gray = cv2.cvtColor(img_array, cv2.COLOR_RGB2GRAY)
    else:
        gray = img_array
    return Image.fromarray(gray)


def binarize(image: Image.Image) -> Image.Image:
    """
    Black/white threshold at the mean luminance of the image

    Pixels brighter than the mean become white, the rest black.
    """
    gray = np.array(to_grayscale(image))
    threshold = float(gray.mean())
    _, binary = cv2.threshold(gray, threshold, 255, cv2.THRESH_BINARY)
    return Image.fromarray(binary)


def prepare_for_strategy(image: Image.Image, strategy) -> Image.Image:
    """
    Apply one scan strategy to an image: resize, crop, then binarize or grayscale

    Args:
        image: Decoded source image
        strategy: Object with crop_fraction, binarize and max_dim attributes

    Returns:
        Image ready to be sent to the OCR engine
    """
    prepared = resize_if_needed(image, strategy.max_dim)
    prepared = crop_bottom_strip(prepared, strategy.crop_fraction)

    if strategy.binarize:
        return binarize(prepared)
    return to_grayscale(prepared)
