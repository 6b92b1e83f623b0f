import io
from datetime import date

import pytest
from PIL import Image, ImageDraw


@pytest.fixture
def today():
    return date(2026, 10, 19)


@pytest.fixture
def card_image():
    """Blank card-sized photo with dark text-like bands near the bottom"""
    image = Image.new("RGB", (856, 540), (235, 232, 220))
    draw = ImageDraw.Draw(image)
    for i in range(3):
        top = 430 + i * 30
        draw.rectangle([40, top, 816, top + 18], fill=(30, 30, 30))
    return image


@pytest.fixture
def card_png_bytes(card_image):
    buffer = io.BytesIO()
    card_image.save(buffer, format="PNG")
    return buffer.getvalue()
