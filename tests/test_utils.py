from pathlib import Path

import pytest
import requests

import utils
from exceptions import ImageDecodeError
from models import ScanCode
from mrz_samples import FakeOCREngine
from scanner import MRZScanner
from utils import download_image, load_image


class FakeResponse:
    def __init__(self, content=b"", headers=None, status_code=200):
        self.content = content
        self.headers = headers or {}
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


def patch_get(monkeypatch, response):
    monkeypatch.setattr(utils.requests, "get", lambda url, **kwargs: response)


def test_download_image(monkeypatch, card_png_bytes):
    patch_get(monkeypatch, FakeResponse(card_png_bytes, {"content-length": str(len(card_png_bytes))}))
    assert download_image("https://example.com/card.png").size == (856, 540)


def test_download_rejects_bad_content_length(monkeypatch, card_png_bytes):
    patch_get(monkeypatch, FakeResponse(card_png_bytes, {"content-length": "abc"}))

    with pytest.raises(ImageDecodeError) as excinfo:
        download_image("https://example.com/card.png")
    assert isinstance(excinfo.value.original_error, ValueError)


def test_download_rejects_oversized_image(monkeypatch):
    patch_get(monkeypatch, FakeResponse(b"", {"content-length": str(10 ** 12)}))

    with pytest.raises(ImageDecodeError, match="too large"):
        download_image("https://example.com/card.png")


def test_download_http_error(monkeypatch):
    patch_get(monkeypatch, FakeResponse(status_code=404))

    with pytest.raises(ImageDecodeError, match="Failed to download"):
        download_image("https://example.com/missing.png")


def test_scan_with_bad_content_length_is_no_image(monkeypatch, card_png_bytes):
    patch_get(monkeypatch, FakeResponse(card_png_bytes, {"content-length": "abc"}))
    engine = FakeOCREngine([""])

    result = MRZScanner(engine=engine).scan("https://example.invalid/card.png")

    assert result.code == ScanCode.NO_IMAGE
    assert engine.calls == 0


def test_unreadable_file(monkeypatch, tmp_path, card_image):
    path = tmp_path / "card.png"
    card_image.save(path)

    def denied(self):
        raise PermissionError(13, "Permission denied")

    monkeypatch.setattr(Path, "read_bytes", denied)

    with pytest.raises(ImageDecodeError, match="Cannot read image file") as excinfo:
        load_image(path)
    assert isinstance(excinfo.value.original_error, PermissionError)

    result = MRZScanner(engine=FakeOCREngine([""])).scan(str(path))
    assert result.code == ScanCode.NO_IMAGE


def test_missing_image_path_is_reported_as_missing(tmp_path):
    missing = str(tmp_path / "no_such_card.jpg")

    with pytest.raises(ImageDecodeError, match="Image file not found"):
        load_image(missing)

    with pytest.raises(ImageDecodeError, match="Image file not found"):
        load_image("scans/card.PNG")


def test_other_strings_are_decoded_as_base64():
    with pytest.raises(ImageDecodeError, match="decode image data"):
        load_image("bm90IGFuIGltYWdl")
