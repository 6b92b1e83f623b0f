import base64

import pytest
from fastapi.testclient import TestClient

from app import create_app
from mrz_samples import JUNK_TEXT, FakeOCREngine, build_td1_lines, ocr_text, td1_with_failures
from scanner import MRZScanner


def make_client(outputs):
    engine = FakeOCREngine(outputs)
    app = create_app(MRZScanner(engine=engine))
    return TestClient(app), engine


@pytest.fixture
def png_base64(card_png_bytes):
    return base64.b64encode(card_png_bytes).decode()


def test_health():
    client, _ = make_client([JUNK_TEXT])
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_scan_base64(png_base64):
    client, engine = make_client([ocr_text(build_td1_lines())])
    response = client.post("/scan", json={"image_type": "base64", "image_base64": png_base64})

    assert response.status_code == 200
    body = response.json()
    assert body["code"] == "ok"
    assert body["strategy"] == "bottom-crop"
    assert body["validation"]["status"] == "OK"
    assert body["data"]["document_number"] == "012345678"
    assert body["data"]["full_name"] == "MARIA JOSE GARCIA LOPEZ"
    assert body["data"]["birth_date"] == "1990-01-01"
    assert body["data"]["format"] == "TD1"
    assert engine.calls == 1


def test_scan_partial_is_200(png_base64):
    client, _ = make_client([ocr_text(td1_with_failures("birth_date"))])
    response = client.post("/scan", json={"image_type": "base64", "image_base64": png_base64})

    assert response.status_code == 200
    assert response.json()["code"] == "partial"
    assert response.json()["validation"]["status"] == "PARTIAL"


def test_scan_without_mrz_is_422(png_base64):
    client, _ = make_client([JUNK_TEXT])
    response = client.post("/scan", json={"image_type": "base64", "image_base64": png_base64})

    assert response.status_code == 422
    assert response.json()["code"] == "no_mrz_detected"
    assert response.json()["data"] is None


def test_scan_bad_base64_is_422():
    client, engine = make_client([JUNK_TEXT])
    response = client.post("/scan", json={"image_type": "base64", "image_base64": "bm90IGFuIGltYWdl"})

    assert response.status_code == 422
    assert response.json()["code"] == "no_image"
    assert engine.calls == 0


def test_scan_missing_base64_is_no_image():
    client, _ = make_client([JUNK_TEXT])
    response = client.post("/scan", json={"image_type": "base64"})

    assert response.status_code == 422
    assert response.json()["code"] == "no_image"


def test_scan_request_validation():
    client, _ = make_client([JUNK_TEXT])

    assert client.post("/scan", json={"image_type": "file"}).status_code == 422
    assert client.post("/scan", json={"image_type": "pdf", "image_base64": "x"}).status_code == 422


def test_parse_lines():
    client, engine = make_client([JUNK_TEXT])
    response = client.post("/parse", json={"lines": build_td1_lines()})

    assert response.status_code == 200
    body = response.json()
    assert body["code"] == "ok"
    assert body["strategy"] == "parse"
    assert body["data"]["expiry_date"] == "2025-01-01"
    assert engine.calls == 0


def test_parse_without_mrz_is_422():
    client, _ = make_client([JUNK_TEXT])
    response = client.post("/parse", json={"lines": ["HELLO", "WORLD"]})

    assert response.status_code == 422
    assert response.json()["code"] == "no_mrz_detected"


def test_engine_released_on_shutdown():
    scanner = MRZScanner()
    with TestClient(create_app(scanner)) as client:
        assert client.get("/health").status_code == 200
        assert not scanner.engine._released

    assert scanner.engine._released
