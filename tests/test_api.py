import inspect

import cv2
import numpy as np
import pytest
from fastapi.testclient import TestClient

from platescan.main import app, get_ocr_client, scan
from platescan.ocr_client import OcrServiceError


class FakeOcr:
    def __init__(self, text="", error=None):
        self.text = text
        self.error = error
        self.images = []

    def recognize(self, image):
        self.images.append(image)
        if self.error:
            raise self.error
        return self.text


@pytest.fixture
def client():
    yield TestClient(app)
    app.dependency_overrides.clear()


def use_ocr(fake):
    app.dependency_overrides[get_ocr_client] = lambda: fake
    return fake


def _jpeg(width=1280, height=720) -> bytes:
    ok, buf = cv2.imencode(".jpg", np.full((height, width, 3), 128, dtype=np.uint8))
    assert ok
    return buf.tobytes()


def _upload(client, data, **params):
    return client.post("/scan", params=params, files={"file": ("photo.jpg", data, "image/jpeg")})


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}
    assert client.get("/").json()["status"] == "ok"


def test_scan_crops_reads_and_returns_history(client):
    fake = use_ocr(FakeOcr("TOYOTA\nabc 1234\n"))
    resp = _upload(client, _jpeg())

    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "ok"
    data = body["data"]
    assert data["plate"] == "ABC1234"
    assert data["rule"] == "spaced"
    assert (data["crop_width"], data["crop_height"]) == (1280, 432)
    assert data["summary"]["total_visits"] == len(data["history"]) > 0
    assert fake.images[0].height == 432


def test_scan_without_crop_sends_upload_as_is(client):
    fake = use_ocr(FakeOcr("ABC1234"))
    payload = _jpeg(640, 200)
    resp = _upload(client, payload, crop="false")

    assert resp.json()["data"]["crop_height"] == 200
    assert fake.images[0].data == payload


def test_scan_no_plate_is_not_an_error(client):
    use_ocr(FakeOcr("no readable text"))
    resp = _upload(client, _jpeg())

    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "no_plate"
    assert body["data"]["plate"] is None
    assert body["data"]["history"] == []


def test_scan_rejects_undecodable_image(client):
    fake = use_ocr(FakeOcr("ABC1234"))
    resp = _upload(client, b"garbage")

    assert resp.status_code == 422
    assert resp.json()["status"] == "error"
    assert fake.images == []


def test_scan_reports_ocr_failure(client):
    use_ocr(FakeOcr(error=OcrServiceError("OCR processing failed: quota")))
    resp = _upload(client, _jpeg())

    assert resp.status_code == 502
    assert resp.json() == {"status": "error", "detail": "OCR processing failed: quota"}


@pytest.mark.parametrize(
    "text, status, plate",
    [("plate: ab-1234 found", "ok", "AB1234"), ("", "no_plate", None)],
)
def test_extract_endpoint(client, text, status, plate):
    body = client.post("/extract", json={"text": text}).json()
    assert body["status"] == status
    assert body["data"]["plate"] == plate


def test_history_endpoint(client):
    body = client.get("/history/abc1234").json()
    assert body["data"]["plate"] == "ABC1234"
    assert body["data"]["summary"]["total_visits"] == 3


def test_scan_is_a_sync_route():
    # OCR blocks on requests.post, so the route must run in FastAPI's threadpool
    assert not inspect.iscoroutinefunction(scan)


def test_history_reports_normalized_plate(client):
    body = client.get("/history/abc-1234").json()
    assert body["data"]["plate"] == "ABC1234"
