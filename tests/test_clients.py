import numpy as np
import requests

from frontend import app as frontend_app
from hardware import capture_frame as hw


class FakeCapture:
    def __init__(self, frame):
        self.frame = frame
        self.released = False

    def isOpened(self):
        return True

    def set(self, prop, value):
        return True

    def read(self):
        return (self.frame is not None), self.frame

    def release(self):
        self.released = True


class FakeResponse:
    def __init__(self, payload):
        self.payload = payload

    def json(self):
        return self.payload


def test_grab_frame():
    cap = FakeCapture(np.zeros((720, 1280, 3), dtype=np.uint8))
    frame = hw.grab_frame(cap)
    assert (frame.width, frame.height) == (1280, 720)
    assert hw.grab_frame(FakeCapture(None)) is None


def test_main_crops_locally_and_submits(monkeypatch):
    cap = FakeCapture(np.zeros((720, 1280, 3), dtype=np.uint8))
    monkeypatch.setattr(hw.cv2, "VideoCapture", lambda index: cap)
    sent = []

    def fake_post(url, params=None, files=None, timeout=None):
        sent.append((url, params, files))
        return FakeResponse({"status": "ok", "data": {"plate": "ABC1234", "summary": {}}})

    monkeypatch.setattr(hw.requests, "post", fake_post)

    assert hw.main(["--backend", "http://backend.test/scan"]) == 0
    assert cap.released
    url, params, files = sent[0]
    assert url == "http://backend.test/scan"
    assert params == {"crop": "false"}
    assert files["file"][1][:2] == b"\xff\xd8"


def test_main_does_not_submit_zero_size_frame(monkeypatch):
    monkeypatch.setattr(hw.cv2, "VideoCapture", lambda index: FakeCapture(np.zeros((0, 0, 3), dtype=np.uint8)))
    sent = []
    monkeypatch.setattr(hw.requests, "post", lambda *a, **k: sent.append(a))
    assert hw.main([]) == 1
    assert sent == []


def test_frontend_call_backend(monkeypatch):
    seen = {}

    def fake_post(url, files=None, timeout=None):
        seen["url"] = url
        seen["files"] = files
        return FakeResponse({"status": "no_plate", "data": {}})

    monkeypatch.setattr(frontend_app.requests, "post", fake_post)
    result = frontend_app.call_backend("http://backend.test/scan", b"jpeg", "capture.jpg")
    assert result == {"status": "no_plate", "data": {}}
    assert seen["files"]["file"] == ("capture.jpg", b"jpeg", "image/jpeg")


def test_frontend_call_backend_connection_error(monkeypatch):
    def fake_post(url, files=None, timeout=None):
        raise requests.exceptions.ConnectionError("refused")

    monkeypatch.setattr(frontend_app.requests, "post", fake_post)
    errors = []
    monkeypatch.setattr(frontend_app.st, "error", errors.append)
    assert frontend_app.call_backend("http://backend.test/scan", b"jpeg", "capture.jpg") is None
    assert "refused" in errors[0]


def test_main_reports_non_json_backend_reply(monkeypatch):
    cap = FakeCapture(np.zeros((720, 1280, 3), dtype=np.uint8))
    monkeypatch.setattr(hw.cv2, "VideoCapture", lambda index: cap)

    class HtmlResponse:
        def json(self):
            raise ValueError("Expecting value")

    monkeypatch.setattr(hw.requests, "post", lambda *a, **k: HtmlResponse())
    assert hw.main([]) == 1
