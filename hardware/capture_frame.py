# hardware/capture_frame.py

import argparse
import logging
from typing import Optional

import cv2
import requests

from platescan.capture import InvalidFrameError, RawFrame, capture_frame

logger = logging.getLogger(__name__)

DEFAULT_BACKEND_URL = "http://localhost:8000/scan"


def grab_frame(cap) -> Optional[RawFrame]:
    """Read one frame from an opened cv2.VideoCapture (None if nothing came back)."""
    ret, frame = cap.read()
    if not ret or frame is None:
        return None
    return RawFrame(frame)


def submit(backend_url: str, jpeg: bytes, timeout: float = 60) -> dict:
    # Already cropped here, so tell the backend not to crop again
    files = {"file": ("capture.jpg", jpeg, "image/jpeg")}
    resp = requests.post(backend_url, params={"crop": "false"}, files=files, timeout=timeout)
    return resp.json()


def main(argv=None):
    parser = argparse.ArgumentParser(description="Capture one frame and scan its plate.")
    parser.add_argument("--camera", type=int, default=0, help="cv2 camera index")
    parser.add_argument("--backend", default=DEFAULT_BACKEND_URL)
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")

    # 0 = default USB camera. For Pi camera, this might be 0 or 1 depending on setup.
    cap = cv2.VideoCapture(args.camera)
    if not cap.isOpened():
        logger.error("Could not open camera %d. Check connection / index.", args.camera)
        return 1

    cap.set(cv2.CAP_PROP_FRAME_WIDTH, 1280)
    cap.set(cv2.CAP_PROP_FRAME_HEIGHT, 720)

    try:
        frame = grab_frame(cap)
    finally:
        cap.release()

    if frame is None:
        logger.error("Could not read frame from camera.")
        return 1

    try:
        image = capture_frame(frame)
    except InvalidFrameError as e:
        logger.error("Camera not ready: %s", e)
        return 1

    logger.info("Submitting %dx%d crop (%d bytes)", image.width, image.height, len(image.data))
    try:
        result = submit(args.backend, image.data)
    except (requests.exceptions.RequestException, ValueError) as e:
        logger.error("Error calling backend: %s", e)
        return 1

    status = result.get("status")
    data = result.get("data") or {}
    if status == "ok":
        summary = data.get("summary", {})
        logger.info("Plate %s: %d visits, %s spent", data.get("plate"),
                    summary.get("total_visits", 0), summary.get("total_spent", 0))
    elif status == "no_plate":
        logger.info("No plate detected")
    else:
        logger.error("Backend returned an error: %s", result.get("detail"))
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
