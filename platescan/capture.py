# platescan/capture.py

"""
Frame capture: crop the vertical middle band of a camera frame and
JPEG-encode it for OCR.

The band is a fixed heuristic (plates sit roughly in the middle of a
vehicle-front photo), not plate detection.
"""

import logging
from dataclasses import dataclass

import cv2
import numpy as np

from .config import CROP_FRACTION, CROP_OFFSET, JPEG_QUALITY

logger = logging.getLogger(__name__)


class InvalidFrameError(ValueError):
    """The camera has not produced a usable frame (zero area or undecodable)."""


@dataclass(frozen=True)
class RawFrame:
    """
    A single still from the camera, as an OpenCV image (H x W or H x W x C).
    """
    pixels: np.ndarray

    def __post_init__(self):
        if not isinstance(self.pixels, np.ndarray) or self.pixels.ndim not in (2, 3):
            raise ValueError("RawFrame pixels must be a 2-D or 3-D numpy array")

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @classmethod
    def from_bytes(cls, data: bytes) -> "RawFrame":
        """Decode an encoded photo (JPEG/PNG/...) into a frame."""
        buf = np.frombuffer(data or b"", dtype=np.uint8)
        image = cv2.imdecode(buf, cv2.IMREAD_COLOR) if buf.size else None
        if image is None:
            raise InvalidFrameError("Could not decode image data")
        return cls(image)


@dataclass(frozen=True)
class CroppedImage:
    data: bytes
    width: int
    height: int
    content_type: str = "image/jpeg"


def _check_fraction(name: str, value: float, allow_zero: bool = True) -> None:
    lower_ok = value >= 0 if allow_zero else value > 0
    if not (lower_ok and value <= 1):
        raise ValueError(f"{name} must be within [0, 1], got {value!r}")


def crop_band(frame: RawFrame, crop_fraction: float, crop_offset_fraction: float) -> np.ndarray:
    """
    Return round(H*fraction) full-width rows starting at H*offset (moved up
    if rounding would run the band past the bottom).
    """
    if frame.width == 0 or frame.height == 0:
        raise InvalidFrameError(
            f"Frame has zero area ({frame.width}x{frame.height}); camera not ready"
        )

    _check_fraction("crop_fraction", crop_fraction, allow_zero=False)
    _check_fraction("crop_offset_fraction", crop_offset_fraction)
    if crop_fraction + crop_offset_fraction > 1 + 1e-9:
        raise ValueError("crop band extends past the bottom of the frame")

    # height first; the start moves up so the band never runs off the bottom
    h = round(frame.height * crop_fraction)
    y0 = min(round(frame.height * crop_offset_fraction), frame.height - h)
    y1 = y0 + h
    if h <= 0:
        raise InvalidFrameError(f"Frame height {frame.height} too small to crop")

    return frame.pixels[y0:y1, :]


def capture_frame(
    frame: RawFrame,
    crop_fraction: float = CROP_FRACTION,
    crop_offset_fraction: float = CROP_OFFSET,
    jpeg_quality: float = JPEG_QUALITY,
) -> CroppedImage:
    """
    Crop the plate band out of `frame` and encode it as JPEG.

    jpeg_quality is in [0, 1] (mapped to OpenCV's 0-100 scale).
    Raises InvalidFrameError for a zero-area frame.
    """
    band = crop_band(frame, crop_fraction, crop_offset_fraction)
    _check_fraction("jpeg_quality", jpeg_quality)

    encode_param = [int(cv2.IMWRITE_JPEG_QUALITY), int(round(jpeg_quality * 100))]
    success, buf = cv2.imencode(".jpg", np.ascontiguousarray(band), encode_param)
    if not success:
        raise InvalidFrameError("JPEG encoding failed")

    height, width = band.shape[:2]
    logger.debug("Cropped %dx%d frame to %dx%d band", frame.width, frame.height, width, height)
    return CroppedImage(data=buf.tobytes(), width=int(width), height=int(height))
