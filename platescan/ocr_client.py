# platescan/ocr_client.py

import logging

import requests

from .capture import CroppedImage
from .config import OCR_API_KEY, OCR_API_URL, OCR_LANGUAGE, OCR_TIMEOUT

logger = logging.getLogger(__name__)


class OcrServiceError(RuntimeError):
    """Network error, bad status or unusable response from the OCR service."""


class OcrSpaceClient:
    """
    Thin client for the OCR.space /parse/image endpoint.

    Sends the cropped JPEG as a multipart upload and returns the parsed text
    of the first result ("" when nothing was recognized).
    """

    def __init__(
        self,
        api_url: str = OCR_API_URL,
        api_key: str = OCR_API_KEY,
        language: str = OCR_LANGUAGE,
        timeout: float = OCR_TIMEOUT,
    ):
        self.api_url = api_url
        self.api_key = api_key
        self.language = language
        self.timeout = timeout

    def recognize(self, image: CroppedImage, filename: str = "capture.jpg") -> str:
        files = {"file": (filename, image.data, image.content_type)}
        headers = {"apikey": self.api_key}
        data = {"language": self.language}

        try:
            resp = requests.post(
                self.api_url,
                files=files,
                data=data,
                headers=headers,
                timeout=self.timeout,
            )
            resp.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise OcrServiceError(f"Error calling OCR service: {e}") from e

        try:
            payload = resp.json()
        except ValueError as e:
            raise OcrServiceError("OCR service returned a non-JSON response") from e

        if not isinstance(payload, dict):
            raise OcrServiceError(f"Unexpected OCR response: {payload!r}")

        if payload.get("IsErroredOnProcessing"):
            message = payload.get("ErrorMessage") or "unknown error"
            if isinstance(message, list):
                message = "; ".join(str(m) for m in message)
            raise OcrServiceError(f"OCR processing failed: {message}")

        results = payload.get("ParsedResults") or []
        text = ""
        if results and isinstance(results[0], dict):
            text = results[0].get("ParsedText") or ""
        logger.info("OCR returned %d chars: %r", len(text), text[:100])
        return text
