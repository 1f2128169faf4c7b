# platescan/config.py

import os

# Project root = .../plate-scanner
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

# OCR.space endpoint + key (set OCR_API_KEY in your terminal or .env)
OCR_API_URL = os.getenv("OCR_API_URL", "https://api.ocr.space/parse/image")
OCR_API_KEY = os.getenv("OCR_API_KEY", "")
OCR_LANGUAGE = os.getenv("OCR_LANGUAGE", "eng")
OCR_TIMEOUT = float(os.getenv("OCR_TIMEOUT", "30"))

# Vertical crop band kept before OCR (plates sit in the middle of the photo)
CROP_FRACTION = float(os.getenv("CROP_FRACTION", "0.6"))
CROP_OFFSET = float(os.getenv("CROP_OFFSET", "0.2"))
JPEG_QUALITY = float(os.getenv("JPEG_QUALITY", "0.9"))

# Mock service-history dataset
DATA_DIR = os.path.join(PROJECT_ROOT, "data")
SERVICE_HISTORY_PATH = os.getenv(
    "SERVICE_HISTORY_PATH", os.path.join(DATA_DIR, "service_history.json")
)

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
