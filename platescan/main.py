# platescan/main.py

import logging

from fastapi import Depends, FastAPI, File, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .capture import CroppedImage, InvalidFrameError, RawFrame, capture_frame
from .config import LOG_LEVEL
from .ocr_client import OcrServiceError, OcrSpaceClient
from .plate_reader import match_plate, normalize_plate
from .schemas import ExtractRequest, ExtractResult, HistoryResult, ScanResult
from .service_history import lookup_service_history, summarize_history

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


app = FastAPI(
    title="Plate Scanner Backend",
    description="Crop + OCR + plate extraction + service-history lookup for the Streamlit frontend.",
    version="1.0.0",
)

# === CORS so Streamlit / the camera client can talk to this ===
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_ocr_client() -> OcrSpaceClient:
    return OcrSpaceClient()


@app.exception_handler(InvalidFrameError)
async def invalid_frame_handler(request: Request, exc: InvalidFrameError):
    logger.warning("Rejected frame: %s", exc)
    return JSONResponse(status_code=422, content={"status": "error", "detail": str(exc)})


@app.exception_handler(OcrServiceError)
async def ocr_error_handler(request: Request, exc: OcrServiceError):
    logger.error("OCR service error: %s", exc)
    return JSONResponse(status_code=502, content={"status": "error", "detail": str(exc)})


@app.get("/")
def root():
    return {
        "status": "ok",
        "message": "Plate Scanner FastAPI backend running.",
    }


@app.get("/health")
def health():
    return {"status": "healthy"}


@app.post("/scan")
def scan(
    file: UploadFile = File(...),
    crop: bool = True,
    ocr: OcrSpaceClient = Depends(get_ocr_client),
):
    """
    Receive a photo, crop the plate band, OCR it, extract the plate
    and return its service history.

    crop=false means the client already cropped (hardware/capture_frame.py).
    """
    # plain def: FastAPI runs it in the threadpool, OCR is a blocking call
    data = file.file.read()

    # 1) Decode + crop
    frame = RawFrame.from_bytes(data)
    if crop:
        image = capture_frame(frame)
    else:
        if frame.width == 0 or frame.height == 0:
            raise InvalidFrameError("Uploaded image has zero area")
        image = CroppedImage(data=data, width=frame.width, height=frame.height,
                             content_type=file.content_type or "image/jpeg")

    # 2) OCR
    text = ocr.recognize(image)

    # 3) Plate + history
    match = match_plate(text)
    if match is None:
        logger.info("No plate detected in OCR text")
        result = ScanResult(
            ocr_text=text,
            crop_width=image.width,
            crop_height=image.height,
            summary=summarize_history([]),
        )
        return {"status": "no_plate", "data": result.model_dump()}

    history = lookup_service_history(match.plate)
    result = ScanResult(
        plate=match.plate,
        rule=match.rule,
        ocr_text=text,
        crop_width=image.width,
        crop_height=image.height,
        history=history,
        summary=summarize_history(history),
    )
    logger.info("Plate %s (rule %s), %d visits", match.plate, match.rule, len(history))
    return {"status": "ok", "data": result.model_dump()}


@app.post("/extract")
def extract(req: ExtractRequest):
    match = match_plate(req.text)
    if match is None:
        return {"status": "no_plate", "data": ExtractResult().model_dump()}
    return {"status": "ok", "data": ExtractResult(plate=match.plate, rule=match.rule).model_dump()}


@app.get("/history/{plate}")
def history(plate: str):
    visits = lookup_service_history(plate)
    result = HistoryResult(plate=normalize_plate(plate), history=visits, summary=summarize_history(visits))
    return {"status": "ok", "data": result.model_dump()}
