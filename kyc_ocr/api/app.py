"""FastAPI application for the KYC document OCR service.

Provides REST endpoints for Aadhaar extraction from uploads, remote
images and raw OCR text, plus a health check.
"""

from collections.abc import Callable
from typing import Annotated

from fastapi import FastAPI, File, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from kyc_ocr.ocr.document_processor import KycDocumentProcessor, ProcessingResult
from kyc_ocr.ocr.tesseract_engine import TesseractEngine
from kyc_ocr.utils.config import load_config
from kyc_ocr.utils.logger import get_logger

from .schemas import (
    ErrorResponse,
    ExtractionResponse,
    HealthResponse,
    IdentityResponse,
    ImageUrlRequest,
    RawTextRequest,
)

logger = get_logger(__name__)

VERSION = "1.0.0"

app = FastAPI(
    title="KYC Document OCR API",
    description="Extract identity details from Aadhaar card images",
    version=VERSION,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

_ALLOWED_CONTENT_TYPES = {
    "image/png",
    "image/jpeg",
    "image/jpg",
    "image/tiff",
    "application/pdf",
    "application/octet-stream",
}

_RESPONSES = {400: {"model": ErrorResponse}}


def _get_processor() -> KycDocumentProcessor:
    """Build a processor from the current configuration."""
    return KycDocumentProcessor(load_config())


def _error_response(message: str) -> JSONResponse:
    return JSONResponse(
        status_code=400, content=ErrorResponse(error=message).model_dump()
    )


def _to_response(result: ProcessingResult) -> ExtractionResponse | JSONResponse:
    if not result.success or result.data is None:
        return _error_response(result.error or "Extraction failed")
    identity = result.data
    return ExtractionResponse(
        data=IdentityResponse(
            id_number=identity.id_number or "",
            name=identity.name or "",
            date_of_birth=identity.date_of_birth,
            gender=identity.gender,
            masked_id_number=identity.masked_id_number() or "",
        ),
        raw_text=result.raw_text or "",
    )


def _run(
    action: str, func: Callable[[], ProcessingResult]
) -> ExtractionResponse | JSONResponse:
    try:
        result = func()
    except Exception as exc:
        logger.error("%s failed unexpectedly: %s", action, exc)
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return _to_response(result)


@app.get("/health", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Return system health status."""
    return HealthResponse(
        status="healthy",
        version=VERSION,
        ocr_provider=load_config().ocr.provider,
        tesseract_available=TesseractEngine.is_available(),
    )


@app.post("/kyc/extract", response_model=ExtractionResponse, responses=_RESPONSES)
def extract_upload(
    file: Annotated[UploadFile, File(...)],
) -> ExtractionResponse | JSONResponse:
    """Extract Aadhaar details from an uploaded card image.

    Args:
        file: Uploaded document file (PNG, JPEG, TIFF, or PDF).

    Returns:
        Extracted identity and raw OCR text, or a 400 error body.
    """
    if file.content_type and file.content_type not in _ALLOWED_CONTENT_TYPES:
        return _error_response(f"Unsupported file type: {file.content_type}")

    content = file.file.read()
    logger.info("Received upload %s (%d bytes)", file.filename, len(content))
    return _run("Upload extraction", lambda: _get_processor().process(content))


@app.post("/kyc/extract-url", response_model=ExtractionResponse, responses=_RESPONSES)
def extract_url(request: ImageUrlRequest) -> ExtractionResponse | JSONResponse:
    """Extract Aadhaar details from a remote image URL."""
    if not request.image_url.startswith(("http://", "https://")):
        return _error_response("image_url must be http(s)")
    return _run("URL extraction", lambda: _get_processor().process(request.image_url))


@app.post("/kyc/parse-text", response_model=ExtractionResponse, responses=_RESPONSES)
def parse_text(request: RawTextRequest) -> ExtractionResponse | JSONResponse:
    """Extract Aadhaar details from already recognized OCR text."""
    return _run(
        "Text extraction", lambda: _get_processor().extract_from_text(request.text)
    )
