"""Pydantic request/response schemas for the FastAPI endpoints."""

from pydantic import BaseModel, Field


class ImageUrlRequest(BaseModel):
    """Request body for extracting from a remote image."""

    image_url: str = Field(..., min_length=1)


class RawTextRequest(BaseModel):
    """Request body for extracting from already recognized text."""

    text: str


class IdentityResponse(BaseModel):
    """Response schema for the extracted identity fields."""

    id_number: str
    name: str
    date_of_birth: str | None = None
    gender: str | None = None
    masked_id_number: str


class ExtractionResponse(BaseModel):
    """Response schema for a successful extraction."""

    success: bool = True
    data: IdentityResponse
    raw_text: str


class ErrorResponse(BaseModel):
    """Uniform failure body."""

    success: bool = False
    error: str


class HealthResponse(BaseModel):
    """Response schema for the health check endpoint."""

    status: str
    version: str
    ocr_provider: str
    tesseract_available: bool
