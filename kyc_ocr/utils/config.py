"""Configuration management for the KYC OCR service.

Loads and validates YAML configuration with sensible defaults for image
acquisition, enhancement, OCR and the identity validation gate.
"""

import logging
import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

OCR_API_KEY_ENV = "OCR_API_KEY"


class FetchConfig(BaseModel):
    """Configuration for remote image acquisition."""

    timeout_seconds: float = 30.0
    max_bytes: int | None = 10 * 1024 * 1024


class EnhancementConfig(BaseModel):
    """Configuration for the image enhancement pipeline."""

    grayscale_enabled: bool = True
    normalize_enabled: bool = True
    sharpen_enabled: bool = True
    jpeg_quality: int = Field(default=95, ge=1, le=100)
    pdf_dpi: int = 300


class OCRConfig(BaseModel):
    """Configuration for the OCR provider.

    ``max_attempts`` of 1 means OCR failures are never retried.
    """

    provider: str = "ocr_space"
    api_key: str | None = None
    endpoint: str = "https://api.ocr.space/parse/image"
    language: str = "eng"
    engine: int = 1
    scale: bool = False
    timeout_seconds: float = 30.0
    max_attempts: int = Field(default=1, ge=1)
    retry_wait_seconds: float = 1.0
    tesseract_cmd: str | None = None
    psm: int = 6


class ValidationConfig(BaseModel):
    """Configuration for the post-extraction identity gate."""

    required_fields: list[str] = Field(default_factory=lambda: ["id_number", "name"])
    id_length: int = 12


class AppConfig(BaseModel):
    """Top-level application configuration."""

    fetch: FetchConfig = Field(default_factory=FetchConfig)
    enhancement: EnhancementConfig = Field(default_factory=EnhancementConfig)
    ocr: OCRConfig = Field(default_factory=OCRConfig)
    validation: ValidationConfig = Field(default_factory=ValidationConfig)
    log_level: str = "INFO"


def load_config(path: Path | None = None) -> AppConfig:
    """Load configuration from a YAML file.

    The ``OCR_API_KEY`` environment variable, when set, overrides
    ``ocr.api_key`` from the file.

    Args:
        path: Path to the YAML configuration file.
            Defaults to configs/config.yaml.

    Returns:
        Validated application configuration.
    """
    if path is None:
        path = Path("configs/config.yaml")

    if path.exists():
        logger.info("Loading configuration from %s", path)
        with open(path) as f:
            raw = yaml.safe_load(f) or {}
        config = AppConfig(**raw)
    else:
        logger.info("No config file found at %s, using defaults", path)
        config = AppConfig()

    api_key = os.environ.get(OCR_API_KEY_ENV)
    if api_key:
        config.ocr.api_key = api_key
    return config
