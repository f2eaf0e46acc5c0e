"""Configurable image enhancement pipeline for identity document OCR.

Decodes the source bytes, applies grayscale, normalization and sharpening
steps, and re-encodes the result as JPEG with quality metrics tracking.
"""

from dataclasses import dataclass

import cv2
import numpy as np

from kyc_ocr.ocr.pdf_handler import PDFHandler, is_pdf
from kyc_ocr.utils.config import EnhancementConfig
from kyc_ocr.utils.logger import get_logger

from .enhance import (
    decode_image,
    encode_image,
    normalize_intensity,
    sharpen,
    to_grayscale,
)

logger = get_logger(__name__)


@dataclass
class QualityMetrics:
    """Before/after image quality measurements."""

    sharpness_before: float
    sharpness_after: float
    contrast_before: float
    contrast_after: float


def calculate_sharpness(image: np.ndarray) -> float:
    """Calculate image sharpness using Laplacian variance.

    Args:
        image: Input image (BGR or grayscale).

    Returns:
        Sharpness score (higher means sharper).
    """
    gray = to_grayscale(image)
    return float(cv2.Laplacian(gray, cv2.CV_64F).var())


def calculate_contrast(image: np.ndarray) -> float:
    """Calculate image contrast as the standard deviation of pixel intensities.

    Args:
        image: Input image (BGR or grayscale).

    Returns:
        Contrast score (higher means more contrast).
    """
    gray = to_grayscale(image)
    return float(gray.std())


class EnhancementPipeline:
    """Image enhancement pipeline run before OCR.

    A pure transform from image bytes to JPEG bytes. No resizing or
    cropping is performed. PDF input is rasterized and its first page
    enhanced.

    Args:
        config: Enhancement configuration controlling which steps to apply.
        pdf_handler: PDF rasterizer; built from ``config.pdf_dpi`` if omitted.
    """

    def __init__(
        self,
        config: EnhancementConfig,
        pdf_handler: PDFHandler | None = None,
    ) -> None:
        self.config = config
        self.pdf_handler = pdf_handler or PDFHandler(dpi=config.pdf_dpi)

    def enhance_array(self, image: np.ndarray) -> np.ndarray:
        """Apply the enabled enhancement steps to a decoded image."""
        result = image.copy()

        if self.config.grayscale_enabled:
            result = to_grayscale(result)

        if self.config.normalize_enabled:
            result = normalize_intensity(result)

        if self.config.sharpen_enabled:
            result = sharpen(result)

        return result

    def process(self, data: bytes) -> tuple[bytes, QualityMetrics]:
        """Run the enhancement pipeline on encoded image bytes.

        Args:
            data: Encoded image or PDF bytes.

        Returns:
            Tuple of (jpeg_bytes, quality_metrics).

        Raises:
            ImageDecodeError: If the input cannot be decoded.
        """
        if is_pdf(data):
            image = self.pdf_handler.first_page(data)
        else:
            image = decode_image(data)

        metrics = QualityMetrics(
            sharpness_before=calculate_sharpness(image),
            contrast_before=calculate_contrast(image),
            sharpness_after=0.0,
            contrast_after=0.0,
        )

        result = self.enhance_array(image)

        metrics.sharpness_after = calculate_sharpness(result)
        metrics.contrast_after = calculate_contrast(result)

        logger.info(
            "Enhancement complete: sharpness %.1f->%.1f, contrast %.1f->%.1f",
            metrics.sharpness_before,
            metrics.sharpness_after,
            metrics.contrast_before,
            metrics.contrast_after,
        )
        return encode_image(result, quality=self.config.jpeg_quality), metrics
