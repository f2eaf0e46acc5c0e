"""Unified KYC document processing pipeline.

Combines image acquisition, enhancement, OCR, field extraction and the
validation gate into a single stateless call per uploaded document.
"""

from dataclasses import dataclass
from typing import Any

from kyc_ocr.exceptions import KycOcrError
from kyc_ocr.extraction.rule_extractor import ExtractedIdentity, RuleExtractor
from kyc_ocr.preprocessing.pipeline import EnhancementPipeline
from kyc_ocr.utils.config import AppConfig
from kyc_ocr.utils.logger import get_logger
from kyc_ocr.validation.rules_engine import IdentityValidator

from .base import BaseOCREngine
from .factory import OCREngineFactory
from .image_source import ImageLoader, ImageSource

logger = get_logger(__name__)


@dataclass
class ProcessingResult:
    """Outcome of one pipeline run; never a partial success."""

    success: bool
    data: ExtractedIdentity | None = None
    raw_text: str | None = None
    error: str | None = None
    error_type: str | None = None

    @classmethod
    def failure(cls, exc: Exception) -> "ProcessingResult":
        return cls(success=False, error=str(exc), error_type=type(exc).__name__)

    def to_dict(self) -> dict[str, Any]:
        """Render the ``{success, data, rawText}`` or ``{success, error}`` shape."""
        if not self.success:
            return {"success": False, "error": self.error}
        return {
            "success": True,
            "data": self.data.to_dict() if self.data else None,
            "rawText": self.raw_text,
        }


class KycDocumentProcessor:
    """End-to-end Aadhaar card processing pipeline.

    Runs fetch, enhance, OCR, extract and validate in sequence. Any
    pipeline error is caught here and reported as a failed result; each
    call is independent of every other.

    Args:
        config: Application configuration object.
        loader: Image source resolver.
        enhancer: Image enhancement pipeline.
        ocr_engine: Text recognition backend.
        extractor: Identity field extractor.
        validator: Post-extraction acceptance gate.
    """

    def __init__(
        self,
        config: AppConfig,
        loader: ImageLoader | None = None,
        enhancer: EnhancementPipeline | None = None,
        ocr_engine: BaseOCREngine | None = None,
        extractor: RuleExtractor | None = None,
        validator: IdentityValidator | None = None,
    ) -> None:
        self.config = config
        self.loader = loader or ImageLoader(
            timeout_seconds=config.fetch.timeout_seconds,
            max_bytes=config.fetch.max_bytes,
        )
        self.enhancer = enhancer or EnhancementPipeline(config.enhancement)
        self.ocr_engine = ocr_engine or OCREngineFactory.create(config.ocr)
        self.extractor = extractor or RuleExtractor()
        self.validator = validator or IdentityValidator.from_config(config.validation)

    def process(self, source: ImageSource) -> ProcessingResult:
        """Process an Aadhaar card image into a validated identity.

        Args:
            source: Raw image bytes, an image URL, or a local file path.

        Returns:
            Successful result with data and raw OCR text, or a failed
            result carrying the error message.
        """
        logger.info("Processing Aadhaar card image")
        try:
            image_bytes = self.loader.load(source)
            enhanced, _ = self.enhancer.process(image_bytes)
            text = self.ocr_engine.extract_text(enhanced)
            logger.debug("OCR text: %r", text)
            return self._extract_and_validate(text)
        except KycOcrError as exc:
            logger.warning("Aadhaar processing failed: %s", exc)
            return ProcessingResult.failure(exc)
        except Exception as exc:
            logger.exception("Unexpected error processing Aadhaar card")
            return ProcessingResult.failure(exc)

    def extract_from_text(self, text: str) -> ProcessingResult:
        """Run only extraction and validation on already recognized text."""
        try:
            return self._extract_and_validate(text)
        except KycOcrError as exc:
            logger.warning("Aadhaar text extraction failed: %s", exc)
            return ProcessingResult.failure(exc)
        except Exception as exc:
            logger.exception("Unexpected error extracting Aadhaar text")
            return ProcessingResult.failure(exc)

    def _extract_and_validate(self, text: str) -> ProcessingResult:
        identity = self.extractor.extract(text)
        logger.debug("Extracted details: %s", identity)
        self.validator.enforce(identity)
        logger.info(
            "Aadhaar processed for %s", identity.masked_id_number() or "unknown ID"
        )
        return ProcessingResult(success=True, data=identity, raw_text=text)
