"""Error taxonomy for the KYC OCR pipeline.

Every error is terminal for a single pipeline invocation. The pipeline
boundary converts them into a failed ``ProcessingResult``.
"""

from collections.abc import Sequence


class KycOcrError(Exception):
    """Base exception for all KYC OCR pipeline errors."""


class ImageFetchError(KycOcrError):
    """Raised when a source image cannot be retrieved."""


class ImageDecodeError(KycOcrError):
    """Raised when input bytes are not a decodable image."""


class OcrServiceError(KycOcrError):
    """Raised when the OCR provider fails or returns an unusable response."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ExtractionIncompleteError(KycOcrError):
    """Raised when OCR succeeded but required identity fields are missing."""

    def __init__(self, missing_fields: Sequence[str]) -> None:
        self.missing_fields = list(missing_fields)
        super().__init__(
            "Could not extract required fields: " + ", ".join(self.missing_fields)
        )
