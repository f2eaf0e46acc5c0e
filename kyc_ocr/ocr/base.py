from abc import ABC, abstractmethod


class BaseOCREngine(ABC):
    """Contract for all text recognition backends."""

    @abstractmethod
    def extract_text(self, image_bytes: bytes) -> str:
        """Recognize text in an encoded image.

        Args:
            image_bytes: Enhanced image bytes.

        Returns:
            Raw recognized text, possibly with embedded newlines.

        Raises:
            OcrServiceError: if recognition fails for any reason.
        """
