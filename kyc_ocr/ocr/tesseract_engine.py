"""Local Tesseract OCR backend.

Alternative to the hosted OCR.Space API for deployments that cannot
send identity documents to a third party.
"""

import io
import shutil

import pytesseract
from PIL import Image, UnidentifiedImageError

from kyc_ocr.exceptions import ImageDecodeError, OcrServiceError
from kyc_ocr.ocr.base import BaseOCREngine
from kyc_ocr.utils.logger import get_logger

logger = get_logger(__name__)


class TesseractEngine(BaseOCREngine):
    """Wrapper around Tesseract OCR for document text extraction.

    Args:
        tesseract_cmd: Path to the Tesseract executable.
            If ``None``, uses the system default.
        default_lang: OCR language code.
        psm: Tesseract page segmentation mode.
    """

    def __init__(
        self,
        tesseract_cmd: str | None = None,
        default_lang: str = "eng",
        psm: int = 6,
    ) -> None:
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd
        self.default_lang = default_lang
        self.psm = psm

    @staticmethod
    def is_available() -> bool:
        """Return True if a ``tesseract`` binary is on the PATH."""
        return shutil.which("tesseract") is not None

    def extract_text(self, image_bytes: bytes) -> str:
        """Extract text from encoded image bytes.

        Raises:
            ImageDecodeError: If Pillow cannot open the bytes.
            OcrServiceError: If Tesseract is missing or fails.
        """
        try:
            pil_image = Image.open(io.BytesIO(image_bytes))
        except UnidentifiedImageError as exc:
            raise ImageDecodeError("Input bytes are not a decodable image") from exc

        try:
            text = pytesseract.image_to_string(
                pil_image, lang=self.default_lang, config=f"--psm {self.psm}"
            )
        except pytesseract.TesseractNotFoundError as exc:
            raise OcrServiceError("Tesseract is not installed") from exc
        except pytesseract.TesseractError as exc:
            raise OcrServiceError(f"Tesseract failed: {exc.message}") from exc

        logger.info("Tesseract returned %d characters", len(text))
        return text
