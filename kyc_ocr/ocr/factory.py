from kyc_ocr.ocr.base import BaseOCREngine
from kyc_ocr.ocr.ocr_space_client import OCRSpaceClient
from kyc_ocr.ocr.tesseract_engine import TesseractEngine
from kyc_ocr.utils.config import OCRConfig


class OCREngineFactory:
    """Creates the OCR backend selected by ``ocr.provider``."""

    PROVIDERS = ("ocr_space", "tesseract")

    @classmethod
    def create(cls, config: OCRConfig) -> BaseOCREngine:
        provider = config.provider.lower()
        if provider == "ocr_space":
            return OCRSpaceClient(config)
        if provider == "tesseract":
            return TesseractEngine(
                tesseract_cmd=config.tesseract_cmd,
                default_lang=config.language,
                psm=config.psm,
            )
        raise ValueError(
            f"Unknown OCR provider '{provider}'. Choose from: {list(cls.PROVIDERS)}"
        )
