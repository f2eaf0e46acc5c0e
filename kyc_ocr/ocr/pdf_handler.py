"""PDF rasterization for scanned identity documents.

Renders PDF uploads to BGR arrays so they can go through the same
enhancement path as photographed cards.
"""

from pathlib import Path

import cv2
import numpy as np
from pdf2image import convert_from_bytes, convert_from_path
from pdf2image.exceptions import (
    PDFInfoNotInstalledError,
    PDFPageCountError,
    PDFSyntaxError,
)

from kyc_ocr.exceptions import ImageDecodeError
from kyc_ocr.utils.logger import get_logger

logger = get_logger(__name__)

PDF_MAGIC = b"%PDF"


def is_pdf(data: bytes) -> bool:
    """Return True if the bytes look like a PDF document."""
    return data[:4] == PDF_MAGIC


class PDFHandler:
    """Handles PDF to image conversion for OCR processing.

    Args:
        dpi: Resolution for PDF rendering. Higher values produce
            better OCR results but use more memory.
    """

    def __init__(self, dpi: int = 300) -> None:
        self.dpi = dpi

    def pdf_to_images(
        self, pdf_source: Path | bytes, max_pages: int | None = None
    ) -> list[np.ndarray]:
        """Convert a PDF to a list of BGR images.

        Args:
            pdf_source: Path to a PDF file or raw PDF bytes.
            max_pages: Render at most this many pages from the start.

        Returns:
            List of images as numpy arrays (BGR format).

        Raises:
            FileNotFoundError: If a path is given and the file does not exist.
            ImageDecodeError: If PDF conversion fails.
        """
        kwargs: dict[str, int] = {"dpi": self.dpi}
        if max_pages is not None:
            kwargs["first_page"] = 1
            kwargs["last_page"] = max_pages

        try:
            if isinstance(pdf_source, str | Path):
                path = Path(pdf_source)
                if not path.exists():
                    raise FileNotFoundError(f"PDF file not found: {path}")
                pil_images = convert_from_path(str(path), **kwargs)
            else:
                pil_images = convert_from_bytes(pdf_source, **kwargs)
        except FileNotFoundError:
            raise
        except (
            PDFInfoNotInstalledError,
            PDFPageCountError,
            PDFSyntaxError,
            ValueError,
        ) as exc:
            raise ImageDecodeError(f"PDF conversion failed: {exc}") from exc

        images = [
            cv2.cvtColor(np.array(img.convert("RGB")), cv2.COLOR_RGB2BGR)
            for img in pil_images
        ]
        logger.info("Converted PDF to %d images at %d DPI", len(images), self.dpi)
        return images

    def first_page(self, pdf_source: Path | bytes) -> np.ndarray:
        """Render only the first page of a PDF.

        Raises:
            ImageDecodeError: If the PDF has no renderable pages.
        """
        images = self.pdf_to_images(pdf_source, max_pages=1)
        if not images:
            raise ImageDecodeError("PDF contains no pages")
        return images[0]
