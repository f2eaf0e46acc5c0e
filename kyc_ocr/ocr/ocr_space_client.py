"""OCR.Space API client.

Uploads an enhanced document image as multipart form data and returns
the text of the first parsed result.
"""

from typing import Any

import httpx
from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from kyc_ocr.exceptions import OcrServiceError
from kyc_ocr.ocr.base import BaseOCREngine
from kyc_ocr.utils.config import OCRConfig
from kyc_ocr.utils.logger import get_logger

logger = get_logger(__name__)

UPLOAD_FILENAME = "aadhaar.jpg"
UPLOAD_CONTENT_TYPE = "image/jpeg"


def _provider_message(payload: dict[str, Any]) -> str | None:
    """Flatten the provider's ``ErrorMessage`` field, which may be a list."""
    message = payload.get("ErrorMessage")
    if isinstance(message, list):
        message = "; ".join(str(m) for m in message if m)
    return message or payload.get("ErrorDetails") or None


class OCRSpaceClient(BaseOCREngine):
    """Text recognition through the OCR.Space HTTP API.

    Retries are opt-in: with ``config.max_attempts == 1`` a failure is
    raised immediately.

    Args:
        config: OCR configuration (endpoint, key, timeout, retry policy).
        transport: Optional httpx transport, mainly for tests.
    """

    def __init__(
        self,
        config: OCRConfig,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.config = config
        self._transport = transport

    def extract_text(self, image_bytes: bytes) -> str:
        """Run OCR on an image and return the first parsed text block.

        Args:
            image_bytes: Enhanced JPEG bytes.

        Returns:
            Recognized text, possibly with embedded newlines.

        Raises:
            OcrServiceError: On network failure, a non-2xx response, or a
                response without a usable ``ParsedResults`` entry.
        """
        retrying = Retrying(
            stop=stop_after_attempt(self.config.max_attempts),
            wait=wait_exponential(multiplier=self.config.retry_wait_seconds),
            retry=retry_if_exception_type(OcrServiceError),
            before_sleep=self._log_retry,
            reraise=True,
        )
        return retrying(self._request, image_bytes)

    def _log_retry(self, retry_state: Any) -> None:
        logger.warning(
            "OCR attempt %d failed (%s), retrying",
            retry_state.attempt_number,
            retry_state.outcome.exception(),
        )

    def _request(self, image_bytes: bytes) -> str:
        if not self.config.api_key:
            logger.warning("No OCR API key configured, request will likely fail")

        files = {"file": (UPLOAD_FILENAME, image_bytes, UPLOAD_CONTENT_TYPE)}
        data = {
            "language": self.config.language,
            "OCREngine": str(self.config.engine),
            "scale": "true" if self.config.scale else "false",
        }
        headers = {"apikey": self.config.api_key or ""}

        try:
            with httpx.Client(
                timeout=self.config.timeout_seconds,
                transport=self._transport,
            ) as client:
                response = client.post(
                    self.config.endpoint, files=files, data=data, headers=headers
                )
        except httpx.HTTPError as exc:
            raise OcrServiceError(f"OCR service unreachable: {exc}") from exc

        if not response.is_success:
            raise OcrServiceError(
                f"OCR service returned HTTP {response.status_code}: "
                f"{response.text[:200]}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise OcrServiceError("OCR service returned a non-JSON response") from exc

        return self._parse_payload(payload, response.status_code)

    def _parse_payload(self, payload: Any, status_code: int) -> str:
        if not isinstance(payload, dict):
            raise OcrServiceError(
                "OCR service returned an unexpected response body",
                status_code=status_code,
            )

        if payload.get("IsErroredOnProcessing"):
            message = _provider_message(payload) or "OCR processing failed"
            raise OcrServiceError(message, status_code=status_code)

        results = payload.get("ParsedResults")
        if not isinstance(results, list) or not results:
            message = _provider_message(payload)
            raise OcrServiceError(
                message or "OCR API did not return valid results",
                status_code=status_code,
            )

        first = results[0] if isinstance(results[0], dict) else {}
        text = first.get("ParsedText")
        if not isinstance(text, str):
            raise OcrServiceError(
                first.get("ErrorMessage") or "OCR API did not return parsed text",
                status_code=status_code,
            )

        logger.info("OCR returned %d characters", len(text))
        return text
