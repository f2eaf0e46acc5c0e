"""Image acquisition for KYC documents.

Resolves an upload source (raw bytes, an HTTP(S) URL or a local path)
to image bytes ready for enhancement.
"""

from pathlib import Path

import httpx

from kyc_ocr.exceptions import ImageDecodeError, ImageFetchError
from kyc_ocr.utils.logger import get_logger

logger = get_logger(__name__)

ImageSource = bytes | bytearray | str | Path


class ImageLoader:
    """Loads document image bytes from memory, the network or disk.

    Args:
        timeout_seconds: Timeout for remote image downloads.
        max_bytes: Reject downloads larger than this many bytes.
            ``None`` disables the check.
        transport: Optional httpx transport, mainly for tests.
    """

    def __init__(
        self,
        timeout_seconds: float = 30.0,
        max_bytes: int | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.timeout_seconds = timeout_seconds
        self.max_bytes = max_bytes
        self._transport = transport

    def load(self, source: ImageSource) -> bytes:
        """Resolve a source to raw image bytes.

        Args:
            source: Raw bytes, an ``http``/``https`` URL, or a filesystem path.

        Returns:
            Image bytes.

        Raises:
            ImageDecodeError: If in-memory bytes are empty.
            ImageFetchError: If the URL or file cannot be read.
        """
        if isinstance(source, bytes | bytearray):
            if not source:
                raise ImageDecodeError("Image data is empty")
            return bytes(source)

        if isinstance(source, str) and source.startswith("http"):
            return self._download(source)

        return self._read_file(Path(source))

    def _download(self, url: str) -> bytes:
        logger.info("Downloading document image from %s", url)
        try:
            with httpx.Client(
                timeout=self.timeout_seconds,
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                with client.stream("GET", url) as response:
                    response.raise_for_status()
                    content = self._read_body(response)
        except httpx.HTTPStatusError as exc:
            raise ImageFetchError(
                f"Image download failed with HTTP {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise ImageFetchError(f"Image download failed: {exc}") from exc

        if not content:
            raise ImageFetchError(f"Image download returned no data: {url}")

        logger.debug("Downloaded %d bytes", len(content))
        return content

    def _read_body(self, response: httpx.Response) -> bytes:
        """Read a streamed body, stopping as soon as it passes ``max_bytes``."""
        if self.max_bytes is None:
            return response.read()

        declared = response.headers.get("content-length", "")
        if declared.isdigit() and int(declared) > self.max_bytes:
            raise ImageFetchError(
                f"Image is {declared} bytes, limit is {self.max_bytes}"
            )

        chunks: list[bytes] = []
        received = 0
        for chunk in response.iter_bytes():
            received += len(chunk)
            if received > self.max_bytes:
                raise ImageFetchError(
                    f"Image is at least {received} bytes, limit is {self.max_bytes}"
                )
            chunks.append(chunk)
        return b"".join(chunks)

    def _read_file(self, path: Path) -> bytes:
        try:
            if not path.is_file():
                raise ImageFetchError(f"Image file not found: {path}")
            return path.read_bytes()
        except OSError as exc:
            raise ImageFetchError(f"Could not read image file {path}: {exc}") from exc
