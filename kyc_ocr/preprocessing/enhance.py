"""Image enhancement primitives for identity document OCR.

Grayscale conversion, min/max intensity normalization and kernel
sharpening, plus the byte-level decode and encode helpers around them.
"""

import cv2
import numpy as np

from kyc_ocr.exceptions import ImageDecodeError
from kyc_ocr.utils.logger import get_logger

logger = get_logger(__name__)

SHARPEN_KERNEL = np.array(
    [
        [0, -1, 0],
        [-1, 5, -1],
        [0, -1, 0],
    ],
    dtype=np.float32,
)


def decode_image(data: bytes) -> np.ndarray:
    """Decode encoded image bytes into a BGR array.

    Args:
        data: Encoded image bytes (JPEG, PNG, TIFF, ...).

    Returns:
        Decoded image as a BGR numpy array.

    Raises:
        ImageDecodeError: If the bytes are empty or not a decodable image.
    """
    if not data:
        raise ImageDecodeError("Image data is empty")

    buffer = np.frombuffer(data, dtype=np.uint8)
    image = cv2.imdecode(buffer, cv2.IMREAD_COLOR)
    if image is None:
        raise ImageDecodeError("Input bytes are not a decodable image")

    logger.debug("Decoded image %dx%d", image.shape[1], image.shape[0])
    return image


def encode_image(image: np.ndarray, quality: int = 95) -> bytes:
    """Encode an image array as JPEG bytes.

    Args:
        image: Grayscale or BGR image.
        quality: JPEG quality from 1 to 100.

    Returns:
        JPEG-encoded bytes.
    """
    ok, buffer = cv2.imencode(".jpg", image, [cv2.IMWRITE_JPEG_QUALITY, quality])
    if not ok:
        raise ImageDecodeError("Failed to encode enhanced image as JPEG")
    return buffer.tobytes()


def to_grayscale(image: np.ndarray) -> np.ndarray:
    """Convert an image to a single grayscale channel if it has color channels."""
    if len(image.shape) == 3:
        return cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
    return image


def normalize_intensity(image: np.ndarray) -> np.ndarray:
    """Stretch pixel intensities to the full 0..255 range.

    A flat image (single intensity) is returned unchanged.

    Args:
        image: Grayscale or BGR image.

    Returns:
        Normalized image of the same shape.
    """
    low, high = int(image.min()), int(image.max())
    if low == high:
        logger.debug("Flat image, skipping normalization")
        return image.copy()

    result = cv2.normalize(image, None, 0, 255, cv2.NORM_MINMAX)
    logger.debug("Normalized intensity range %d..%d to 0..255", low, high)
    return result


def sharpen(image: np.ndarray) -> np.ndarray:
    """Apply a 3x3 sharpening kernel."""
    return cv2.filter2D(image, -1, SHARPEN_KERNEL)
