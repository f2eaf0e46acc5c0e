"""Shared test fixtures for the KYC OCR test suite."""

import io
from pathlib import Path

import numpy as np
import pytest
from PIL import Image

SAMPLE_AADHAAR_TEXT = (
    "GOVERNMENT OF INDIA\nRAHUL SHARMA\n1234 5678 9012\nDOB: 01/01/1990\nMale"
)


def make_png_bytes(height: int = 100, width: int = 200) -> bytes:
    """Create a small synthetic color PNG as bytes."""
    image = np.zeros((height, width, 3), dtype=np.uint8)
    image[20:80, 40:160] = (180, 120, 60)
    buf = io.BytesIO()
    Image.fromarray(image).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def sample_image() -> np.ndarray:
    """Create a simple synthetic grayscale test image."""
    image = np.zeros((200, 300), dtype=np.uint8)
    image[50:150, 50:250] = 255
    return image


@pytest.fixture
def sample_color_image() -> np.ndarray:
    """Create a simple synthetic BGR test image."""
    image = np.zeros((200, 300, 3), dtype=np.uint8)
    image[50:150, 50:250] = (255, 255, 255)
    return image


@pytest.fixture
def png_bytes() -> bytes:
    """Encoded PNG bytes of a synthetic card-like image."""
    return make_png_bytes()


@pytest.fixture
def aadhaar_text() -> str:
    """Typical OCR output for the front of an Aadhaar card."""
    return SAMPLE_AADHAAR_TEXT


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def config_dir(project_root: Path) -> Path:
    """Return the configs directory path."""
    return project_root / "configs"
