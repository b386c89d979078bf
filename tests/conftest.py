# tests/conftest.py
"""Root pytest configuration and shared fixtures."""

import os
import tempfile
from io import BytesIO

# Settings are read at import time, so the environment must be in place
# before anything from charity_cms is imported
os.environ["LOG_TO_FILE"] = "false"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["UPLOADS_DIR"] = tempfile.mkdtemp(prefix="charity_cms_uploads_")
os.environ["DEBUG"] = "false"

import pytest  # noqa: E402
from PIL import Image  # noqa: E402

from tests.fakes import InMemoryStorage  # noqa: E402


@pytest.fixture
def memory_storage() -> InMemoryStorage:
    """Create an empty in-memory storage backend."""
    return InMemoryStorage()


@pytest.fixture
def valid_jpeg_bytes() -> bytes:
    """Create valid JPEG image bytes."""
    img = Image.new("RGB", (200, 200), color="red")
    buffer = BytesIO()
    img.save(buffer, format="JPEG")
    return buffer.getvalue()


@pytest.fixture
def valid_png_bytes() -> bytes:
    """Create valid PNG image bytes."""
    img = Image.new("RGBA", (200, 200), color="blue")
    buffer = BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def invalid_image_bytes() -> bytes:
    """Create invalid image bytes (not a real image)."""
    return b"not a valid image content"
