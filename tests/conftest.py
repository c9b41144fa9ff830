"""
Test configuration and fixtures for Palettemill tests.
"""
import io

import numpy as np
import pytest
from fastapi.testclient import TestClient
from PIL import Image

from main import app


@pytest.fixture
def test_client():
    """Create test client for the FastAPI app."""
    return TestClient(app)


@pytest.fixture(autouse=True)
def reset_metrics():
    """Reset metrics before each test."""
    from palettemill.utils.metrics import reset_metrics
    reset_metrics()


@pytest.fixture
def three_color_pixels():
    """4 red, 2 green, 2 blue samples."""
    return [(255, 0, 0)] * 4 + [(0, 255, 0)] * 2 + [(0, 0, 255)] * 2


@pytest.fixture
def png_bytes():
    """Encode an RGBA array or a PIL image as PNG bytes."""
    def _encode(image):
        if isinstance(image, np.ndarray):
            image = Image.fromarray(image)
        buffer = io.BytesIO()
        image.save(buffer, format="PNG")
        return buffer.getvalue()
    return _encode
