"""Shared test fixtures for inline-media."""

import io

import pytest
from PIL import Image

from inline_media.images import PillowBackend

from tests.fakes import FakeImageBackend


@pytest.fixture
def fake_backend() -> FakeImageBackend:
    """Create a fake backend for testing."""
    return FakeImageBackend()


@pytest.fixture
def pillow_backend() -> PillowBackend:
    """Create the production Pillow backend."""
    return PillowBackend()


@pytest.fixture
def png_bytes() -> bytes:
    """A 1600x1200 gradient PNG."""
    img = Image.linear_gradient("L").resize((1600, 1200)).convert("RGB")
    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def transparent_png_bytes() -> bytes:
    """A small RGBA PNG with a transparent background."""
    img = Image.new("RGBA", (64, 32), (0, 0, 0, 0))
    img.paste((255, 0, 0, 255), (16, 8, 48, 24))
    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()



@pytest.fixture
def rotated_jpeg_bytes() -> bytes:
    """A 1600x800 JPEG tagged with EXIF Orientation 6 (rotate 90 CW)."""
    img = Image.new("RGB", (1600, 800), (40, 120, 200))
    exif = Image.Exif()
    exif[0x0112] = 6
    buffer = io.BytesIO()
    img.save(buffer, format="JPEG", exif=exif)
    return buffer.getvalue()
