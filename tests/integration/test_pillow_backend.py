"""Integration tests for the Pillow backend and the full encode pipeline."""

import io
import random
from pathlib import Path

import pytest
from PIL import Image

from inline_media.config import Settings
from inline_media.images import InvalidImage, PillowBackend, RawImage
from inline_media.images.backend import quality_to_jpeg
from inline_media.images.compression import (
    compress_image,
    create_thumbnail,
    encode_image_bytes,
    load_image_file,
)
from inline_media.wrapping import contains_image, unwrap


JPEG_MAGIC = b"\xff\xd8\xff"


@pytest.mark.integration
class TestPillowBackend:
    """Integration tests for PillowBackend."""

    def test_decode_png(self, pillow_backend: PillowBackend, png_bytes: bytes) -> None:
        image = pillow_backend.decode(png_bytes)
        assert (image.width, image.height) == (1600, 1200)

    def test_decode_garbage_raises(self, pillow_backend: PillowBackend) -> None:
        with pytest.raises(InvalidImage, match="Could not decode"):
            pillow_backend.decode(b"definitely not an image")

    def test_decode_empty_raises(self, pillow_backend: PillowBackend) -> None:
        with pytest.raises(InvalidImage, match="empty"):
            pillow_backend.decode(b"")

    def test_decode_oversized_raises(
        self,
        pillow_backend: PillowBackend,
        png_bytes: bytes,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Test Pillow's pixel-count guard surfaces as InvalidImage."""
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 1000)

        with pytest.raises(InvalidImage, match="Could not decode"):
            pillow_backend.decode(png_bytes)

    def test_decode_applies_exif_orientation(
        self, pillow_backend: PillowBackend, rotated_jpeg_bytes: bytes
    ) -> None:
        """Test a rotated phone photo decodes upright."""
        image = pillow_backend.decode(rotated_jpeg_bytes)

        assert (image.width, image.height) == (800, 1600)
        assert image.data.size == (800, 1600)

    def test_encode_produces_jpeg(
        self, pillow_backend: PillowBackend, png_bytes: bytes
    ) -> None:
        data = pillow_backend.encode(pillow_backend.decode(png_bytes), 0.8)
        assert data.startswith(JPEG_MAGIC)

    def test_lower_quality_is_smaller(
        self, pillow_backend: PillowBackend, png_bytes: bytes
    ) -> None:
        image = pillow_backend.decode(png_bytes)
        assert len(pillow_backend.encode(image, 0.2)) < len(
            pillow_backend.encode(image, 0.8)
        )

    def test_transparency_flattened_to_white(
        self, pillow_backend: PillowBackend, transparent_png_bytes: bytes
    ) -> None:
        """Test RGBA images encode with the transparent area turned white."""
        data = pillow_backend.encode(pillow_backend.decode(transparent_png_bytes), 0.8)

        with Image.open(io.BytesIO(data)) as decoded:
            assert decoded.mode == "RGB"
            r, g, b = decoded.getpixel((0, 0))
        assert min(r, g, b) > 240

    def test_encode_grayscale(self, pillow_backend: PillowBackend) -> None:
        image = RawImage(width=10, height=10, data=Image.new("L", (10, 10), 128))
        assert pillow_backend.encode(image, 0.5).startswith(JPEG_MAGIC)

    def test_resize(self, pillow_backend: PillowBackend, png_bytes: bytes) -> None:
        image = pillow_backend.resize(pillow_backend.decode(png_bytes), 80, 60)
        assert (image.width, image.height) == (80, 60)
        assert image.data.size == (80, 60)

    @pytest.mark.parametrize(
        "quality,expected",
        [(0.8, 80), (0.2, 20), (0.0, 1), (1.0, 95), (1.7, 95), (-0.5, 1)],
    )
    def test_quality_mapping(self, quality: float, expected: int) -> None:
        assert quality_to_jpeg(quality) == expected


@pytest.mark.integration
class TestPipeline:
    """End-to-end tests from picked bytes to wrapped message text."""

    def test_encode_image_bytes(
        self, pillow_backend: PillowBackend, png_bytes: bytes
    ) -> None:
        text = encode_image_bytes(png_bytes, pillow_backend)

        assert contains_image(text)
        attachment = unwrap(text)
        assert attachment is not None
        assert attachment.size <= 500 * 1024
        decoded = pillow_backend.decode(attachment.data)
        assert (decoded.width, decoded.height) == (800, 600)

    def test_rotated_photo_stays_upright(
        self, pillow_backend: PillowBackend, rotated_jpeg_bytes: bytes
    ) -> None:
        """Test resizing uses the upright longer side and the output is upright."""
        attachment = unwrap(encode_image_bytes(rotated_jpeg_bytes, pillow_backend))

        assert attachment is not None
        with Image.open(io.BytesIO(attachment.data)) as decoded:
            assert decoded.size == (400, 800)
            assert decoded.getexif().get(0x0112) in (None, 1)

    def test_oversized_bytes_raise_codec_error(
        self,
        pillow_backend: PillowBackend,
        png_bytes: bytes,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 1000)

        with pytest.raises(InvalidImage):
            encode_image_bytes(png_bytes, pillow_backend)

    def test_thumbnail(self, pillow_backend: PillowBackend, png_bytes: bytes) -> None:
        thumb = create_thumbnail(pillow_backend.decode(png_bytes), pillow_backend)
        assert (thumb.width, thumb.height) == (100, 75)

    def test_load_image_file(
        self, pillow_backend: PillowBackend, png_bytes: bytes, tmp_path: Path
    ) -> None:
        path = tmp_path / "picked.png"
        path.write_bytes(png_bytes)

        image = load_image_file(path, pillow_backend)

        assert (image.width, image.height) == (1600, 1200)

    def test_load_missing_file_raises(
        self, pillow_backend: PillowBackend, tmp_path: Path
    ) -> None:
        with pytest.raises(InvalidImage, match="Could not read"):
            load_image_file(tmp_path / "missing.png", pillow_backend)

    def test_high_entropy_image(self, pillow_backend: PillowBackend) -> None:
        """Test a 4000x4000 noise image meets the cap or stops at quality 0.2."""
        settings = Settings()
        noise = random.Random(0).randbytes(4000 * 4000 * 3)
        image = RawImage(
            width=4000,
            height=4000,
            data=Image.frombytes("RGB", (4000, 4000), noise),
        )

        attachment = compress_image(image, pillow_backend, settings)

        assert attachment.data.startswith(JPEG_MAGIC)
        assert (
            attachment.size <= settings.max_image_size
            or attachment.quality == pytest.approx(0.2)
        )
        decoded = pillow_backend.decode(attachment.data)
        assert (decoded.width, decoded.height) == (800, 800)
