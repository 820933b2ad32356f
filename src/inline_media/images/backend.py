"""Image decode/encode backends.

The compression algorithm only talks to an ImageBackend, so it can run
against Pillow in production and a fake backend in tests.
"""

import io
import logging
from typing import Protocol

from PIL import Image, ImageOps, UnidentifiedImageError

from inline_media.images.types import RawImage

logger = logging.getLogger(__name__)


class ImageCodecError(Exception):
    """Base class for image codec failures."""


class InvalidImage(ImageCodecError):
    """Raised when an image has no pixel data or non-positive dimensions."""


class EncodingFailed(ImageCodecError):
    """Raised when the encoder cannot produce any output."""


class ImageBackend(Protocol):
    """Platform image capability used by the codec."""

    def decode(self, data: bytes) -> RawImage:
        """Decode image bytes into a RawImage.

        Raises:
            InvalidImage: If the bytes are not a readable image.
        """
        ...

    def encode(self, image: RawImage, quality: float) -> bytes:
        """Encode an image with a lossy encoder at quality 0.0-1.0.

        Raises:
            EncodingFailed: If no output could be produced.
        """
        ...

    def resize(self, image: RawImage, width: int, height: int) -> RawImage:
        """Redraw an image at the given pixel size."""
        ...


def validate_image(image: RawImage) -> None:
    """Check that an image can be processed.

    Raises:
        InvalidImage: If data is absent or a dimension is not positive.
    """
    if image.data is None:
        raise InvalidImage("Image has no pixel data")
    if image.width <= 0 or image.height <= 0:
        raise InvalidImage(
            f"Image dimensions must be positive, got {image.width}x{image.height}"
        )


def quality_to_jpeg(quality: float) -> int:
    """Map a 0.0-1.0 quality onto Pillow's 1-95 JPEG quality scale."""
    clamped = min(max(quality, 0.0), 1.0)
    return max(1, min(95, round(clamped * 100)))


class PillowBackend:
    """JPEG backend built on Pillow."""

    def __init__(self, resample: Image.Resampling = Image.Resampling.LANCZOS) -> None:
        self.resample = resample

    def decode(self, data: bytes) -> RawImage:
        if not data:
            raise InvalidImage("Image data is empty")
        try:
            with io.BytesIO(data) as buffer:
                with Image.open(buffer) as img:
                    img.load()
                    decoded = ImageOps.exif_transpose(img)
        except (
            UnidentifiedImageError,
            Image.DecompressionBombError,
            OSError,
            ValueError,
        ) as e:
            raise InvalidImage(f"Could not decode image: {e}") from e

        width, height = decoded.size
        return RawImage(width=width, height=height, data=decoded)

    def encode(self, image: RawImage, quality: float) -> bytes:
        validate_image(image)
        img = _to_rgb(image.data)
        try:
            with io.BytesIO() as out:
                img.save(out, format="JPEG", quality=quality_to_jpeg(quality))
                encoded = out.getvalue()
        except (OSError, ValueError) as e:
            raise EncodingFailed(f"JPEG encoding failed: {e}") from e

        if not encoded:
            raise EncodingFailed("JPEG encoder produced no output")
        return encoded

    def resize(self, image: RawImage, width: int, height: int) -> RawImage:
        validate_image(image)
        resized = image.data.resize((width, height), self.resample)
        return RawImage(width=width, height=height, data=resized)


def _to_rgb(img: Image.Image) -> Image.Image:
    """Flatten transparency onto white, since JPEG has no alpha channel."""
    if img.mode == "RGB":
        return img
    if img.mode in ("RGBA", "LA", "P"):
        rgba = img.convert("RGBA")
        background = Image.new("RGB", rgba.size, (255, 255, 255))
        background.paste(rgba, mask=rgba.split()[-1])
        return background
    return img.convert("RGB")
