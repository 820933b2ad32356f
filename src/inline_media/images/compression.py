"""Resize and compress picked images for inline transmission.

Images are scaled down so the longest side fits the configured dimension,
then JPEG-encoded with a quality back-off until the payload fits the byte
ceiling. The back-off is best-effort: if the lowest quality step is still
too large, that encoding is returned anyway.
"""

import logging
from pathlib import Path

from inline_media.config import Settings
from inline_media.images.backend import (
    EncodingFailed,
    ImageBackend,
    InvalidImage,
    validate_image,
)
from inline_media.images.types import EncodedAttachment, RawImage
from inline_media.wrapping import wrap

logger = logging.getLogger(__name__)


def scaled_size(width: int, height: int, max_dimension: int) -> tuple[int, int]:
    """Compute the size that fits max_dimension while keeping the aspect ratio.

    Args:
        width: Original width in pixels.
        height: Original height in pixels.
        max_dimension: Maximum length of either side.

    Returns:
        (width, height) of the scaled image. Unchanged if it already fits.
    """
    if width <= max_dimension and height <= max_dimension:
        return width, height

    aspect_ratio = width / height
    if width > height:
        new_width = max_dimension
        new_height = round(max_dimension / aspect_ratio)
    else:
        new_width = round(max_dimension * aspect_ratio)
        new_height = max_dimension
    return max(1, new_width), max(1, new_height)


def resize_image(
    image: RawImage, max_dimension: int, backend: ImageBackend
) -> RawImage:
    """Scale an image down so neither side exceeds max_dimension.

    Images that already fit are returned as-is; images are never upscaled.

    Args:
        image: Image to resize.
        max_dimension: Maximum length of either side in pixels.
        backend: Backend that performs the redraw.

    Returns:
        The original image or a resized copy.

    Raises:
        InvalidImage: If the image has no data or a non-positive dimension.
    """
    validate_image(image)
    if max_dimension <= 0:
        raise InvalidImage(f"max_dimension must be positive, got {max_dimension}")

    new_width, new_height = scaled_size(image.width, image.height, max_dimension)
    if (new_width, new_height) == (image.width, image.height):
        return image

    logger.info(
        "Resizing image from %sx%s to %sx%s",
        image.width,
        image.height,
        new_width,
        new_height,
    )
    return backend.resize(image, new_width, new_height)


def create_thumbnail(
    image: RawImage,
    backend: ImageBackend,
    max_dimension: int | None = None,
    settings: Settings | None = None,
) -> RawImage:
    """Create a small preview of an image.

    Args:
        image: Source image.
        backend: Backend that performs the redraw.
        max_dimension: Longest side of the thumbnail. Defaults to
            settings.thumbnail_dimension (100 px).
        settings: Codec settings; defaults are used when omitted.

    Returns:
        Resized image. No encoding is applied.
    """
    settings = settings or Settings()
    if max_dimension is None:
        max_dimension = settings.thumbnail_dimension
    return resize_image(image, max_dimension, backend)


def compress_image(
    image: RawImage,
    backend: ImageBackend,
    settings: Settings | None = None,
) -> EncodedAttachment:
    """Resize and encode an image, lowering quality until it fits.

    Tries each quality from settings.quality_steps() in turn and returns
    the first encoding within settings.max_image_size. If none fits, the
    last successful encoding is returned even though it is oversized.

    Args:
        image: Image to compress.
        backend: Backend used for resizing and encoding.
        settings: Codec settings; defaults are used when omitted.

    Returns:
        The compressed attachment.

    Raises:
        InvalidImage: If the image is not processable.
        EncodingFailed: If the encoder produced no output at any quality.
    """
    settings = settings or Settings()
    resized = resize_image(image, settings.max_image_dimension, backend)

    attachment: EncodedAttachment | None = None
    for quality in settings.quality_steps():
        try:
            data = backend.encode(resized, quality)
        except EncodingFailed as e:
            logger.debug("Encoding at quality %.1f failed: %s", quality, e)
            continue

        attachment = EncodedAttachment(data=data, quality=quality)
        logger.debug("Encoded at quality %.1f: %d bytes", quality, attachment.size)
        if attachment.size <= settings.max_image_size:
            return attachment

    if attachment is None:
        raise EncodingFailed("Encoder produced no output at any quality step")

    logger.warning(
        "Image still %d bytes at quality %.1f, above the %d byte limit",
        attachment.size,
        attachment.quality,
        settings.max_image_size,
    )
    return attachment


def load_image_file(path: str | Path, backend: ImageBackend) -> RawImage:
    """Read and decode an image file chosen by the user.

    Raises:
        InvalidImage: If the file cannot be read or decoded.
    """
    try:
        data = Path(path).read_bytes()
    except OSError as e:
        raise InvalidImage(f"Could not read image file {path}: {e}") from e
    return backend.decode(data)


def encode_image_bytes(
    data: bytes,
    backend: ImageBackend,
    settings: Settings | None = None,
) -> str:
    """Turn picked image bytes into wrapped message text.

    Args:
        data: Raw image file bytes (any format the backend can decode).
        backend: Backend used for decoding, resizing and encoding.
        settings: Codec settings; defaults are used when omitted.

    Returns:
        "<image>BASE64</image>" text ready to send.
    """
    image = backend.decode(data)
    return wrap(compress_image(image, backend, settings))
