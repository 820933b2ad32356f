"""Image types and decode/encode backends."""

from inline_media.images.backend import (
    EncodingFailed,
    ImageBackend,
    ImageCodecError,
    InvalidImage,
    PillowBackend,
)
from inline_media.images.types import EncodedAttachment, RawImage

__all__ = [
    "EncodedAttachment",
    "EncodingFailed",
    "ImageBackend",
    "ImageCodecError",
    "InvalidImage",
    "PillowBackend",
    "RawImage",
]
