"""Inline image attachments and link extraction for chat messages."""

from inline_media.config import Settings, load_settings
from inline_media.images import (
    EncodedAttachment,
    EncodingFailed,
    ImageBackend,
    ImageCodecError,
    InvalidImage,
    PillowBackend,
    RawImage,
)
from inline_media.images.compression import (
    compress_image,
    create_thumbnail,
    encode_image_bytes,
    load_image_file,
    resize_image,
)
from inline_media.links import LinkReference, extract_links, extract_markdown_link
from inline_media.wrapping import (
    contains_image,
    strip_images,
    unwrap,
    unwrap_all,
    wrap,
)

__all__ = [
    "EncodedAttachment",
    "EncodingFailed",
    "ImageBackend",
    "ImageCodecError",
    "InvalidImage",
    "LinkReference",
    "PillowBackend",
    "RawImage",
    "Settings",
    "compress_image",
    "contains_image",
    "create_thumbnail",
    "encode_image_bytes",
    "extract_links",
    "extract_markdown_link",
    "load_image_file",
    "load_settings",
    "resize_image",
    "strip_images",
    "unwrap",
    "unwrap_all",
    "wrap",
]
