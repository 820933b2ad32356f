"""Embed image attachments in chat message text.

An attachment travels as "<image>BASE64</image>" inside the message. The
tags are case-sensitive and no whitespace is inserted around the payload.
Message text is untrusted, so reading an attachment back never raises:
malformed payloads read as "no attachment".
"""

import base64
import binascii
import logging
import re

from inline_media.images.types import EncodedAttachment

logger = logging.getLogger(__name__)

OPEN_TAG = "<image>"
CLOSE_TAG = "</image>"

IMAGE_PATTERN = re.compile(
    re.escape(OPEN_TAG) + r"(.*?)" + re.escape(CLOSE_TAG), re.DOTALL
)


def wrap(attachment: EncodedAttachment | bytes) -> str:
    """Wrap an attachment in image tags.

    Args:
        attachment: Attachment or raw encoded bytes.

    Returns:
        "<image>" + base64 payload + "</image>".
    """
    data = attachment.data if isinstance(attachment, EncodedAttachment) else attachment
    return OPEN_TAG + base64.b64encode(data).decode("ascii") + CLOSE_TAG


def _decode_payload(payload: str) -> EncodedAttachment | None:
    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        logger.debug("Ignoring malformed image payload: %s", e)
        return None
    return EncodedAttachment(data=data)


def unwrap(text: str) -> EncodedAttachment | None:
    """Recover the first attachment embedded in message text.

    Args:
        text: Message text.

    Returns:
        The attachment, or None if there are no tags or the first payload
        is not valid base64.
    """
    match = IMAGE_PATTERN.search(text)
    if not match:
        return None
    return _decode_payload(match.group(1))


def unwrap_all(text: str) -> list[EncodedAttachment]:
    """Recover every decodable attachment, in order of appearance."""
    attachments = []
    for match in IMAGE_PATTERN.finditer(text):
        attachment = _decode_payload(match.group(1))
        if attachment is not None:
            attachments.append(attachment)
    return attachments


def contains_image(text: str) -> bool:
    """Cheap check for both image tags.

    Does not verify the tags are ordered or that the payload decodes.
    """
    return OPEN_TAG in text and CLOSE_TAG in text


def strip_images(text: str) -> str:
    """Remove all image segments, leaving the surrounding caption text."""
    return IMAGE_PATTERN.sub("", text).strip()
