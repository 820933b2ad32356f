"""Image value types passed between the codec stages."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class RawImage:
    """A decoded bitmap.

    Attributes:
        width: Width in pixels.
        height: Height in pixels.
        data: Backend-native pixel data (a PIL image for PillowBackend).
    """

    width: int
    height: int
    data: Any

    @property
    def aspect_ratio(self) -> float:
        """Width divided by height."""
        return self.width / self.height

    @property
    def longest_side(self) -> int:
        return max(self.width, self.height)


@dataclass(frozen=True)
class EncodedAttachment:
    """Compressed image bytes ready for inline transmission.

    Attributes:
        data: Encoded image bytes (JPEG for PillowBackend).
        quality: Encoder quality used, or None when unknown (e.g. unwrapped
            from message text). Not part of equality.
    """

    data: bytes
    quality: float | None = field(default=None, compare=False)

    @property
    def size(self) -> int:
        """Size of the encoded payload in bytes."""
        return len(self.data)
