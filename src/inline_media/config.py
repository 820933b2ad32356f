"""Configuration management for inline-media.

Loads codec limits from environment variables with validation.
"""

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Codec settings loaded from environment variables.

    Attributes:
        max_image_dimension: Longest side, in pixels, of a transmitted image.
        max_image_size: Byte ceiling for a compressed attachment.
        thumbnail_dimension: Longest side, in pixels, of a preview thumbnail.
        initial_quality: Encoder quality of the first compression attempt.
        quality_step: Amount subtracted from the quality on each retry.
        min_quality: Exclusive lower bound of the quality back-off.
    """

    model_config = SettingsConfigDict(
        env_prefix="INLINE_MEDIA_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    max_image_dimension: int = Field(
        default=800,
        gt=0,
        description="Longest side in pixels of a transmitted image",
    )
    max_image_size: int = Field(
        default=500 * 1024,
        gt=0,
        description="Maximum size in bytes of a compressed attachment",
    )
    thumbnail_dimension: int = Field(
        default=100,
        gt=0,
        description="Longest side in pixels of a preview thumbnail",
    )
    initial_quality: float = Field(
        default=0.8,
        gt=0.0,
        le=1.0,
        description="Encoder quality of the first compression attempt",
    )
    quality_step: float = Field(
        default=0.1,
        gt=0.0,
        le=1.0,
        description="Quality decrement between compression attempts",
    )
    min_quality: float = Field(
        default=0.1,
        ge=0.0,
        lt=1.0,
        description="Exclusive lower bound of the quality back-off",
    )

    @model_validator(mode="after")
    def check_quality_range(self) -> "Settings":
        """Ensure the back-off starts above its floor."""
        if self.initial_quality <= self.min_quality:
            raise ValueError("initial_quality must be greater than min_quality")
        return self

    def quality_steps(self) -> list[float]:
        """List the encoder qualities tried by the back-off loop.

        Values are computed on a fixed grid rather than by repeated
        subtraction so 0.8 - 0.1 * n never drifts below the floor early.

        Returns:
            Qualities in the order they are attempted, e.g.
            [0.8, 0.7, 0.6, 0.5, 0.4, 0.3, 0.2] for the defaults.
        """
        steps = [self.initial_quality]
        n = 1
        while True:
            quality = round(self.initial_quality - n * self.quality_step, 6)
            if quality <= self.min_quality:
                break
            steps.append(quality)
            n += 1
        return steps


def load_settings() -> Settings:
    """Load and validate settings from environment.

    Returns:
        Validated Settings instance.

    Raises:
        ValidationError: If settings are present but invalid.
    """
    return Settings()
