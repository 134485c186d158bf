"""
Configuration for the calculator engine.

Values come from environment variables prefixed ``CALC_`` (or a ``.env``
file) and fall back to the defaults below.
"""

from enum import Enum

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AngleUnit(str, Enum):
    """Unit used to interpret trigonometric arguments."""

    RADIANS = "rad"
    DEGREES = "deg"


class Settings(BaseSettings):
    """Engine settings."""

    model_config = SettingsConfigDict(
        env_prefix="CALC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Display
    max_display_length: int = Field(default=16, ge=8)
    scientific_digits: int = Field(default=9, ge=0)

    # Arithmetic
    precision: int = Field(default=20, ge=8)  # significant digits
    angle_unit: AngleUnit = AngleUnit.RADIANS

    # Collaborators
    history_limit: int = Field(default=50, ge=1)

    log_level: str = "WARNING"


# Global settings instance
settings = Settings()
