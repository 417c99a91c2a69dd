"""
Configuration management for the JSON recovery engine.

Uses Pydantic Settings for type-safe configuration loading from environment variables.
All configuration is validated at startup to fail fast on misconfiguration.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Every field has a default, so an empty environment yields the
    standard engine configuration.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # Repair Configuration
    # ==========================================================================
    repair_max_attempts: int = Field(
        default=5,
        ge=1,
        le=50,
        description="Maximum parse attempts before giving up",
    )

    repair_backscan_window: int = Field(
        default=50,
        ge=1,
        le=1000,
        description="Characters scanned backward when looking for a comma insertion point",
    )

    repair_excerpt_radius: int = Field(
        default=40,
        ge=0,
        le=500,
        description="Characters kept on each side of the failure offset in error excerpts",
    )

    # ==========================================================================
    # Logging Configuration
    # ==========================================================================
    log_level: str = Field(
        default="WARNING",
        description="Minimum level written by the console log sink",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and check the log level name."""
        level = v.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {LOG_LEVELS}, got {v!r}")
        return level


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses LRU cache to ensure settings are only loaded once.
    """
    return Settings()
