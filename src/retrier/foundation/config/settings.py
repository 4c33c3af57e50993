"""Environment-based configuration using pydantic-settings.

Supplies the defaults a RetryPolicy falls back to when no option sets a field,
plus logging configuration.

Example:
    >>> from retrier.foundation.config import get_settings
    >>> settings = get_settings()
    >>> settings.retry.max_attempts
    4

    # Or with environment variables:
    # RETRIER_RETRY_MAX_ATTEMPTS=6
    # RETRIER_RETRY_BACKOFF_FACTOR=1.5
    # RETRIER_LOG_LEVEL=DEBUG
"""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated, Literal

from pydantic import Field, PositiveFloat, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Package defaults, used when neither an option nor the environment sets a value
DEFAULT_MAX_ATTEMPTS = 4
DEFAULT_BACKOFF_FACTOR = 2.0


class RetrySettings(BaseSettings):
    """Default retry configuration."""

    model_config = SettingsConfigDict(
        env_prefix="RETRIER_RETRY_",
        extra="ignore",
    )

    max_attempts: Annotated[int, Field(ge=1, description="Total attempts including the first")] = DEFAULT_MAX_ATTEMPTS
    backoff_factor: PositiveFloat = Field(default=DEFAULT_BACKOFF_FACTOR, description="Exponential backoff base")


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="RETRIER_LOG_",
        extra="ignore",
    )

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["json", "text"] = "text"

    @field_validator("level", mode="before")
    @classmethod
    def _normalize_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v


class RetrierSettings(BaseSettings):
    """Root settings, loaded from RETRIER_* environment variables and .env.

    Example environment variables:
        RETRIER_DEBUG=true
        RETRIER_RETRY_MAX_ATTEMPTS=6
        RETRIER_LOG_FORMAT=json
    """

    model_config = SettingsConfigDict(
        env_prefix="RETRIER_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    debug: bool = Field(default=False, description="Enable debug logging")

    retry: RetrySettings = Field(default_factory=RetrySettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


@lru_cache(maxsize=1)
def get_settings() -> RetrierSettings:
    """Get the global settings instance (cached)."""
    return RetrierSettings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing).

    The next get_settings() call reloads configuration from the environment.
    """
    get_settings.cache_clear()
