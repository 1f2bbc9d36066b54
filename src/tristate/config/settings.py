"""Environment-based configuration using pydantic-settings.

Example:
    >>> from tristate.config import get_settings
    >>> get_settings().check_unchecked
    True

    # Or with environment variables:
    # TRISTATE_BORROW_CHECKS=false
    # TRISTATE_LOG_LEVEL=DEBUG
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="TRISTATE_LOG_",
        extra="ignore",
    )

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["console", "json", "none"] = "console"

    @field_validator("level", mode="before")
    @classmethod
    def _normalize_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v


class TristateSettings(BaseSettings):
    """Root settings.

    Example environment variables:
        TRISTATE_BORROW_CHECKS=false
        TRISTATE_CHECK_UNCHECKED=false
        TRISTATE_LOG_FORMAT=json
    """

    model_config = SettingsConfigDict(
        env_prefix="TRISTATE_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    borrow_checks: bool = Field(
        default=__debug__,
        description="Enforce shared/exclusive view discipline at runtime (off under python -O)",
    )
    check_unchecked: bool = Field(
        default=True,
        description="Make *_unchecked extractions verify their state precondition",
    )
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


@lru_cache(maxsize=1)
def get_settings() -> TristateSettings:
    """Get the global settings instance (cached)."""
    return TristateSettings()


def clear_settings_cache() -> None:
    """Clear the settings cache so the next get_settings() re-reads the environment."""
    get_settings.cache_clear()
