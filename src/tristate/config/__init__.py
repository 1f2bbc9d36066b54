"""Configuration management using pydantic-settings."""

from .settings import LoggingSettings, TristateSettings, clear_settings_cache, get_settings

__all__ = [
    "LoggingSettings",
    "TristateSettings",
    "clear_settings_cache",
    "get_settings",
]
