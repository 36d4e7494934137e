"""Configuration management using pydantic-settings.

Provides environment-based configuration with type safety and validation.
"""

from .settings import (
    ClientSettings,
    HttpResultSettings,
    JsonSettings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    "ClientSettings",
    "HttpResultSettings",
    "JsonSettings",
    "clear_settings_cache",
    "get_settings",
]
