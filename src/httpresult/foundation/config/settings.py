"""Environment-based configuration using pydantic-settings.

Provides type-safe, validated configuration from environment variables
with sensible defaults. Supports .env files and nested configuration.

Example:
    >>> from httpresult.foundation.config import get_settings
    >>> settings = get_settings()
    >>> settings.serialization.naming_policy
    'camel'

    # Or with environment variables:
    # HTTPRESULT_JSON_NAMING_POLICY=none
    # HTTPRESULT_CLIENT_BODY_SNIPPET_LENGTH=512
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, PositiveInt, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class JsonSettings(BaseSettings):
    """Defaults for envelope and value (de)serialization."""

    model_config = SettingsConfigDict(
        env_prefix="HTTPRESULT_JSON_",
        extra="ignore",
    )

    naming_policy: Literal["camel", "none"] = Field(
        default="camel",
        description="Property casing on write: camelCase or Python field names",
    )
    case_insensitive: bool = Field(default=True, description="Match envelope property names case-insensitively on read")
    indent: bool = False

    @field_validator("naming_policy", mode="before")
    @classmethod
    def _normalize_policy(cls, v: str) -> str:
        if not isinstance(v, str):
            return v
        v = v.lower()
        return "camel" if v in ("camel", "camelcase") else v


class ClientSettings(BaseSettings):
    """Execute pipeline defaults."""

    model_config = SettingsConfigDict(
        env_prefix="HTTPRESULT_CLIENT_",
        extra="ignore",
    )

    body_snippet_length: PositiveInt = Field(
        default=256,
        description="Characters of an unparsable body quoted in codec errors",
    )
    user_agent: str = "httpresult/1.0"


class HttpResultSettings(BaseSettings):
    """Root settings.

    Loads configuration from environment variables with HTTPRESULT_ prefix.

    Example environment variables:
        HTTPRESULT_JSON_CASE_INSENSITIVE=false
        HTTPRESULT_CLIENT_USER_AGENT=my-service/2.0
    """

    model_config = SettingsConfigDict(
        env_prefix="HTTPRESULT_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    # Nested settings (loaded with HTTPRESULT_JSON_, HTTPRESULT_CLIENT_)
    serialization: JsonSettings = Field(default_factory=JsonSettings)
    client: ClientSettings = Field(default_factory=ClientSettings)


@lru_cache(maxsize=1)
def get_settings() -> HttpResultSettings:
    """Get the global settings instance (cached)."""
    return HttpResultSettings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing).

    After calling this, the next get_settings() call will
    reload configuration from environment.
    """
    get_settings.cache_clear()
