"""Tests for environment-driven settings."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from httpresult.foundation.config import clear_settings_cache, get_settings
from httpresult.io import JsonOptions


def test_defaults() -> None:
    settings = get_settings()
    assert settings.serialization.naming_policy == "camel"
    assert settings.serialization.case_insensitive is True
    assert settings.client.body_snippet_length == 256


def test_cached_until_cleared(monkeypatch: pytest.MonkeyPatch) -> None:
    first = get_settings()
    monkeypatch.setenv("HTTPRESULT_CLIENT_USER_AGENT", "svc/2.0")
    assert get_settings() is first

    clear_settings_cache()
    assert get_settings().client.user_agent == "svc/2.0"


def test_naming_policy_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HTTPRESULT_JSON_NAMING_POLICY", "CamelCase")
    monkeypatch.setenv("HTTPRESULT_JSON_CASE_INSENSITIVE", "false")

    options = JsonOptions.default()
    assert options.naming_policy == "camel"
    assert options.case_insensitive is False


def test_invalid_snippet_length(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HTTPRESULT_CLIENT_BODY_SNIPPET_LENGTH", "0")
    with pytest.raises(ValidationError):
        get_settings()


def test_options_name_mapping() -> None:
    assert JsonOptions().name("has_value") == "hasValue"
    assert JsonOptions(naming_policy="none").name("has_value") == "has_value"


def test_unknown_variables_ignored(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HTTPRESULT_DEBUG", "true")
    settings = get_settings()
    assert "debug" not in type(settings).model_fields
    assert settings.client.user_agent == "httpresult/1.0"
