"""Shared fixtures."""

import pytest

from httpresult.foundation.config import clear_settings_cache


@pytest.fixture(autouse=True)
def fresh_settings() -> object:
    """Reload settings from the environment for every test."""
    clear_settings_cache()
    yield
    clear_settings_cache()
