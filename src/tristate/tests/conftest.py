"""Shared fixtures: every test starts from environment-derived settings and default logging."""

from collections.abc import Iterator

import pytest

from tristate.config import clear_settings_cache
from tristate.observability import reset_logging


@pytest.fixture(autouse=True)
def fresh_config() -> Iterator[None]:
    """Reset cached settings and logging configuration around each test."""
    clear_settings_cache()
    reset_logging()
    yield
    clear_settings_cache()
    reset_logging()
