"""
Shared test fixtures for the railkit test suite.

Every test starts from default settings and default structlog configuration,
whatever the surrounding environment or a previous test changed.
"""

from __future__ import annotations

import os
from collections.abc import Iterator

import pytest
import structlog

from railkit.config import get_settings


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Drop RAILKIT_* variables and reset cached settings and logging around each test."""
    for key in list(os.environ):
        if key.startswith("RAILKIT_"):
            monkeypatch.delenv(key)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
    structlog.reset_defaults()
