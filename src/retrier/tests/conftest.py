"""Shared fixtures for the retrier test suite."""

from __future__ import annotations

import logging

import pytest

from retrier.foundation.config import clear_settings_cache
from retrier.runtime.observability import ROOT_LOGGER
from retrier.testing import MockClock

_ENV_VARS = (
    "RETRIER_DEBUG",
    "RETRIER_RETRY_MAX_ATTEMPTS",
    "RETRIER_RETRY_BACKOFF_FACTOR",
    "RETRIER_LOG_LEVEL",
    "RETRIER_LOG_FORMAT",
)


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch: pytest.MonkeyPatch) -> object:
    """Isolate every test from RETRIER_* variables and the settings cache."""
    for var in _ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture(autouse=True)
def clean_logging() -> object:
    """Drop handlers installed by configure_logging."""
    yield
    logger = logging.getLogger(ROOT_LOGGER)
    for handler in [h for h in logger.handlers if getattr(h, "_retrier_handler", False)]:
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def clock() -> MockClock:
    return MockClock()
