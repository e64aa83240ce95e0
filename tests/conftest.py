"""Pytest configuration for all tests."""

import random

import pytest
import structlog

from passpolicy.core.config import Settings, get_settings
from passpolicy.core.logging import clear_context


@pytest.fixture(autouse=True)
def _reset_engine_state():
    """Clear cached settings and logging state around every test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
    clear_context()
    structlog.reset_defaults()


@pytest.fixture
def settings() -> Settings:
    """Settings for tests: no .env file and the deterministic traditional meter."""
    return Settings(
        _env_file=None,
        environment="testing",
        strength_meter_type="traditional",
    )


@pytest.fixture
def rng() -> random.Random:
    """Seeded random source so generation tests are reproducible."""
    return random.Random(1234)
