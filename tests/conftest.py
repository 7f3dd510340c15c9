"""Shared test setup."""

import pytest
import structlog


@pytest.fixture(autouse=True)
def reset_structlog():
    """Drop logging config between tests so no logger outlives its stream."""
    structlog.reset_defaults()
    yield
    structlog.reset_defaults()
