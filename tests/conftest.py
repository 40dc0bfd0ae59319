"""Pytest configuration and fixtures."""

from collections.abc import Iterator

import pytest
import structlog
from structlog.testing import capture_logs


@pytest.fixture
def captured_logs() -> Iterator[list[dict]]:
    """Capture structlog events emitted during the test."""
    with capture_logs() as logs:
        yield logs


@pytest.fixture
def reset_structlog() -> Iterator[None]:
    """Restore structlog defaults after a test that configures logging."""
    yield
    structlog.reset_defaults()
