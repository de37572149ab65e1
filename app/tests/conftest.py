"""Shared pytest fixtures."""

import pytest
import structlog

from herald.logging import configure_logging


@pytest.fixture(autouse=True, scope="session")
def quiet_logging():
    """Configure structlog once, silenced for the test run."""
    configure_logging()


@pytest.fixture(autouse=True)
def clean_log_context():
    """Keep structlog context variables from leaking between tests."""
    structlog.contextvars.clear_contextvars()
    yield
    structlog.contextvars.clear_contextvars()
