"""
Global pytest fixtures for spiece tests.

This module provides:
- Fault handling for native crashes
- Reference library/model configuration
- Logger isolation

=============================================================================
Skip Policy
=============================================================================

Unit tests run against the in-process fake library (tests/fixtures) and
never skip. Reference tests (tests/reference) need the real shared library
and a trained model; they skip unless both are configured:

    SPIECE_LIBRARY=/path/to/libsentencepiece_ffi.so
    SPIECE_TEST_MODEL=/path/to/toy.model

A missing library or model is a prerequisite, not a spiece bug.
"""

import faulthandler
import logging
import os

import pytest

# Enable faulthandler to trace native crashes (segfaults)
faulthandler.enable()


# =============================================================================
# Reference Configuration
# =============================================================================

REFERENCE_LIBRARY = os.environ.get("SPIECE_LIBRARY")
REFERENCE_MODEL = os.environ.get("SPIECE_TEST_MODEL")


# =============================================================================
# Import Fixtures
# =============================================================================


@pytest.fixture(scope="session")
def spiece():
    """Import and return the spiece module."""
    import spiece

    return spiece


# =============================================================================
# Logging Isolation
# =============================================================================


@pytest.fixture
def restore_logger():
    """Restore handlers and level of the spiece logger after the test."""
    from spiece._logging import logger

    handlers = logger.handlers[:]
    level = logger.level
    yield logger
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    for handler in handlers:
        logger.addHandler(handler)
    logger.setLevel(level)


@pytest.fixture
def captured_logs(restore_logger):
    """Capture spiece records at DEBUG level."""

    class _ListHandler(logging.Handler):
        def __init__(self):
            super().__init__(logging.DEBUG)
            self.records: list[logging.LogRecord] = []

        def emit(self, record):
            self.records.append(record)

    handler = _ListHandler()
    restore_logger.addHandler(handler)
    restore_logger.setLevel(logging.DEBUG)
    return handler.records


# =============================================================================
# Markers
# =============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "requires_library: marks tests requiring the real native library"
    )
    config.addinivalue_line("markers", "memory: marks buffer/handle ownership tests")
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
