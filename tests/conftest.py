"""
Pytest configuration for document tests.

Resets the global configuration and provides a shared in-memory backend.
"""

import pytest

from restmachine_document.backends import InMemoryBackend
from restmachine_document.config import reset_config


# Shared backend
shared_backend = InMemoryBackend()


@pytest.fixture(autouse=True)
def default_config():
    """Start every test from the default configuration."""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def backend():
    """Empty shared backend."""
    shared_backend.clear()
    yield shared_backend
    shared_backend.clear()
