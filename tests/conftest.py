"""Root test fixtures shared across all test types.

Database-specific fixtures are in tests/integration/conftest.py.
"""

import os

# Settings are read at import time, so the test environment goes first
os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-that-is-at-least-32-characters-long")
# Cheap hashing keeps the suite fast
os.environ.setdefault("ARGON2_TIME_COST", "1")
os.environ.setdefault("ARGON2_MEMORY_COST", "1024")

# ruff: noqa: E402 - Imports must be after env var setup
from uuid import uuid4

import pytest

from src.taskhub.core.config import get_settings
from src.taskhub.core.logging import clear_request_context

# Clear settings cache to ensure test environment variables are picked up
get_settings.cache_clear()


@pytest.fixture(autouse=True)
def _clean_log_context():
    """structlog contextvars must not leak between tests."""
    clear_request_context()
    yield
    clear_request_context()


@pytest.fixture
def organization_id():
    return uuid4()


@pytest.fixture
def user_id():
    return uuid4()
