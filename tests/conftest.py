"""
Shared pytest fixtures for all tests.

Environment variables are set before any storefront module is imported,
because settings are read once and cached.
"""

import os
from decimal import Decimal

import pytest

os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ["ENVIRONMENT"] = "test"

from storefront.config.settings import Settings  # noqa: E402


# ============================================================================
# SETTINGS FIXTURES
# ============================================================================


@pytest.fixture
def test_settings() -> Settings:
    """Settings isolated from any local .env file."""
    return Settings(
        _env_file=None,
        JWT_SECRET_KEY="test-secret-key",
        ENVIRONMENT="test",
        TAX_RATE=Decimal("0.085"),
        NOTIFICATIONS_WEBHOOK_URL=None,
    )
