"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules.
Tests run against in-memory storage and the fallback coach: the
environment is pinned before any application module reads settings.
"""

import os
from datetime import datetime, timezone, timedelta

import jwt  # PyJWT
import pytest

# Test JWT secret (only for testing)
TEST_JWT_SECRET = "test-secret-key-for-testing-only"

os.environ.update({
    "SUPABASE_JWT_SECRET": TEST_JWT_SECRET,
    "SUPABASE_URL": "",
    "SUPABASE_SERVICE_ROLE_KEY": "",
    "OPENAI_API_KEY": "",
    "COACH_BACKEND": "fallback",
    "STRIPE_SECRET_KEY": "",
    "STRIPE_WEBHOOK_SECRET": "",
})

from api.dependencies import reset_container  # noqa: E402
from modules.auth.service import reset_auth_service  # noqa: E402
from shared.config import get_settings  # noqa: E402
from shared.database import reset_client_cache  # noqa: E402


def create_test_token(
    user_id: str = "test-user-123",
    email: str = "test@example.com",
    expired: bool = False,
    email_verified: bool = True,
    secret: str = TEST_JWT_SECRET,
) -> str:
    """
    Create a test JWT token shaped like a Supabase access token.

    Args:
        user_id: User ID to include in the token
        email: Email to include in the token
        expired: If True, creates an expired token
        email_verified: Whether the email should be marked as verified
        secret: Signing secret

    Returns:
        JWT token string
    """
    now = datetime.now(timezone.utc)
    exp = now - timedelta(hours=1) if expired else now + timedelta(hours=1)

    payload = {
        "sub": user_id,
        "email": email,
        "aud": "authenticated",
        "role": "authenticated",
        "exp": int(exp.timestamp()),
        "iat": int(now.timestamp()),
        "user_metadata": {"email_verified": email_verified},
    }
    return jwt.encode(payload, secret, algorithm="HS256")


@pytest.fixture(autouse=True)
def reset_singletons():
    """Fresh settings, services and clients for every test."""
    get_settings.cache_clear()
    reset_container()
    reset_auth_service()
    reset_client_cache()
    yield
    get_settings.cache_clear()
    reset_container()
    reset_auth_service()
    reset_client_cache()


@pytest.fixture
def test_user_id() -> str:
    """Provide a consistent test user ID."""
    return "test-user-123"


@pytest.fixture
def test_user_email() -> str:
    """Provide a consistent test user email."""
    return "test@example.com"


@pytest.fixture
def auth_token(test_user_id: str, test_user_email: str) -> str:
    """Create a valid auth token for testing."""
    return create_test_token(user_id=test_user_id, email=test_user_email)


@pytest.fixture
def auth_headers(auth_token: str) -> dict[str, str]:
    """Create authorization headers with a valid token."""
    return {"Authorization": f"Bearer {auth_token}"}
