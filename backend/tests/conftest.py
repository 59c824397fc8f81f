"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules.
"""

import pytest
from datetime import datetime, timezone, timedelta
from unittest.mock import patch
from fastapi.testclient import TestClient
from jose import jwt

# Load the app package before any feature routes module is imported
from api.app import create_app
from api.dependencies import reset_container
from shared.config import Settings
from shared.scope import OwnerScope

from tests.fakes import FakeSupabase


# Test JWT secret (only for testing)
TEST_JWT_SECRET = "test-secret-key-for-testing-only"

TEST_USER_ID = "11111111-1111-4111-8111-111111111111"
OTHER_USER_ID = "22222222-2222-4222-8222-222222222222"
TEST_ADDRESS = "0x" + "1a" * 20


def create_test_token(
    user_id: str = TEST_USER_ID,
    address: str = TEST_ADDRESS,
    expired: bool = False,
) -> str:
    """
    Create a Supabase-style JWT for a wallet user.

    Args:
        user_id: User ID to include in the token
        address: Ethereum address stored in user_metadata
        expired: If True, creates an expired token

    Returns:
        JWT token string
    """
    now = datetime.now(timezone.utc)
    exp = now - timedelta(hours=1) if expired else now + timedelta(hours=1)

    payload = {
        "sub": user_id,
        "email": f"{address}@siwe.subvault.xyz",
        "aud": "authenticated",
        "role": "authenticated",
        "exp": int(exp.timestamp()),
        "iat": int(now.timestamp()),
        "user_metadata": {"ethereum_address": address},
    }
    return jwt.encode(payload, TEST_JWT_SECRET, algorithm="HS256")


def make_settings(**overrides) -> Settings:
    """Settings isolated from the developer's environment and .env file."""
    values = {
        "supabase_url": "http://localhost:54321",
        "supabase_anon_key": "anon-key",
        "supabase_service_role_key": "service-key",
        "supabase_jwt_secret": TEST_JWT_SECRET,
        "password_secret": "test-password-secret",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture(autouse=True)
def reset_singletons():
    """Reset the service container before and after each test."""
    reset_container()
    yield
    reset_container()


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def fake_db() -> FakeSupabase:
    """Empty in-memory database."""
    return FakeSupabase()


@pytest.fixture
def scope(fake_db: FakeSupabase) -> OwnerScope:
    """Owner scope for the default test user."""
    return OwnerScope(fake_db, TEST_USER_ID)


@pytest.fixture
def other_scope(fake_db: FakeSupabase) -> OwnerScope:
    """Owner scope for a second user sharing the same database."""
    return OwnerScope(fake_db, OTHER_USER_ID)


@pytest.fixture
def app():
    """Create a fresh app for each test."""
    return create_app()


@pytest.fixture
def test_user_id() -> str:
    """Provide a consistent test user ID."""
    return TEST_USER_ID


@pytest.fixture
def auth_token(test_user_id: str) -> str:
    """Create a valid auth token for testing."""
    return create_test_token(user_id=test_user_id)


@pytest.fixture
def auth_headers(auth_token: str) -> dict[str, str]:
    """Create authorization headers with a valid token."""
    return {"Authorization": f"Bearer {auth_token}"}


@pytest.fixture
def api_client(app, fake_db: FakeSupabase, settings: Settings):
    """
    TestClient whose bearer tokens are checked with the test secret and
    whose per-user database client is the in-memory fake.
    """
    with patch("api.middleware.auth.get_settings", return_value=settings), patch(
        "api.dependencies.get_supabase_user_client", return_value=fake_db
    ):
        yield TestClient(app)
