"""Shared test fixtures for the Book Club API tests"""

import os
from typing import AsyncGenerator
from unittest.mock import MagicMock

import pytest
import pytest_asyncio

# Set test environment before importing app
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["DATABASE_PATH"] = "/tmp/test_bookclub.json"
os.environ["APP_URL"] = "https://bookclub.test"
os.environ["DEBUG"] = "true"

from tests.factories import TEST_PASSWORD, create_profile  # noqa: E402


# =============================================================================
# Database and Email Services
# =============================================================================

@pytest.fixture
def db():
    """Real database service on in-memory storage"""
    from bookclub.services.database_service import DatabaseService

    service = DatabaseService(in_memory=True)
    service.connect()
    yield service
    service.close()


@pytest.fixture
def mock_email():
    """Email service that records calls instead of sending"""
    mock = MagicMock()
    mock.send_welcome_email.return_value = {"sent": True}
    mock.send_invite_email.return_value = {"sent": True}
    mock.send_password_reset_email.return_value = {"sent": True}
    return mock


# =============================================================================
# Application and Client Fixtures
# =============================================================================

@pytest_asyncio.fixture
async def app(db, mock_email):
    """FastAPI application wired to the test database and email mock"""
    from bookclub.main import app as fastapi_app
    from bookclub.services.database_service import get_db
    from bookclub.services.email_service import get_email_service

    fastapi_app.dependency_overrides[get_db] = lambda: db
    fastapi_app.dependency_overrides[get_email_service] = lambda: mock_email
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def test_client(app) -> AsyncGenerator:
    """Create async HTTP client for testing"""
    from httpx import AsyncClient, ASGITransport

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


# =============================================================================
# User Fixtures
# =============================================================================

@pytest.fixture
def member_user(db) -> dict:
    return create_profile(db, email="reader@bookclub.org", full_name="Ada Reader", role="member")


@pytest.fixture
def another_member(db) -> dict:
    return create_profile(db, email="second@bookclub.org", full_name="Bola Second", role="member")


@pytest.fixture
def admin_user(db) -> dict:
    return create_profile(db, email="admin@bookclub.org", full_name="Chi Admin", role="admin")


@pytest.fixture
def super_admin_user(db) -> dict:
    return create_profile(db, email="owner@bookclub.org", full_name="Dayo Owner", role="super_admin")


# =============================================================================
# Session Token Fixtures
# =============================================================================

def auth_headers(profile: dict) -> dict:
    """HTTP headers carrying a session token for the profile"""
    from bookclub.auth.jwt import create_session_token

    token = create_session_token({
        "id": profile["id"],
        "email": profile["email"],
        "name": profile.get("full_name"),
        "role": profile["role"],
    })
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def member_headers(member_user) -> dict:
    return auth_headers(member_user)


@pytest.fixture
def another_member_headers(another_member) -> dict:
    return auth_headers(another_member)


@pytest.fixture
def admin_headers(admin_user) -> dict:
    return auth_headers(admin_user)


@pytest.fixture
def super_admin_headers(super_admin_user) -> dict:
    return auth_headers(super_admin_user)


@pytest.fixture
def test_password() -> str:
    return TEST_PASSWORD


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Configure pytest markers"""
    config.addinivalue_line("markers", "integration: marks tests as integration tests")
    config.addinivalue_line("markers", "unit: marks tests as unit tests")
