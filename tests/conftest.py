"""
Global test fixtures for the Users CRUD API.

This module provides shared fixtures for all tests including:
- Mock MongoDB (mongomock-motor)
- Settings and auth header helpers
- FastAPI app / TestClient wired to the mock database
- User payload factories
"""

import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Generator
from unittest.mock import patch

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

# Add backend to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))


TEST_TOKEN = "12345"


# =============================================================================
# MongoDB Fixtures (mongomock-motor)
# =============================================================================

@pytest.fixture
def mock_async_mongo_client():
    """
    Create an async mock MongoDB client using mongomock-motor.

    Each test gets its own in-memory server.
    """
    try:
        from mongomock_motor import AsyncMongoMockClient
    except ImportError:
        pytest.skip("mongomock-motor not installed")
    client = AsyncMongoMockClient()
    yield client
    client.close()


@pytest_asyncio.fixture
async def mock_users_db(mock_async_mongo_client, settings):
    """Provide the mock users database with the app's indexes in place."""
    from app.database.databases import users_db

    db = mock_async_mongo_client[settings.mongo_db_name]
    await users_db.create_indexes(db)
    yield db


# =============================================================================
# Settings / Auth Fixtures
# =============================================================================

@pytest.fixture
def settings():
    """Application settings with the default token."""
    from app.config import get_settings

    get_settings.cache_clear()
    return get_settings()


@pytest.fixture
def auth_headers() -> dict:
    """Authorization header carrying the shared token."""
    return {"Authorization": f"Bearer {TEST_TOKEN}"}


# =============================================================================
# User Fixtures
# =============================================================================

@pytest.fixture
def user_payload() -> dict:
    """A valid create-user request body."""
    return {"name": "Ana Souza", "email": "ana@example.com", "age": 31}


@pytest.fixture
def mock_user_doc() -> dict:
    """A complete user document as stored in MongoDB."""
    from bson import ObjectId

    return {
        "_id": ObjectId("507f1f77bcf86cd799439011"),
        "name": "Ana Souza",
        "email": "ana@example.com",
        "age": 31,
        "createdAt": datetime(2024, 10, 15, 12, 0, 0, 123000),
    }


# =============================================================================
# FastAPI Test Client Fixtures
# =============================================================================

@pytest.fixture
def app():
    """
    The FastAPI app under test.

    Use with ``client`` so the lifespan runs against the mock database.
    """
    from app.main import app
    app.dependency_overrides.clear()
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app, mock_async_mongo_client, settings) -> Generator:
    """
    TestClient whose startup opens the mock MongoDB instead of a real one.
    """
    async def get_mock_client():
        return mock_async_mongo_client

    with patch("app.main.get_mongo_client", side_effect=get_mock_client):
        with TestClient(app) as c:
            yield c


@pytest.fixture
def create_user(client, auth_headers):
    """
    Helper to create a user through the API.

    Usage:
        user = create_user(name="Bob", email="bob@example.com")
    """
    counter = {"n": 0}

    def _create(**overrides) -> dict:
        counter["n"] += 1
        body = {
            "name": f"User {counter['n']}",
            "email": f"user{counter['n']}@example.com",
        }
        body.update(overrides)
        response = client.post("/users", json=body, headers=auth_headers)
        assert response.status_code == 201, response.text
        return response.json()

    return _create


@pytest.fixture
def assert_datetime_recent():
    """
    Fixture providing a helper to assert an ISO datetime is recent.
    """
    def _assert_recent(datetime_str: str, max_age_seconds: int = 60):
        if datetime_str.endswith("Z"):
            datetime_str = datetime_str.replace("Z", "+00:00")

        dt = datetime.fromisoformat(datetime_str)
        now = datetime.now(timezone.utc)
        age = (now - dt).total_seconds()

        assert age < max_age_seconds, f"Datetime {datetime_str} is {age}s old, expected < {max_age_seconds}s"
        assert age >= -1, f"Datetime {datetime_str} is in the future"

    return _assert_recent
