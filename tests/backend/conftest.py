"""
Backend-specific test fixtures and configuration.

These fixtures extend the global fixtures with helpers for testing the
users router and service without a database.
"""

import sys
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "backend"))


# =============================================================================
# User Service Fixtures
# =============================================================================

@pytest.fixture
def mock_user_service():
    """
    Create a fully mocked UserService.

    All methods are AsyncMock, allowing you to configure return values:

        mock_user_service.get_user.return_value = UserResponse(...)
    """
    service = MagicMock()
    service.create_user = AsyncMock()
    service.list_users = AsyncMock()
    service.get_user = AsyncMock()
    service.update_user = AsyncMock()
    service.delete_user = AsyncMock()
    return service


@pytest.fixture
def client_with_mock_service(app, mock_user_service):
    """
    TestClient whose routes receive ``mock_user_service``.

    The lifespan is not run, so no database is touched.
    """
    from app.routers.users import get_user_service

    app.dependency_overrides[get_user_service] = lambda: mock_user_service
    c = TestClient(app, raise_server_exceptions=False)
    yield c
    app.dependency_overrides.pop(get_user_service, None)


# =============================================================================
# Mock Collection Fixtures
# =============================================================================

@pytest.fixture
def mock_collection():
    """
    A MagicMock standing in for a Motor collection.

    Configure per test, e.g.:
        mock_collection.insert_one.side_effect = DuplicateKeyError("dup")
    """
    collection = MagicMock()
    collection.insert_one = AsyncMock()
    collection.find_one = AsyncMock()
    collection.find_one_and_update = AsyncMock()
    collection.find_one_and_delete = AsyncMock()
    collection.count_documents = AsyncMock()
    return collection


@pytest.fixture
def mock_db(mock_collection):
    """A MagicMock database whose every collection is ``mock_collection``."""
    db = MagicMock()
    db.__getitem__.return_value = mock_collection
    return db


# =============================================================================
# Response Assertion Helpers
# =============================================================================

@pytest.fixture
def assert_error_response():
    """Helper to assert error response structure."""
    def _assert(response, status_code: int, error_contains: str = None):
        assert response.status_code == status_code
        data = response.json()
        assert set(data) == {"error"}
        if error_contains:
            assert error_contains.lower() in data["error"].lower()
    return _assert
