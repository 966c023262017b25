"""Pytest configuration and fixtures."""

import os
from collections.abc import Generator
from typing import Any
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

# Set test environment variables before importing application modules
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("PERSISTENCE_BACKEND", "memory")
os.environ.setdefault("MOCK_OPENAI", "true")
os.environ.setdefault("OPENAI_API_KEY", "sk-test-openai-key")
os.environ.setdefault("FORM_RELAY_URL", "https://relay.test/submit")
os.environ.setdefault("SESSION_COOKIE_SECURE", "false")
os.environ.setdefault("ADMIN_USERNAME", "PISTA")
os.environ.setdefault("ADMIN_PASSWORD", "admin")
os.environ.setdefault("ADMIN_TOKEN_SECRET", "test-admin-secret")


def _clear_factories() -> None:
    from src.core.blob_storage import get_blob_storage
    from src.core.config import get_settings
    from src.core.store import get_key_value_store
    from src.services.record_service import get_record_service

    get_settings.cache_clear()
    get_key_value_store.cache_clear()
    get_blob_storage.cache_clear()
    get_record_service.cache_clear()


@pytest.fixture(autouse=True)
def fresh_storage() -> Generator[None, None, None]:
    """Give every test empty in-memory stores."""
    _clear_factories()
    yield
    _clear_factories()


@pytest.fixture(scope="session")
def test_settings() -> Generator[Any, None, None]:
    """Provide test settings with cleared cache.

    Yields:
        Settings: Test configuration settings.
    """
    from src.core.config import get_settings

    get_settings.cache_clear()

    settings = get_settings()
    yield settings

    get_settings.cache_clear()


@pytest.fixture
def memory_store() -> Any:
    from src.core.store import InMemoryKeyValueStore

    return InMemoryKeyValueStore()


@pytest.fixture
def records(memory_store: Any) -> Any:
    """Record service over its own in-memory store."""
    from src.services.record_service import KeyValueRecordService

    return KeyValueRecordService(memory_store)


@pytest.fixture
def mock_supabase_client() -> Generator[MagicMock, None, None]:
    """Provide a mocked Supabase client.

    Yields:
        MagicMock: Mocked Supabase client for testing.
    """
    mock_client = MagicMock()

    mock_response = MagicMock()
    mock_response.data = []
    mock_client.table.return_value.select.return_value.limit.return_value.execute.return_value = (
        mock_response
    )

    with patch("src.core.supabase.get_supabase_client", return_value=mock_client):
        yield mock_client


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """Provide a test client for the FastAPI application.

    Yields:
        TestClient: FastAPI test client.
    """
    from src.main import app

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def session_headers(client: TestClient) -> dict[str, str]:
    """Start a session as Max Mustermann and return its header."""
    response = client.post(
        "/api/v1/sessions",
        json={"client_name": "Max Mustermann", "client_email": "max@example.com"},
    )
    assert response.status_code == 201
    return {"X-Session-Id": response.json()["id"]}


@pytest.fixture
def admin_headers(client: TestClient) -> dict[str, str]:
    response = client.post("/api/v1/admin/login", json={"username": "PISTA", "password": "admin"})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}
