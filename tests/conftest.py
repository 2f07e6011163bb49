"""Pytest fixtures for testing."""

from collections.abc import AsyncGenerator, Generator
from pathlib import Path
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from mongomock_motor import AsyncMongoMockClient

from fileanalyst.api.deps import get_storage
from fileanalyst.api.main import app
from fileanalyst.db import mongo
from fileanalyst.services import auth_service
from fileanalyst.services.storage_service import StorageService


@pytest_asyncio.fixture
async def mock_db() -> AsyncGenerator[Any, None]:
    """Provide a mock MongoDB database for testing."""
    mock_client = AsyncMongoMockClient()
    mock_database = mock_client[mongo.DATABASE_NAME]

    # Replace the real client with mock
    mongo.set_client(mock_client)

    yield mock_database

    # Cleanup
    mongo.set_client(None)


@pytest.fixture
def storage(tmp_path: Path) -> Generator[StorageService, None, None]:
    """Storage service rooted in a temporary directory, wired into the app."""
    service = StorageService(uploads_dir=tmp_path / "uploads")
    app.dependency_overrides[get_storage] = lambda: service
    yield service
    app.dependency_overrides.pop(get_storage, None)


@pytest_asyncio.fixture
async def auth_token(mock_db: Any) -> str:
    """API token for user-1."""
    return await auth_service.issue_token("user-1", "grower@example.com")


@pytest_asyncio.fixture
async def other_token(mock_db: Any) -> str:
    """API token for a second user, user-2."""
    return await auth_service.issue_token("user-2")


@pytest.fixture
def auth_headers(auth_token: str) -> dict[str, str]:
    """Authorization header for user-1."""
    return {"Authorization": f"Bearer {auth_token}"}


@pytest_asyncio.fixture
async def client(mock_db: Any, storage: StorageService) -> AsyncGenerator[AsyncClient, None]:
    """Provide an async HTTP client for testing."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# File fixtures


@pytest.fixture
def sample_csv_file() -> tuple[str, bytes, str]:
    """Sample CSV file data for testing (filename, content, mime_type)."""
    return (
        "yields.csv",
        b"field,crop,yield_t_ha\nNorth,wheat,7.2\nSouth,barley,5.9\n",
        "text/csv",
    )


@pytest.fixture
def sample_requirements_file() -> tuple[str, bytes, str]:
    """Sample certification requirements file (filename, content, mime_type)."""
    return (
        "organic_rules.txt",
        b"1. No synthetic pesticides for 36 months.\n2. Buffer zones of 8m.\n",
        "text/plain",
    )


@pytest.fixture
def oversized_file() -> tuple[str, bytes, str]:
    """Oversized file data for testing size validation (filename, content, mime_type)."""
    from fileanalyst.models.files import MAX_FILE_SIZE

    return ("large_file.csv", b"x" * (MAX_FILE_SIZE + 1), "text/csv")


@pytest.fixture
def invalid_type_file() -> tuple[str, bytes, str]:
    """Invalid file type for testing type validation (filename, content, mime_type)."""
    return ("script.exe", b"MZ fake executable", "application/x-msdownload")
