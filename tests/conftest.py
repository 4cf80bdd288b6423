from pathlib import Path
from typing import Any, AsyncGenerator, Generator
from unittest.mock import AsyncMock, MagicMock

import pytest
from dotenv import load_dotenv
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession

from chatroom.config import Settings
from chatroom.database import Database
from chatroom.main import create_app

load_dotenv()


@pytest.fixture
def database_url(tmp_path: Path) -> str:
    """SQLite file database, fresh for every test."""
    return f"sqlite+aiosqlite:///{tmp_path / 'chatroom.db'}"


@pytest.fixture
async def database(database_url: str) -> AsyncGenerator[Database, None]:
    """Initialized Database for integration tests."""
    database = Database(database_url)
    await database.init()
    yield database
    await database.close()


@pytest.fixture
async def test_db(database: Database) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session for integration tests."""
    async with database.session_factory() as session:
        yield session


@pytest.fixture
async def mock_db() -> AsyncGenerator[AsyncMock, None]:
    """Create a mock database session for unit tests."""
    # Use mock to avoid database connection issues in unit tests
    mock_session = AsyncMock()
    mock_session.commit = AsyncMock()
    mock_session.rollback = AsyncMock()
    mock_session.close = AsyncMock()
    mock_session.refresh = AsyncMock()
    mock_session.execute = AsyncMock()
    mock_session.add = MagicMock()  # add is sync, not async

    yield mock_session


@pytest.fixture
def settings(database_url: str) -> Settings:
    """Settings for an app without a background reaper."""
    return Settings(
        env="test",
        commit_hash="abc123",
        database_url=database_url,
        reaper_enabled=False,
    )


@pytest.fixture
def client(settings: Settings) -> Generator[TestClient, Any, None]:
    """Create a test client for the FastAPI app."""
    with TestClient(create_app(settings)) as test_client:
        yield test_client
