"""
FormDrop Backend: Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session: AsyncMock standing in for AsyncSession
    ├── db_engine / session_factory / db_session: real SQLite store (aiosqlite)
    ├── temp_storage / upload_store: isolated upload directory
    ├── fake_notifier: Notifier double recording notify() calls
    ├── sample_image_bytes: small fake PNG payload
    └── test_client: HTTPX AsyncClient wired to the app with the doubles above
"""

import os
import tempfile
from unittest.mock import AsyncMock, MagicMock

# Settings are read at import time; configure the environment first
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///" + os.path.join(
    tempfile.mkdtemp(prefix="formdrop_db_"), "unused.db"
)
os.environ["STORAGE_ROOT"] = tempfile.mkdtemp(prefix="formdrop_test_")
os.environ["EMAIL_USER"] = "forms@example.org"
os.environ["EMAIL_PASS"] = "test-password-not-real"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.database import Base, get_db_session
from app.models.submission import Submission  # noqa: F401
from app.services.notifier import Notifier, get_notifier
from app.services.upload_service import UploadService, get_upload_service


@pytest.fixture
def mock_db_session():
    """
    A mock async database session (no real DB).

    Usage:
        mock_db_session.commit.side_effect = OperationalError(...)
        await SubmissionRepository(mock_db_session).save(record)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.refresh = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest_asyncio.fixture
async def db_engine(tmp_path):
    """A throwaway SQLite database with the submissions table created."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'formdrop.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def temp_storage(tmp_path):
    """Path of an upload directory that does not exist yet."""
    return str(tmp_path / "uploads")


@pytest.fixture
def upload_store(temp_storage):
    return UploadService(storage_root=temp_storage)


@pytest.fixture
def fake_notifier():
    """A Notifier double: notify() is an AsyncMock, nothing is sent."""
    notifier = MagicMock(spec=Notifier)
    notifier.notify = AsyncMock(return_value=None)
    return notifier


@pytest.fixture
def sample_image_bytes():
    """PNG signature followed by filler; enough for storage and mail tests."""
    return b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


@pytest.fixture
def form_fields():
    return {"name": "Ann", "age": "30", "message": "hi", "email": "a@x.com"}


@pytest.fixture
def app_instance(session_factory, upload_store, fake_notifier):
    """
    The FastAPI app with the store, upload directory and notifier replaced.

    Tests may add their own dependency_overrides on top; all are cleared
    afterwards.
    """
    from app.main import app as fastapi_app

    async def override_db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    fastapi_app.dependency_overrides[get_db_session] = override_db_session
    fastapi_app.dependency_overrides[get_upload_service] = lambda: upload_store
    fastapi_app.dependency_overrides[get_notifier] = lambda: fake_notifier
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def test_client(app_instance):
    """
    HTTPX AsyncClient routed straight to the app (no server, no lifespan).

    Usage:
        async def test_root(test_client):
            response = await test_client.get("/")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app_instance)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
