"""
Notes API - Test Configuration (conftest.py)
============================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.
Who:   Used by all test files in the tests/ directory.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── db:           empty `notes` table in an in-memory SQLite database
    ├── db_session:   AsyncSession bound to that database
    ├── fake_clock:   manually advanced time source for cache expiry
    ├── note_cache:   MemoryCache driven by fake_clock
    ├── mock_store:   AsyncMock standing in for NoteStore
    ├── test_app:     fresh create_app() sharing note_cache
    ├── test_client:  HTTPX AsyncClient talking to test_app
    └── sample_note:  an unsaved Note
"""

import os

# Override settings for testing BEFORE any app imports: app.database builds
# its engine from these at import time.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["USE_DEV_AUTHENTICATION"] = "true"
os.environ["LOG_LEVEL"] = "WARNING"  # Reduce noise during tests

from typing import AsyncGenerator  # noqa: E402
from unittest.mock import AsyncMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402

from app.database import Base, async_session_factory, engine  # noqa: E402
from app.models.note import Note  # noqa: E402
from app.services.cache import MemoryCache  # noqa: E402
from app.services.note_store import NoteStore  # noqa: E402


class FakeClock:
    """Monotonic clock the test moves by hand."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db() -> AsyncGenerator[None, None]:
    """
    Creates the schema before the test and drops it afterwards.

    The engine is disposed at teardown so the next test opens its
    connection on its own event loop.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db) -> AsyncGenerator[AsyncSession, None]:
    async with async_session_factory() as session:
        yield session


# ══════════════════════════════════════════════════════════════════════════
# Cache & Service Doubles
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def note_cache(fake_clock) -> MemoryCache:
    return MemoryCache(clock=fake_clock)


@pytest.fixture
def mock_store():
    """
    Provides a mock NoteStore.

    Usage:
        mock_store.list_by_updated.return_value = [note]
        service = NoteService(store=mock_store, cache=note_cache)
    """
    store = AsyncMock(spec=NoteStore)
    store.list_by_updated.return_value = []
    store.get.return_value = None
    store.search_by_title.return_value = []
    store.add.side_effect = lambda note: note
    store.save.side_effect = lambda note: note
    return store


@pytest.fixture
def sample_note() -> Note:
    return Note.new(title="Groceries", content="milk, eggs")


# ══════════════════════════════════════════════════════════════════════════
# API Client
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def test_app(db, note_cache):
    """A fresh application sharing the test's note_cache."""
    from app.main import create_app

    return create_app(cache=note_cache)


@pytest_asyncio.fixture
async def test_client(test_app) -> AsyncGenerator[AsyncClient, None]:
    """
    Provides an async HTTP test client for endpoint testing.

    What:    HTTPX AsyncClient configured to talk to test_app.
    How:     Uses ASGITransport to route requests directly to the app.
             raise_app_exceptions=False lets 500 responses reach the test
             instead of re-raising the original exception.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=test_app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
