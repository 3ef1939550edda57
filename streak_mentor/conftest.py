# streak_mentor/conftest.py
import os

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

# Keep the app off real services and off the on-disk database during tests.
os.environ.setdefault("STREAK_STORE_BACKEND", "memory")
os.environ.setdefault("SKIP_ENV_VALIDATION", "1")

from streak_mentor.features.streaks.store import InMemoryKeyValueBackend, PersistedStreakStore  # noqa: E402


@pytest.fixture
def memory_store():
    """A fresh in-memory streak store."""
    return PersistedStreakStore(InMemoryKeyValueBackend())


@pytest.fixture
def sqlite_engine():
    """
    In-memory SQLite shared across connections.

    StaticPool keeps a single connection so tables survive between sessions.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    yield engine
    engine.dispose()


@pytest.fixture
def api_client(memory_store):
    """TestClient with the store overridden; tests add their own overrides."""
    from fastapi.testclient import TestClient

    from streak_mentor.api.deps import get_streak_store
    from streak_mentor.main import app

    app.dependency_overrides[get_streak_store] = lambda: memory_store
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()
