# ==============================================================================
# Shared Test Fixtures
# ==============================================================================
"""
Pytest fixtures shared across all test modules.

Provides:
- An in-memory SQLite database with fresh tables per test
- A FastAPI TestClient wired to that database
- SQL-backed and memory-backed event stores
- A fixed reference time and a helper for offsets from it
"""

import os

# Settings are read at import time, so point them at SQLite before anything
# from abtrack is imported.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "test"

from datetime import datetime, timedelta, timezone  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

import abtrack.models  # noqa: E402,F401
from abtrack.database import Base, SessionLocal, engine  # noqa: E402
from abtrack.main import app  # noqa: E402
from abtrack.services.store import MemoryEventStore, SqlEventStore  # noqa: E402

BASE_TIME = datetime(2025, 8, 16, 12, 0, 0, tzinfo=timezone.utc)


def at(minutes: float = 0) -> datetime:
    """A timestamp ``minutes`` after the fixed reference time."""
    return BASE_TIME + timedelta(minutes=minutes)


@pytest.fixture()
def db():
    """A database session over freshly created tables."""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    yield session
    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def client(db):
    """TestClient sharing the test database."""
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def sql_store(db):
    """SqlEventStore bound to the test session."""
    return SqlEventStore(db)


@pytest.fixture()
def memory_store():
    """MemoryEventStore whose clock stays at the reference time."""
    return MemoryEventStore(clock=lambda: BASE_TIME)
