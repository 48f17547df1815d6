"""
Test configuration and shared fixtures.

Contract tests use the `storage` fixture, which runs each test once per
engine: the in-memory engine and the SQLAlchemy engine on an in-memory
SQLite database. Each test gets a fresh, empty store.
"""

import time

import pytest

from core.database import create_db_engine
from storage import DatabaseStorage, MemoryStorage


@pytest.fixture
def memory_storage():
    return MemoryStorage()


@pytest.fixture
def db_engine():
    """Fresh in-memory SQLite engine (StaticPool, foreign keys on)."""
    engine = create_db_engine("sqlite:///:memory:")
    yield engine
    engine.dispose()


@pytest.fixture
def db_storage(db_engine):
    return DatabaseStorage(engine=db_engine)


@pytest.fixture(params=["memory", "database"])
def storage(request):
    """Run the test against both storage engines."""
    if request.param == "memory":
        return request.getfixturevalue("memory_storage")
    return request.getfixturevalue("db_storage")


@pytest.fixture
def sample_patient_data():
    return {
        "name": "Jane Doe",
        "phone": "5551234567",
        "email": "jane@example.com",
    }


@pytest.fixture
def patient(storage, sample_patient_data):
    return storage.create_patient(sample_patient_data)


@pytest.fixture
def new_york_tz(monkeypatch):
    """Run under a zone that falls back on 2024-11-03 (01:00-02:00 repeats)."""
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is not available on this platform")
    monkeypatch.setenv("TZ", "America/New_York")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()
