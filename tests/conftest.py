"""Shared pytest fixtures for sleeptrack tests."""

import pytest

from sleeptrack.core.store import SessionStore
from tests.helpers import StepClock


@pytest.fixture
def mock_data_dir(tmp_path, monkeypatch):
    """Point the sleeptrack data directory at tmp_path for test isolation.

    This ensures tests don't write to the real ~/.sleeptrack/ directory.
    Also resets the process-wide store so each test gets a fresh database.
    """
    monkeypatch.setenv("SLEEPTRACK_HOME", str(tmp_path))
    monkeypatch.setattr("sleeptrack.core.store._instance", None)
    return tmp_path


@pytest.fixture
def store(mock_data_dir):
    """A SessionStore backed by a database in tmp_path."""
    return SessionStore(mock_data_dir / "test.db")


@pytest.fixture
def clock():
    """A StepClock advancing one minute per read."""
    return StepClock()
