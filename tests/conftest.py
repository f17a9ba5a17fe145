#!/usr/bin/env python3
"""
Shared test fixtures for the sleep tracker application.
Provides a temporary database, a synchronous task scope and a controllable clock.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from types import SimpleNamespace
from typing import Any

import pytest

from sleep_tracker_app.data.database import DatabaseManager

# Run Qt headless when no display is available.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

START_OF_NIGHT_MILLIS = 1_700_000_000_000


def pytest_configure(config):
    """Register the markers used across the suite."""
    config.addinivalue_line("markers", "gui: mark test as a GUI test")
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")


class SynchronousTaskScope:
    """Task scope that runs each operation inline on the calling thread."""

    def __init__(self) -> None:
        self.launched: list[Any] = []
        self.closed = False

    def launch(self, operation, on_success=None, on_error=None):
        if self.closed:
            msg = "Cannot launch a store task after the scope has been cancelled."
            raise RuntimeError(msg)

        self.launched.append(operation)
        try:
            result = operation()
        except Exception as e:
            if on_error is not None:
                on_error(e)
            return SimpleNamespace(result=None, error=e)

        if on_success is not None:
            on_success(result)
        return SimpleNamespace(result=result, error=None)

    def cancel_all(self) -> None:
        self.closed = True


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, now: int = START_OF_NIGHT_MILLIS) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, millis: int) -> None:
        self.now += millis


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def test_db_path(temp_dir):
    """Provide path for test database."""
    return temp_dir / "test_sleep_tracker.db"


@pytest.fixture
def db_manager(test_db_path):
    """Create a database manager on a fresh database file."""
    return DatabaseManager(test_db_path)


@pytest.fixture
def repository(db_manager):
    """Sleep night repository backed by the temporary database."""
    return db_manager.sleep_nights


@pytest.fixture
def sync_scope():
    """Task scope running store calls inline."""
    return SynchronousTaskScope()


@pytest.fixture
def clock():
    """Controllable clock starting at a fixed instant."""
    return FakeClock()
