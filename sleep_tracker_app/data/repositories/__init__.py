"""Repository classes for database operations following the Repository pattern."""

from __future__ import annotations

from sleep_tracker_app.data.repositories.base_repository import BaseRepository
from sleep_tracker_app.data.repositories.sleep_night_repository import SleepNightRepository

__all__ = [
    "BaseRepository",
    "SleepNightRepository",
]
