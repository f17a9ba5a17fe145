#!/usr/bin/env python3
"""
Core data structures for Sleep Tracker Application.

SleepNight is the record persisted by the sleep night repository.
AppConfig holds the settings loaded by the ConfigManager.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any

from sleep_tracker_app.core.constants import UNRATED_SLEEP_QUALITY, DatabaseColumn, WindowDefaults


def current_time_millis() -> int:
    """Wall clock time in milliseconds since the epoch."""
    return time.time_ns() // 1_000_000


@dataclass(frozen=True)
class SleepNight:
    """
    One tracked sleep interval.

    A night is in progress while its end time equals its start time.
    night_id is 0 until the store assigns one on insert.
    """

    night_id: int = 0
    start_time_milli: int = field(default_factory=current_time_millis)
    end_time_milli: int | None = None
    sleep_quality: int = UNRATED_SLEEP_QUALITY

    def __post_init__(self) -> None:
        if self.end_time_milli is None:
            object.__setattr__(self, "end_time_milli", self.start_time_milli)

    @property
    def is_in_progress(self) -> bool:
        """Check if the night has not been stopped yet."""
        return self.end_time_milli == self.start_time_milli

    @property
    def is_rated(self) -> bool:
        """Check if a quality rating in 0..5 has been given."""
        return 0 <= self.sleep_quality <= 5

    @property
    def duration_milli(self) -> int:
        """Elapsed time between start and end."""
        return self.end_time_milli - self.start_time_milli

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary keyed by database column."""
        return {
            DatabaseColumn.NIGHT_ID: self.night_id,
            DatabaseColumn.START_TIME_MILLI: self.start_time_milli,
            DatabaseColumn.END_TIME_MILLI: self.end_time_milli,
            DatabaseColumn.QUALITY_RATING: self.sleep_quality,
        }

    @classmethod
    def from_row(cls, row: tuple[int, int, int, int]) -> SleepNight:
        """Create from a (night_id, start, end, quality) database row."""
        night_id, start_time_milli, end_time_milli, sleep_quality = row
        return cls(
            night_id=night_id,
            start_time_milli=start_time_milli,
            end_time_milli=end_time_milli,
            sleep_quality=sleep_quality,
        )


@dataclass
class AppConfig:
    """Application configuration settings with defaults."""

    # Empty means "use the platform user data directory"
    database_path: str = ""

    window_width: int = WindowDefaults.WIDTH
    window_height: int = WindowDefaults.HEIGHT

    log_level: str = "WARNING"

    @classmethod
    def create_default(cls) -> AppConfig:
        """Create default configuration with all default values."""
        return cls()
