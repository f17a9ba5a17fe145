"""
File system constants for Sleep Tracker Application.

Contains file names and application identifiers used for persistence.
"""

from enum import StrEnum


class FileName(StrEnum):
    """File names used by the application."""

    SLEEP_TRACKER_DB = "sleep_tracker.db"
    LOG_FILE = "sleep_tracker_app.log"


class SettingsKey(StrEnum):
    """QSettings organization, application and value keys."""

    ORGANIZATION = "SleepResearch"
    APPLICATION = "SleepTrackerApp"
    DATABASE_PATH = "database_path"
    WINDOW_WIDTH = "window_width"
    WINDOW_HEIGHT = "window_height"
    LOG_LEVEL = "log_level"
