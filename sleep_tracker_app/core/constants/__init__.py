"""
Constants for Sleep Tracker Application.

This package provides centralized definitions for all string enums,
numeric constants, and configuration values used throughout the application.

The constants are organized into domain-specific modules:
- database: Database schema constants (tables, columns)
- io: File names and settings keys
- ui: Quality ratings, icons, time arithmetic and window defaults

All constants are re-exported from this __init__.py:

    from sleep_tracker_app.core.constants import DatabaseColumn, QualityIcon
"""

# Database constants
from .database import (
    DatabaseColumn,
    DatabaseTable,
)

# I/O constants
from .io import (
    FileName,
    SettingsKey,
)

# UI constants
from .ui import (
    UNRATED_SLEEP_QUALITY,
    QualityIcon,
    SleepQuality,
    TimeConstants,
    TimeFormat,
    WindowDefaults,
)

__all__ = [
    "UNRATED_SLEEP_QUALITY",
    "DatabaseColumn",
    "DatabaseTable",
    "FileName",
    "QualityIcon",
    "SettingsKey",
    "SleepQuality",
    "TimeConstants",
    "TimeFormat",
    "WindowDefaults",
]
