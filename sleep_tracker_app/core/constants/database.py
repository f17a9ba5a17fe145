"""
Database schema constants for Sleep Tracker Application.

Contains enums for database tables and column names.
"""

from enum import StrEnum


class DatabaseTable(StrEnum):
    """Database table names."""

    SLEEP_NIGHTS = "daily_sleep_quality_table"


class DatabaseColumn(StrEnum):
    """Database column names."""

    NIGHT_ID = "night_id"
    START_TIME_MILLI = "start_time_milli"
    END_TIME_MILLI = "end_time_milli"
    QUALITY_RATING = "quality_rating"
