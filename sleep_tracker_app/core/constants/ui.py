"""
UI-related constants for Sleep Tracker Application.

Contains enums and constants for quality ratings, list icons,
time arithmetic and window defaults.
"""

from enum import IntEnum, StrEnum

# ============================================================================
# SLEEP QUALITY
# ============================================================================

UNRATED_SLEEP_QUALITY = -1


class SleepQuality(IntEnum):
    """Sleep quality ratings a user can give a completed night."""

    VERY_BAD = 0
    POOR = 1
    SO_SO = 2
    OK = 3
    PRETTY_GOOD = 4
    EXCELLENT = 5


class QualityIcon(StrEnum):
    """Icon identifiers shown next to each night in the list."""

    SLEEP_0 = "ic_sleep_0"
    SLEEP_1 = "ic_sleep_1"
    SLEEP_2 = "ic_sleep_2"
    SLEEP_3 = "ic_sleep_3"
    SLEEP_4 = "ic_sleep_4"
    SLEEP_5 = "ic_sleep_5"
    SLEEP_ACTIVE = "ic_sleep_active"


# ============================================================================
# TIME
# ============================================================================


class TimeConstants:
    """Time-related constants."""

    MILLIS_PER_SECOND = 1000
    ONE_MINUTE_MILLIS = 60 * 1000
    ONE_HOUR_MILLIS = 60 * 60 * 1000
    SECONDS_PER_MINUTE = 60
    SECONDS_PER_HOUR = 3600


class TimeFormat(StrEnum):
    """strftime patterns."""

    WEEKDAY = "%A"
    NIGHT_DATE = "%A %b-%d-%Y Time: %H:%M"


# ============================================================================
# WINDOW
# ============================================================================


class WindowDefaults:
    """Default window geometry and timings."""

    WIDTH = 420
    HEIGHT = 640
    SNACKBAR_TIMEOUT_MS = 3000
    THREAD_WAIT_TIMEOUT_MS = 5000
