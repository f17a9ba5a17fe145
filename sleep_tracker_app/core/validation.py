#!/usr/bin/env python3
"""
Input Validation Module for Sleep Tracker Application
Checks the database location chosen by the user and the fields of sleep nights before they are stored.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

from sleep_tracker_app.core.constants import UNRATED_SLEEP_QUALITY, SleepQuality
from sleep_tracker_app.core.exceptions import ErrorCodes, SecurityError, ValidationError

if TYPE_CHECKING:
    from sleep_tracker_app.core.dataclasses import SleepNight


class InputValidator:
    """Input validation for the sleep tracker application."""

    DATABASE_SUFFIX = ".db"
    MAX_PATH_LENGTH = 4096

    @classmethod
    def validate_database_path(cls, db_path: str | Path) -> Path:
        """
        Validate the location of the SQLite file and create its directory.

        The file itself does not have to exist yet.

        Raises:
            ValidationError: If the path is empty, too long or not a .db file
            SecurityError: If the path climbs out of its directory with '..'

        """
        path = cls._to_path(db_path, "Database path")

        if path.suffix.lower() != cls.DATABASE_SUFFIX:
            msg = f"Database file must have the {cls.DATABASE_SUFFIX} extension: {path.name}"
            raise ValidationError(msg, ErrorCodes.INVALID_FORMAT, {"path": str(path)})

        if path.exists() and not path.is_file():
            msg = f"Database path is not a file: {path}"
            raise ValidationError(msg, ErrorCodes.INVALID_INPUT, {"path": str(path)})

        cls.ensure_directory(path.parent)
        return path

    @classmethod
    def ensure_directory(cls, dir_path: str | Path) -> Path:
        """Create dir_path (and parents) unless it already exists."""
        path = cls._to_path(dir_path, "Directory path")

        if path.exists():
            if not path.is_dir():
                msg = f"Path is not a directory: {path}"
                raise ValidationError(msg, ErrorCodes.INVALID_INPUT, {"path": str(path)})
            return path

        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            msg = f"Cannot create directory {path}: {e}"
            raise ValidationError(msg, ErrorCodes.FILE_PERMISSION_DENIED, {"path": str(path)}) from e
        return path

    @classmethod
    def _to_path(cls, raw: str | Path, label: str) -> Path:
        if not raw:
            msg = f"{label} cannot be empty"
            raise ValidationError(msg, ErrorCodes.MISSING_REQUIRED)

        path = Path(raw)
        if len(str(path)) > cls.MAX_PATH_LENGTH:
            msg = f"{label} is longer than {cls.MAX_PATH_LENGTH} characters"
            raise ValidationError(msg, ErrorCodes.INVALID_INPUT)

        if ".." in path.parts:
            msg = f"{label} must not contain '..': {path}"
            raise SecurityError(msg, ErrorCodes.PATH_TRAVERSAL, {"path": str(path)})

        return path

    @staticmethod
    def validate_integer(
        value: Any,
        min_val: int | None = None,
        max_val: int | None = None,
        name: str = "value",
    ) -> int:
        """Return value if it is an int within [min_val, max_val]; bools are refused."""
        if value is None:
            msg = f"{name} is required"
            raise ValidationError(msg, ErrorCodes.MISSING_REQUIRED)

        if isinstance(value, bool) or not isinstance(value, int):
            msg = f"{name} must be an integer, got {type(value).__name__}"
            raise ValidationError(msg, ErrorCodes.INVALID_INPUT, {name: value})

        out_of_range = (min_val is not None and value < min_val) or (max_val is not None and value > max_val)
        if out_of_range:
            bounds = f"[{'-inf' if min_val is None else min_val}, {'inf' if max_val is None else max_val}]"
            msg = f"{name} must be within {bounds}, got {value}"
            raise ValidationError(msg, ErrorCodes.OUT_OF_RANGE, {name: value})

        return value

    @classmethod
    def validate_sleep_night(cls, night: SleepNight, require_id: bool = False) -> SleepNight:
        """
        Check a night before it is written.

        Times must be non-negative milliseconds with end >= start, and the
        quality either unrated (-1) or a 0..5 rating. Updates need the id
        the store assigned on insert.
        """
        if require_id:
            cls.validate_integer(night.night_id, min_val=1, name="night_id")
        cls.validate_integer(night.start_time_milli, min_val=0, name="start_time_milli")
        cls.validate_integer(night.end_time_milli, min_val=night.start_time_milli, name="end_time_milli")
        cls.validate_integer(
            night.sleep_quality,
            min_val=UNRATED_SLEEP_QUALITY,
            max_val=SleepQuality.EXCELLENT,
            name="sleep_quality",
        )
        return night
