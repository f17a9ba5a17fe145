"""
User data locations for the sleep tracker.

Running from source keeps the database beside the project checkout; a
frozen (PyInstaller) build keeps it in the platform application data folder.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from sleep_tracker_app.core.constants import FileName, SettingsKey

if TYPE_CHECKING:
    from collections.abc import Mapping


def is_frozen() -> bool:
    """True inside a PyInstaller bundle."""
    return bool(getattr(sys, "frozen", False)) and hasattr(sys, "_MEIPASS")


def platform_data_dir(
    platform: str | None = None,
    home: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> Path:
    """Per-user application data directory of the sleep tracker."""
    platform = platform or sys.platform
    home = home or Path.home()
    environ = os.environ if environ is None else environ

    if platform == "win32":
        base_dir = Path(environ.get("APPDATA") or home / "AppData" / "Roaming")
    elif platform == "darwin":
        base_dir = home / "Library" / "Application Support"
    else:
        base_dir = Path(environ.get("XDG_DATA_HOME") or home / ".local" / "share")

    return base_dir / SettingsKey.APPLICATION


class ResourceResolver:
    """Resolves where user data files (database, log) live."""

    def __init__(self, frozen: bool | None = None) -> None:
        self._frozen = is_frozen() if frozen is None else frozen
        # utils/ -> sleep_tracker_app/ -> project root
        self._source_root = Path(__file__).resolve().parents[2]

    @property
    def user_data_dir(self) -> Path:
        return platform_data_dir() if self._frozen else self._source_root

    def get_user_data_path(self, filename: str) -> Path:
        """Path of a user data file; the directory may not exist yet."""
        return self.user_data_dir / filename

    def get_database_path(self) -> Path:
        return self.get_user_data_path(FileName.SLEEP_TRACKER_DB)


# Global instance for easy access
resource_resolver = ResourceResolver()


def get_database_path() -> Path:
    """Get the default database file path."""
    return resource_resolver.get_database_path()
