"""
Qt-dependent utilities for the UI layer.

These utilities require PyQt6 and should only be used within the UI layer.
Pure Python utilities are in sleep_tracker_app.utils.
"""

from sleep_tracker_app.ui.utils.config import ConfigManager

__all__ = [
    "ConfigManager",
]
