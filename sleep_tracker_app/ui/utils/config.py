#!/usr/bin/env python3
"""
Persistent settings of the sleep tracker.

Values live in QSettings under the application's organization/name pair;
keys that are absent fall back to AppConfig.create_default().
"""

from __future__ import annotations

import logging
from threading import Lock

from PyQt6.QtCore import QSettings

from sleep_tracker_app.core.constants import SettingsKey
from sleep_tracker_app.core.dataclasses import AppConfig
from sleep_tracker_app.core.exceptions import ConfigurationError, ErrorCodes, ValidationError
from sleep_tracker_app.core.validation import InputValidator

logger = logging.getLogger(__name__)

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigManager:
    """Reads and writes AppConfig through QSettings."""

    def __init__(self, settings: QSettings | None = None) -> None:
        self._lock = Lock()
        if settings is None:
            settings = QSettings(SettingsKey.ORGANIZATION, SettingsKey.APPLICATION)
        self.settings = settings
        self.config: AppConfig | None = None
        self.config = self.try_load_config()

    def is_config_valid(self) -> bool:
        return self.config is not None

    def try_load_config(self) -> AppConfig | None:
        """Like load_config(), but a broken settings store yields None."""
        try:
            return self.load_config()
        except ConfigurationError as e:
            logger.warning("Ignoring stored settings: %s", e)
            return None

    def load_config(self) -> AppConfig:
        """
        Build an AppConfig from the stored settings.

        Raises:
            ConfigurationError: If the window size or log level stored is unusable

        """
        loaded = AppConfig.create_default()

        stored_path = self.settings.value(SettingsKey.DATABASE_PATH, "")
        if stored_path:
            loaded.database_path = str(stored_path)

        loaded.window_width = self._read_dimension(SettingsKey.WINDOW_WIDTH, loaded.window_width)
        loaded.window_height = self._read_dimension(SettingsKey.WINDOW_HEIGHT, loaded.window_height)

        stored_level = self.settings.value(SettingsKey.LOG_LEVEL, "")
        if stored_level:
            level = str(stored_level).upper()
            if level not in VALID_LOG_LEVELS:
                msg = f"Unknown log level {level!r}, expected one of {', '.join(VALID_LOG_LEVELS)}"
                raise ConfigurationError(msg, ErrorCodes.CONFIG_INVALID, {"log_level": level})
            loaded.log_level = level

        self.config = loaded
        logger.debug("Settings loaded: %s", loaded)
        return loaded

    def _read_dimension(self, key: SettingsKey, fallback: int) -> int:
        raw = self.settings.value(key, None)
        if raw is None:
            return fallback
        try:
            return InputValidator.validate_integer(int(raw), min_val=1, name=str(key))
        except (TypeError, ValueError, ValidationError) as e:
            msg = f"Stored {key} is not a positive size: {raw!r}"
            raise ConfigurationError(msg, ErrorCodes.CONFIG_INVALID, {str(key): raw}) from e

    def save_config(self) -> None:
        """Write the current AppConfig back and flush it."""
        current = self._require_config()

        with self._lock:
            for key, value in (
                (SettingsKey.DATABASE_PATH, current.database_path),
                (SettingsKey.WINDOW_WIDTH, current.window_width),
                (SettingsKey.WINDOW_HEIGHT, current.window_height),
                (SettingsKey.LOG_LEVEL, current.log_level),
            ):
                self.settings.setValue(key, value)
            self.settings.sync()

        logger.debug("Settings written to %s", self.settings.fileName())

    def _require_config(self) -> AppConfig:
        if self.config is None:
            msg = "No usable settings loaded; fix or reset them before saving"
            raise ConfigurationError(msg, ErrorCodes.CONFIG_INVALID)
        return self.config

    def update_database_path(self, path: str) -> None:
        self._require_config().database_path = path
        self.save_config()

    def update_window_size(self, width: int, height: int) -> None:
        current = self._require_config()
        current.window_width = InputValidator.validate_integer(width, min_val=1, name="window width")
        current.window_height = InputValidator.validate_integer(height, min_val=1, name="window height")
        self.save_config()
