#!/usr/bin/env python3
"""
Sleep Tracker - Package Main Entry Point.

This module provides the entry point for the installed package:
    python -m sleep_tracker_app
    sleep-tracker (console script)
"""

from __future__ import annotations

import logging
import sys

from PyQt6.QtWidgets import QApplication

from sleep_tracker_app.app_bootstrap import setup_logging
from sleep_tracker_app.core.dataclasses import AppConfig
from sleep_tracker_app.core.exceptions import SleepTrackerError
from sleep_tracker_app.data.database import DatabaseManager
from sleep_tracker_app.ui.sleep_tracker_view_model import SleepTrackerViewModel
from sleep_tracker_app.ui.tracker_window import TrackerWindow
from sleep_tracker_app.ui.utils.config import ConfigManager


def main() -> int:
    """
    Main application entry point.

    Returns:
        Exit code (0 for success, non-zero for errors).

    """
    config_manager = ConfigManager()
    config = config_manager.config or AppConfig.create_default()

    log_file = setup_logging(config.log_level)
    logger = logging.getLogger(__name__)
    logger.info("Starting Sleep Tracker Application")
    if log_file:
        logger.info("Log file location: %s", log_file)

    if sys.platform.startswith("win"):
        sys.argv += ["--style=Fusion"]

    app = QApplication(sys.argv)

    try:
        db_manager = DatabaseManager(config.database_path or None)
    except SleepTrackerError:
        logger.exception("Could not open the sleep database")
        return 1

    view_model = SleepTrackerViewModel(db_manager.sleep_nights)
    window = TrackerWindow(view_model, config, config_manager)
    window.show()

    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
