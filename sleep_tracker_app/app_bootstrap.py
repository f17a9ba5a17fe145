#!/usr/bin/env python3
"""
Application bootstrap utilities.

Provides shared, UI-agnostic setup for logging.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sleep_tracker_app.core.constants import FileName
from sleep_tracker_app.utils.resource_resolver import is_frozen, resource_resolver

if TYPE_CHECKING:
    from pathlib import Path

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str = "WARNING") -> Path | None:
    """
    Configure the root logger at the given level name.

    Frozen builds have no console, so they also write to a log file in
    the user data directory.

    Returns:
        Path to log file, or None if only logging to stderr.

    """
    log_level = logging.getLevelName(level.upper())
    if not isinstance(log_level, int):
        log_level = logging.WARNING

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    log_file: Path | None = None
    if is_frozen():
        log_file = resource_resolver.get_user_data_path(FileName.LOG_FILE)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    logging.basicConfig(level=log_level, format=LOG_FORMAT, handlers=handlers)
    return log_file
