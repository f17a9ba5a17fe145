#!/usr/bin/env python3
"""
Database Schema Manager for Sleep Tracker Application.

Handles table and index creation for the sleep night store.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sleep_tracker_app.core.constants import UNRATED_SLEEP_QUALITY, DatabaseColumn, DatabaseTable

if TYPE_CHECKING:
    import sqlite3
    from collections.abc import Callable

logger = logging.getLogger(__name__)


class DatabaseSchemaManager:
    """
    Manages database schema creation.

    Used by DatabaseManager; table and column names go through the
    manager's validation callbacks before being formatted into SQL.
    """

    def __init__(
        self,
        validate_table_name: Callable[[str], str],
        validate_column_name: Callable[[str], str],
    ) -> None:
        self._validate_table_name = validate_table_name
        self._validate_column_name = validate_column_name

    def init_all_tables(self, conn: sqlite3.Connection) -> None:
        """Create every table and index used by the application."""
        self._create_sleep_nights_table(conn)

    def _create_sleep_nights_table(self, conn: sqlite3.Connection) -> None:
        table_name = self._validate_table_name(DatabaseTable.SLEEP_NIGHTS)
        night_id = self._validate_column_name(DatabaseColumn.NIGHT_ID)
        start_time = self._validate_column_name(DatabaseColumn.START_TIME_MILLI)

        conn.execute(f"""
            CREATE TABLE IF NOT EXISTS {table_name} (
                {night_id} INTEGER PRIMARY KEY AUTOINCREMENT,
                {start_time} INTEGER NOT NULL,
                {self._validate_column_name(DatabaseColumn.END_TIME_MILLI)} INTEGER NOT NULL,
                {self._validate_column_name(DatabaseColumn.QUALITY_RATING)} INTEGER NOT NULL DEFAULT {UNRATED_SLEEP_QUALITY}
            )
        """)
        conn.execute(f"CREATE INDEX IF NOT EXISTS idx_{table_name}_{start_time} ON {table_name} ({start_time})")
        logger.debug("Ensured table %s exists", table_name)
