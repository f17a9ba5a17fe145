#!/usr/bin/env python3
"""
Database Manager for Sleep Tracker Application
Owns the SQLite file, creates its schema and builds the repositories on top of it.
"""

from __future__ import annotations

import logging
import sqlite3
from contextlib import closing
from typing import TYPE_CHECKING, ClassVar

from sleep_tracker_app.core.constants import DatabaseColumn, DatabaseTable
from sleep_tracker_app.core.exceptions import DatabaseError, ErrorCodes, ValidationError
from sleep_tracker_app.core.validation import InputValidator
from sleep_tracker_app.data.database_schema import DatabaseSchemaManager
from sleep_tracker_app.data.repositories import SleepNightRepository
from sleep_tracker_app.utils.resource_resolver import get_database_path

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)


class DatabaseManager:
    """
    Entry point to the sleep tracker database.

    Table and column identifiers are formatted into SQL, so every one of
    them is checked against TABLE_COLUMNS first.
    """

    TABLE_COLUMNS: ClassVar[dict[str, frozenset[str]]] = {
        DatabaseTable.SLEEP_NIGHTS: frozenset(DatabaseColumn),
    }

    def __init__(self, db_path: Path | str | None = None) -> None:
        """Open (and if needed create) the database; db_path defaults to the user data directory."""
        self.db_path = InputValidator.validate_database_path(db_path or get_database_path())

        self._schema_manager = DatabaseSchemaManager(
            validate_table_name=self.validate_table_name,
            validate_column_name=self.validate_column_name,
        )
        self.initialize_schema()

        self.sleep_nights = SleepNightRepository(
            self.db_path,
            self.validate_table_name,
            self.validate_column_name,
        )

    def validate_table_name(self, table_name: str) -> str:
        if table_name not in self.TABLE_COLUMNS:
            msg = f"Unknown table: {table_name}"
            raise ValidationError(msg, ErrorCodes.INVALID_INPUT, {"table": table_name})
        return table_name

    def validate_column_name(self, column_name: str) -> str:
        if not any(column_name in columns for columns in self.TABLE_COLUMNS.values()):
            msg = f"Unknown column: {column_name}"
            raise ValidationError(msg, ErrorCodes.INVALID_INPUT, {"column": column_name})
        return column_name

    def initialize_schema(self) -> None:
        """Create missing tables and indexes. Safe to call on an existing database."""
        logger.info("Initializing database schema at %s", self.db_path)
        try:
            with closing(sqlite3.connect(self.db_path, timeout=SleepNightRepository.BUSY_TIMEOUT_SECONDS)) as conn:
                conn.execute("PRAGMA journal_mode = WAL")
                self._schema_manager.init_all_tables(conn)
                conn.commit()
        except sqlite3.Error as e:
            logger.exception("Could not initialize database schema at %s", self.db_path)
            msg = f"Cannot initialize sleep database at {self.db_path}: {e}"
            raise DatabaseError(msg, ErrorCodes.DB_CONNECTION_FAILED, {"path": str(self.db_path)}) from e
