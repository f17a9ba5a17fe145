"""Base repository class with shared SQLite plumbing for the store gateways."""

from __future__ import annotations

import contextlib
import logging
import sqlite3
from contextlib import contextmanager
from typing import TYPE_CHECKING

from sleep_tracker_app.core.exceptions import ErrorCodes, StoreError, StoreOperation

if TYPE_CHECKING:
    from collections.abc import Callable, Generator
    from pathlib import Path

logger = logging.getLogger(__name__)


class BaseRepository:
    """
    Opens one short-lived connection per store call.

    Repositories may be called from any thread, so no connection is ever
    shared. Every sqlite3 failure leaves as a StoreError naming the
    operation that was attempted.
    """

    BUSY_TIMEOUT_SECONDS = 30.0

    def __init__(
        self,
        db_path: Path,
        validate_table_name: Callable[[str], str],
        validate_column_name: Callable[[str], str],
    ) -> None:
        """
        Args:
            db_path: SQLite file created by DatabaseManager
            validate_table_name: Refuses tables outside DatabaseManager.TABLE_COLUMNS
            validate_column_name: Refuses columns outside DatabaseManager.TABLE_COLUMNS

        """
        self.db_path = db_path
        self._validate_table_name = validate_table_name
        self._validate_column_name = validate_column_name

    @contextmanager
    def _transaction(self, operation: StoreOperation) -> Generator[sqlite3.Connection, None, None]:
        """Yield a connection; commit when the block succeeds, roll back otherwise."""
        conn = self._open(operation)
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            with contextlib.suppress(sqlite3.Error):
                conn.rollback()
            raise self._as_store_error(e, operation) from e
        finally:
            conn.close()

    def _open(self, operation: StoreOperation) -> sqlite3.Connection:
        conn = None
        try:
            conn = sqlite3.connect(self.db_path, timeout=self.BUSY_TIMEOUT_SECONDS)
            conn.execute("PRAGMA journal_mode = WAL")
        except sqlite3.Error as e:
            if conn is not None:
                conn.close()
            logger.exception("Could not open sleep database at %s", self.db_path)
            msg = f"Cannot open sleep database {self.db_path}: {e}"
            raise StoreError(msg, operation, ErrorCodes.DB_CONNECTION_FAILED) from e
        return conn

    @staticmethod
    def _as_store_error(error: sqlite3.Error, operation: StoreOperation) -> StoreError:
        error_code = ErrorCodes.DB_INTEGRITY_VIOLATION if isinstance(error, sqlite3.IntegrityError) else None
        logger.error("Sleep night %s failed: %s", operation, error)
        return StoreError(
            f"Sleep night {operation} failed: {error}",
            operation,
            error_code,
            {"sqlite_error": type(error).__name__},
        )
