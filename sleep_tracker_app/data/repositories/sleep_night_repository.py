"""Repository for sleep night database operations."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import TYPE_CHECKING

from sleep_tracker_app.core.constants import DatabaseColumn, DatabaseTable
from sleep_tracker_app.core.dataclasses import SleepNight
from sleep_tracker_app.core.exceptions import StoreOperation
from sleep_tracker_app.core.validation import InputValidator
from sleep_tracker_app.data.repositories.base_repository import BaseRepository

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

ChangeListener = Callable[[], None]


class SleepNightRepository(BaseRepository):
    """
    Repository for the sleep night table.

    Every successful write notifies the registered change listeners after
    the transaction commits. Listeners run on the thread that performed
    the write.
    """

    def __init__(
        self,
        db_path: Path,
        validate_table_name: Callable[[str], str],
        validate_column_name: Callable[[str], str],
    ) -> None:
        super().__init__(db_path, validate_table_name, validate_column_name)
        self._listeners: list[ChangeListener] = []
        self._listeners_lock = threading.Lock()

    # ------------------------------------------------------------------
    # Change notification
    # ------------------------------------------------------------------

    def add_change_listener(self, listener: ChangeListener) -> Callable[[], None]:
        """Register a callback fired after each committed write. Returns an unsubscribe function."""
        with self._listeners_lock:
            self._listeners.append(listener)

        def remove() -> None:
            with self._listeners_lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return remove

    def _notify_changed(self) -> None:
        with self._listeners_lock:
            listeners = self._listeners[:]
        for listener in listeners:
            try:
                listener()
            except Exception:
                logger.exception("Error in sleep night change listener")

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def insert(self, night: SleepNight) -> int:
        """Insert a night and return the id the database assigned to it."""
        InputValidator.validate_sleep_night(night)
        table_name = self._validate_table_name(DatabaseTable.SLEEP_NIGHTS)

        with self._transaction(StoreOperation.INSERT) as conn:
            cursor = conn.execute(
                f"""
                INSERT INTO {table_name} (
                    {self._validate_column_name(DatabaseColumn.START_TIME_MILLI)},
                    {self._validate_column_name(DatabaseColumn.END_TIME_MILLI)},
                    {self._validate_column_name(DatabaseColumn.QUALITY_RATING)}
                ) VALUES (?, ?, ?)
            """,
                (night.start_time_milli, night.end_time_milli, night.sleep_quality),
            )
            night_id = cursor.lastrowid

        logger.debug("Inserted sleep night %s", night_id)
        self._notify_changed()
        return night_id

    def update(self, night: SleepNight) -> None:
        """Overwrite the stored night with the same id."""
        InputValidator.validate_sleep_night(night, require_id=True)
        table_name = self._validate_table_name(DatabaseTable.SLEEP_NIGHTS)

        with self._transaction(StoreOperation.UPDATE) as conn:
            cursor = conn.execute(
                f"""
                UPDATE {table_name} SET
                    {self._validate_column_name(DatabaseColumn.START_TIME_MILLI)} = ?,
                    {self._validate_column_name(DatabaseColumn.END_TIME_MILLI)} = ?,
                    {self._validate_column_name(DatabaseColumn.QUALITY_RATING)} = ?
                WHERE {self._validate_column_name(DatabaseColumn.NIGHT_ID)} = ?
            """,
                (night.start_time_milli, night.end_time_milli, night.sleep_quality, night.night_id),
            )
            updated = cursor.rowcount

        if updated == 0:
            logger.warning("Update matched no sleep night with id %s", night.night_id)
            return

        logger.debug("Updated sleep night %s", night.night_id)
        self._notify_changed()

    def clear(self) -> int:
        """Delete every night. Returns the number of rows removed."""
        table_name = self._validate_table_name(DatabaseTable.SLEEP_NIGHTS)

        with self._transaction(StoreOperation.CLEAR) as conn:
            deleted = conn.execute(f"DELETE FROM {table_name}").rowcount

        logger.info("Cleared %s sleep nights", deleted)
        self._notify_changed()
        return deleted

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self, night_id: int) -> SleepNight | None:
        """Load one night by id."""
        rows = self._select(f"WHERE {self._validate_column_name(DatabaseColumn.NIGHT_ID)} = ?", (night_id,))
        return rows[0] if rows else None

    def get_tonight(self) -> SleepNight | None:
        """Load the most recently created night, completed or not."""
        rows = self._select(f"ORDER BY {self._validate_column_name(DatabaseColumn.NIGHT_ID)} DESC LIMIT 1")
        return rows[0] if rows else None

    def get_all_nights(self) -> list[SleepNight]:
        """Load every night, most recent first."""
        return self._select(f"ORDER BY {self._validate_column_name(DatabaseColumn.NIGHT_ID)} DESC")

    def _select(self, clause: str, params: tuple = ()) -> list[SleepNight]:
        table_name = self._validate_table_name(DatabaseTable.SLEEP_NIGHTS)

        with self._transaction(StoreOperation.READ) as conn:
            rows = conn.execute(
                f"""
                SELECT
                    {self._validate_column_name(DatabaseColumn.NIGHT_ID)},
                    {self._validate_column_name(DatabaseColumn.START_TIME_MILLI)},
                    {self._validate_column_name(DatabaseColumn.END_TIME_MILLI)},
                    {self._validate_column_name(DatabaseColumn.QUALITY_RATING)}
                FROM {table_name}
                {clause}
            """,
                params,
            ).fetchall()

        return [SleepNight.from_row(row) for row in rows]
