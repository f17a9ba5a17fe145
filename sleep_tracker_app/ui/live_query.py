"""
Live view of every stored sleep night.

Re-reads the table after each committed write and re-emits the rows on
the thread that owns the query object (the GUI thread).
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

from PyQt6.QtCore import QObject, pyqtSignal, pyqtSlot

from sleep_tracker_app.core.exceptions import StoreError

if TYPE_CHECKING:
    from sleep_tracker_app.core.dataclasses import SleepNight
    from sleep_tracker_app.ui.protocols import SleepNightStoreProtocol

logger = logging.getLogger(__name__)


class LiveNightsQuery(QObject):
    """
    Continuously updated, most-recent-first tuple of sleep nights.

    Every read is numbered by begin_read() before it starts. Reads finish
    on different threads in any order, so rows from a read older than the
    last delivered one are dropped.
    """

    nights_changed = pyqtSignal(object)  # tuple[SleepNight, ...]

    # Emitted on the reading thread, delivered queued to _deliver when that is not ours
    _fetched = pyqtSignal(int, object)

    def __init__(self, repository: SleepNightStoreProtocol, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._repository = repository
        self._value: tuple[SleepNight, ...] = ()
        self._read_lock = threading.Lock()
        self._last_read_id = 0
        self._delivered_read_id = 0
        self._fetched.connect(self._deliver)
        self._remove_listener = repository.add_change_listener(self._on_table_changed)

    @property
    def value(self) -> tuple[SleepNight, ...]:
        """Last rows delivered on the owning thread."""
        return self._value

    def begin_read(self) -> int:
        """Number a read that is about to start."""
        with self._read_lock:
            self._last_read_id += 1
            return self._last_read_id

    def post(self, read_id: int, nights: list[SleepNight] | tuple[SleepNight, ...]) -> None:
        """Publish rows read elsewhere (initial load) under the id from begin_read()."""
        self._fetched.emit(read_id, tuple(nights))

    def stop(self) -> None:
        """Stop following the table."""
        if self._remove_listener is not None:
            self._remove_listener()
            self._remove_listener = None

    def _on_table_changed(self) -> None:
        # Runs on the thread that committed the write
        read_id = self.begin_read()
        try:
            nights = self._repository.get_all_nights()
        except StoreError:
            logger.exception("Failed to refresh sleep nights after a write")
            return
        self._fetched.emit(read_id, tuple(nights))

    @pyqtSlot(int, object)
    def _deliver(self, read_id: int, nights: tuple[SleepNight, ...]) -> None:
        if self._remove_listener is None:
            return
        if read_id < self._delivered_read_id:
            logger.debug("Dropping rows of read %s, read %s already delivered", read_id, self._delivered_read_id)
            return
        self._delivered_read_id = read_id
        self._value = nights
        self.nights_changed.emit(nights)
