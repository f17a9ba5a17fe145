#!/usr/bin/env python3
"""
Store Worker for Sleep Tracker Application
Runs sleep night store calls off the GUI thread and delivers the result back on it.

Each store call runs in a worker object moved onto its own QThread.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from PyQt6.QtCore import QObject, QThread, pyqtSignal, pyqtSlot

from sleep_tracker_app.core.constants import WindowDefaults

logger = logging.getLogger(__name__)

SuccessCallback = Callable[[Any], None]
ErrorCallback = Callable[[Exception], None]


class StoreWorkerObject(QObject):
    """
    Worker object that performs one store call.

    Runs one store call on a QThread and reports back through signals.
    """

    succeeded = pyqtSignal(object)  # Return value of the operation
    failed = pyqtSignal(object)  # Exception raised by the operation
    finished = pyqtSignal()  # Emitted last, after succeeded or failed

    def __init__(self, operation: Callable[[], Any]) -> None:
        super().__init__()
        self._operation = operation

    def run(self) -> None:
        """Run the store call. Called when thread starts."""
        try:
            result = self._operation()
        except Exception as e:
            logger.exception("Store worker error")
            self.failed.emit(e)
        else:
            self.succeeded.emit(result)
        finally:
            self.finished.emit()


class StoreTask(QObject):
    """
    Handle for one store call running on its own QThread.

    The task lives on the GUI thread, so the worker's queued signals land
    in its slots there and the callbacks run on the GUI thread. A cancelled
    task never invokes its callbacks; the store call itself is not interrupted.
    """

    done = pyqtSignal(object)  # StoreTask, emitted once the thread has finished

    def __init__(
        self,
        operation: Callable[[], Any],
        on_success: SuccessCallback | None = None,
        on_error: ErrorCallback | None = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._on_success = on_success
        self._on_error = on_error
        self._cancelled = False
        self._completed = False

        self._thread = QThread()
        self._worker = StoreWorkerObject(operation)

        # Move worker to thread
        self._worker.moveToThread(self._thread)
        self._thread.started.connect(self._worker.run)

        self._worker.succeeded.connect(self._handle_success)
        self._worker.failed.connect(self._handle_failure)

        # Thread and worker are released once the call returns
        self._worker.finished.connect(self._thread.quit)
        self._worker.finished.connect(self._worker.deleteLater)
        self._thread.finished.connect(self._handle_thread_finished)

    def start(self) -> None:
        """Start the store call in the background thread."""
        self._thread.start()

    def cancel(self) -> None:
        """Drop the callbacks and wait briefly for the thread to wind down."""
        self._cancelled = True
        if self._thread.isRunning():
            self._thread.quit()
            self._thread.wait(WindowDefaults.THREAD_WAIT_TIMEOUT_MS)

    def wait(self, timeout: int = -1) -> bool:
        """Block until the call has returned or timeout ms have passed."""
        if timeout < 0:
            return self._thread.wait()
        return self._thread.wait(timeout)

    def isRunning(self) -> bool:
        """Check if the store call is still running."""
        return self._thread.isRunning()

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled

    @property
    def is_completed(self) -> bool:
        """True once a success or failure has been delivered."""
        return self._completed

    @pyqtSlot(object)
    def _handle_success(self, result: Any) -> None:
        self._completed = True
        if self._cancelled:
            logger.debug("Discarding result of cancelled store task")
            return
        if self._on_success is not None:
            self._on_success(result)

    @pyqtSlot(object)
    def _handle_failure(self, error: Exception) -> None:
        self._completed = True
        if self._cancelled:
            logger.debug("Discarding failure of cancelled store task: %s", error)
            return
        if self._on_error is not None:
            self._on_error(error)

    @pyqtSlot()
    def _handle_thread_finished(self) -> None:
        # finished is emitted from the thread itself; let it fully exit before release
        self._thread.wait()
        self.done.emit(self)


class StoreTaskScope(QObject):
    """
    Owns every store task launched on behalf of one view-model.

    cancel_all() is the teardown: pending callbacks are dropped and no
    new task may be launched afterwards.
    """

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._tasks: list[StoreTask] = []
        self._closed = False

    def launch(
        self,
        operation: Callable[[], Any],
        on_success: SuccessCallback | None = None,
        on_error: ErrorCallback | None = None,
    ) -> StoreTask:
        """Run operation on a background thread and deliver the outcome on this thread."""
        if self._closed:
            msg = "Cannot launch a store task after the scope has been cancelled."
            raise RuntimeError(msg)

        task = StoreTask(operation, on_success, on_error, parent=self)
        task.done.connect(self._forget)
        self._tasks.append(task)
        task.start()
        return task

    def cancel_all(self) -> None:
        """Cancel every running task and refuse new ones."""
        self._closed = True
        tasks, self._tasks = self._tasks, []
        for task in tasks:
            task.cancel()
        if tasks:
            logger.info("Cancelled %s store tasks", len(tasks))

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def active_count(self) -> int:
        return len(self._tasks)

    @pyqtSlot(object)
    def _forget(self, task: StoreTask) -> None:
        if task in self._tasks:
            self._tasks.remove(task)
        task.deleteLater()
