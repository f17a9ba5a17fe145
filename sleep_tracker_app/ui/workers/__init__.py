"""Qt-based worker threads for background operations."""

from sleep_tracker_app.ui.workers.store_worker import StoreTask, StoreTaskScope, StoreWorkerObject

__all__ = [
    "StoreTask",
    "StoreTaskScope",
    "StoreWorkerObject",
]
