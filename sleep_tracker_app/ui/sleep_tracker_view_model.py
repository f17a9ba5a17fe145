#!/usr/bin/env python3
"""
View-model for the sleep tracker screen.

Mediates between the sleep night repository and the tracker window:
user actions become one store call each, run on a background thread,
and their results are dispatched to the TrackerStore on the GUI thread.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import replace
from typing import TYPE_CHECKING, Any

from sleep_tracker_app.core.dataclasses import SleepNight, current_time_millis
from sleep_tracker_app.core.exceptions import StoreError, StoreOperation
from sleep_tracker_app.ui.live_query import LiveNightsQuery
from sleep_tracker_app.ui.store import Action, Actions, Selectors, TrackerStore, logging_middleware
from sleep_tracker_app.ui.workers.store_worker import StoreTaskScope
from sleep_tracker_app.utils.formatting import SleepTextFormatter

if TYPE_CHECKING:
    from sleep_tracker_app.ui.protocols import SleepNightStoreProtocol, TaskScopeProtocol
    from sleep_tracker_app.ui.store import StateListener, Unsubscribe

logger = logging.getLogger(__name__)


class SleepTrackerViewModel:
    """
    Start/stop/clear workflow for sleep nights.

    State lives in self.store; read it through the visibility properties or
    subscribe to it. One-shot events are drained with the on_*_navigated /
    on_*_shown methods, which return the pending value and reset it.

    Store calls finish in any order. Each read of the open night and each
    write is stamped with a generation; a result whose generation is no
    longer current is dropped. Reads requested while a write is in flight
    run once the last write has finished.
    """

    def __init__(
        self,
        repository: SleepNightStoreProtocol,
        scope: TaskScopeProtocol | None = None,
        store: TrackerStore | None = None,
        formatter: SleepTextFormatter | None = None,
        clock: Callable[[], int] = current_time_millis,
    ) -> None:
        if store is None:
            store = TrackerStore()
            store.add_middleware(logging_middleware)
        self.store = store
        self.formatter = formatter or SleepTextFormatter()
        self._repository = repository
        self._scope = scope if scope is not None else StoreTaskScope()
        self._clock = clock
        self._start_in_flight = False
        self._closed = False
        self._tonight_generation = 0
        self._writes_in_flight = 0
        self._reload_pending = False

        self.live_nights = LiveNightsQuery(repository)
        self.live_nights.nights_changed.connect(self._on_nights_changed)

        read_id = self.live_nights.begin_read()
        self._launch(
            self._repository.get_all_nights,
            StoreOperation.READ,
            lambda nights: self.live_nights.post(read_id, nights),
        )
        self.reload_tonight()

    # ------------------------------------------------------------------
    # Derived state
    # ------------------------------------------------------------------

    @property
    def tonight(self) -> SleepNight | None:
        return self.store.state.tonight

    @property
    def nights(self) -> tuple[SleepNight, ...]:
        return self.store.state.nights

    @property
    def start_button_visible(self) -> bool:
        return Selectors.start_button_visible(self.store.state)

    @property
    def stop_button_visible(self) -> bool:
        return Selectors.stop_button_visible(self.store.state)

    @property
    def clear_button_visible(self) -> bool:
        return Selectors.clear_button_visible(self.store.state)

    @property
    def nights_string(self) -> str:
        return Selectors.nights_summary(self.store.state, self.formatter)

    def subscribe(self, callback: StateListener) -> Unsubscribe:
        """Subscribe to tracker state changes."""
        return self.store.subscribe(callback)

    # ------------------------------------------------------------------
    # User actions
    # ------------------------------------------------------------------

    def on_start_tracking(self) -> None:
        """Insert a new open night, then re-read it as tonight."""
        if self.store.state.tonight is not None or self._start_in_flight:
            logger.warning("Ignoring start: a sleep night is already being tracked")
            return

        now = self._clock()
        new_night = SleepNight(start_time_milli=now, end_time_milli=now)

        def insert_and_reload() -> SleepNight | None:
            # Runs on the worker thread
            open_night = self._get_tonight_from_database()
            if open_night is not None:
                logger.warning("Not starting: sleep night %s is still open", open_night.night_id)
                return open_night
            self._repository.insert(new_night)
            return self._get_tonight_from_database()

        def started(night: SleepNight | None, generation: int) -> None:
            self._start_in_flight = False
            if not self._apply_tonight(night, generation):
                self._reload_pending = True

        def start_failed() -> None:
            self._start_in_flight = False

        self._start_in_flight = True
        if self._launch_write(insert_and_reload, StoreOperation.INSERT, started, on_failure=start_failed) is None:
            self._start_in_flight = False

    def on_stop_tracking(self) -> None:
        """Set tonight's end time, persist it and ask for the rating screen."""
        old_night = self.store.state.tonight
        if old_night is None:
            return
        if not old_night.is_in_progress:
            logger.warning("Ignoring stop: sleep night %s is already stopped", old_night.night_id)
            return

        # End strictly after start so the stored night reads as completed
        stopped = replace(old_night, end_time_milli=max(self._clock(), old_night.start_time_milli + 1))

        def update() -> SleepNight:
            self._repository.update(stopped)
            return stopped

        self._launch_write(
            update,
            StoreOperation.UPDATE,
            lambda night, _generation: self._dispatch(Actions.sleep_quality_navigation_requested(night)),
        )

    def on_clear(self) -> None:
        """Delete every night and raise the confirmation pulse."""
        self._launch_write(
            self._repository.clear,
            StoreOperation.CLEAR,
            lambda _deleted, _generation: self._dispatch(Actions.nights_cleared()),
        )

    def on_sleep_night_clicked(self, night_id: int) -> None:
        """Ask for the detail screen of a night."""
        self._dispatch(Actions.sleep_detail_navigation_requested(night_id))

    def reload_tonight(self) -> None:
        """Re-read the open night, e.g. after the rating screen has closed."""
        if self._writes_in_flight:
            # The read could miss the write; run it once the writes are done
            self._reload_pending = True
            return

        generation = self._next_tonight_generation()
        self._launch(
            self._get_tonight_from_database,
            StoreOperation.READ,
            lambda night: self._apply_tonight(night, generation),
        )

    # ------------------------------------------------------------------
    # Event draining
    # ------------------------------------------------------------------

    def on_sleep_quality_navigated(self) -> SleepNight | None:
        """Return the pending rating request and clear it."""
        night = self.store.state.navigate_to_sleep_quality
        self._dispatch(Actions.sleep_quality_navigated())
        return night

    def on_sleep_detail_navigated(self) -> int | None:
        """Return the pending detail request and clear it."""
        night_id = self.store.state.navigate_to_sleep_detail
        self._dispatch(Actions.sleep_detail_navigated())
        return night_id

    def on_snackbar_shown(self) -> bool:
        """Return whether the confirmation pulse was pending and clear it."""
        pending = self.store.state.show_snackbar_event
        self._dispatch(Actions.snackbar_shown())
        return pending

    def on_store_error_shown(self) -> StoreError | None:
        """Return the pending store error and clear it."""
        error = self.store.state.store_error
        self._dispatch(Actions.store_error_shown())
        return error

    # ------------------------------------------------------------------
    # Lifetime
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Cancel background work and stop following the table."""
        if self._closed:
            return
        self._closed = True
        self._scope.cancel_all()
        self.live_nights.stop()
        logger.info("SleepTrackerViewModel closed")

    @property
    def is_closed(self) -> bool:
        return self._closed

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _get_tonight_from_database(self) -> SleepNight | None:
        # Runs on the worker thread
        night = self._repository.get_tonight()
        if night is not None and not night.is_in_progress:
            return None
        return night

    def _next_tonight_generation(self) -> int:
        self._tonight_generation += 1
        return self._tonight_generation

    def _apply_tonight(self, night: SleepNight | None, generation: int) -> bool:
        """Dispatch a read of the open night unless a newer read or write has started since."""
        if generation != self._tonight_generation:
            logger.debug("Dropping stale read of tonight (generation %s, now %s)", generation, self._tonight_generation)
            return False
        self._dispatch(Actions.tonight_loaded(night))
        return True

    def _launch_write(
        self,
        operation: Callable[[], Any],
        store_operation: StoreOperation,
        on_success: Callable[[Any, int], None],
        on_failure: Callable[[], None] | None = None,
    ) -> Any:
        generation = self._next_tonight_generation()
        self._writes_in_flight += 1

        def succeeded(result: Any) -> None:
            on_success(result, generation)
            self._write_finished()

        def failed() -> None:
            if on_failure is not None:
                on_failure()
            # Reads dropped while this write was in flight left tonight unconfirmed
            self._reload_pending = True
            self._write_finished()

        task = self._launch(operation, store_operation, succeeded, on_failure=failed)
        if task is None:
            self._writes_in_flight -= 1
        return task

    def _write_finished(self) -> None:
        self._writes_in_flight -= 1
        if self._writes_in_flight == 0 and self._reload_pending and not self._closed:
            self._reload_pending = False
            self.reload_tonight()

    def _on_nights_changed(self, nights: tuple[SleepNight, ...]) -> None:
        if self._closed:
            return
        self._dispatch(Actions.nights_loaded(nights))

    def _dispatch(self, action: Action) -> None:
        self.store.dispatch_safe(action)

    def _launch(
        self,
        operation: Callable[[], Any],
        store_operation: StoreOperation,
        on_success: Callable[[Any], None],
        on_failure: Callable[[], None] | None = None,
    ) -> Any:
        if self._closed:
            logger.warning("Ignoring %s: view-model is closed", store_operation)
            return None

        def handle_error(error: Exception) -> None:
            if on_failure is not None:
                on_failure()
            store_error = StoreError.wrap(error, store_operation)
            logger.error("Sleep night %s failed: %s", store_error.operation, store_error)
            self._dispatch(Actions.store_operation_failed(store_error))

        return self._scope.launch(operation, on_success=on_success, on_error=handle_error)
