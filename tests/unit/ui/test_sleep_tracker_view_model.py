"""
Tests for SleepTrackerViewModel.

Store calls run inline through the synchronous task scope from conftest,
against a real SQLite repository.
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from sleep_tracker_app.core.constants import TimeConstants
from sleep_tracker_app.core.dataclasses import SleepNight
from sleep_tracker_app.core.exceptions import StoreError, StoreOperation
from sleep_tracker_app.ui.sleep_tracker_view_model import SleepTrackerViewModel

pytestmark = pytest.mark.usefixtures("qapp")

EIGHT_HOURS = 8 * TimeConstants.ONE_HOUR_MILLIS


@pytest.fixture
def view_model(repository, sync_scope, clock):
    vm = SleepTrackerViewModel(repository, scope=sync_scope, clock=clock)
    yield vm
    vm.close()


class StepTask:
    """Store call whose run and result delivery are triggered separately."""

    def __init__(self, operation, on_success, on_error) -> None:
        self.operation = operation
        self.on_success = on_success
        self.on_error = on_error
        self.result = None

    def run(self) -> StepTask:
        self.result = self.operation()
        return self

    def deliver(self) -> None:
        self.on_success(self.result)


class SteppedTaskScope:
    """Task scope that holds every call until the test runs and delivers it."""

    def __init__(self) -> None:
        self.tasks: list[StepTask] = []

    def launch(self, operation, on_success=None, on_error=None) -> StepTask:
        task = StepTask(operation, on_success, on_error)
        self.tasks.append(task)
        return task

    def cancel_all(self) -> None:
        self.tasks.clear()


@pytest.fixture
def spy_repository(repository):
    """Repository whose calls are recorded but still reach SQLite."""
    return MagicMock(wraps=repository)


# ============================================================================
# Initial state
# ============================================================================


class TestInitialState:
    """Tests for what the view-model loads on creation."""

    def test_empty_store(self, view_model: SleepTrackerViewModel) -> None:
        assert view_model.tonight is None
        assert view_model.nights == ()
        assert view_model.start_button_visible
        assert not view_model.stop_button_visible
        assert not view_model.clear_button_visible

    def test_picks_up_open_night(self, repository, sync_scope, clock) -> None:
        night_id = repository.insert(SleepNight(start_time_milli=1_000, end_time_milli=1_000))

        vm = SleepTrackerViewModel(repository, scope=sync_scope, clock=clock)

        assert vm.tonight.night_id == night_id
        assert len(vm.nights) == 1
        assert vm.stop_button_visible

    def test_completed_latest_night_is_not_tonight(self, repository, sync_scope, clock) -> None:
        repository.insert(SleepNight(start_time_milli=1_000, end_time_milli=9_000))

        vm = SleepTrackerViewModel(repository, scope=sync_scope, clock=clock)

        assert vm.tonight is None
        assert vm.start_button_visible
        assert vm.clear_button_visible


# ============================================================================
# Start / stop / clear
# ============================================================================


class TestStartTracking:
    """Tests for on_start_tracking."""

    def test_start_creates_open_night(self, view_model: SleepTrackerViewModel, repository, clock) -> None:
        view_model.on_start_tracking()

        tonight = view_model.tonight
        assert tonight is not None
        assert tonight.is_in_progress
        assert tonight.start_time_milli == clock.now
        assert tonight.night_id >= 1
        assert repository.get_tonight() == tonight

    def test_start_updates_nights_and_buttons(self, view_model: SleepTrackerViewModel) -> None:
        view_model.on_start_tracking()

        assert len(view_model.nights) == 1
        assert not view_model.start_button_visible
        assert view_model.stop_button_visible
        assert view_model.clear_button_visible

    def test_second_start_is_ignored(self, view_model: SleepTrackerViewModel, repository, clock) -> None:
        view_model.on_start_tracking()
        first = view_model.tonight
        clock.advance(1_000)

        view_model.on_start_tracking()

        assert view_model.tonight == first
        assert len(repository.get_all_nights()) == 1


class TestStopTracking:
    """Tests for on_stop_tracking."""

    def test_stop_completes_night_and_requests_rating(self, view_model: SleepTrackerViewModel, repository, clock) -> None:
        view_model.on_start_tracking()
        clock.advance(EIGHT_HOURS)

        view_model.on_stop_tracking()

        pending = view_model.store.state.navigate_to_sleep_quality
        assert pending is not None
        assert pending.end_time_milli > pending.start_time_milli
        assert pending.duration_milli == EIGHT_HOURS
        assert not repository.get_tonight().is_in_progress

    def test_stop_keeps_stop_button_until_reload(self, view_model: SleepTrackerViewModel, clock) -> None:
        view_model.on_start_tracking()
        clock.advance(EIGHT_HOURS)
        view_model.on_stop_tracking()

        assert view_model.stop_button_visible
        assert not view_model.start_button_visible

        view_model.reload_tonight()

        assert view_model.tonight is None
        assert view_model.start_button_visible

    def test_stop_in_same_millisecond_still_completes(self, view_model: SleepTrackerViewModel, repository) -> None:
        """End is pushed one millisecond past start when the clock has not moved."""
        view_model.on_start_tracking()

        view_model.on_stop_tracking()

        pending = view_model.on_sleep_quality_navigated()
        assert pending.end_time_milli == pending.start_time_milli + 1
        assert not repository.get(pending.night_id).is_in_progress

    def test_stop_without_open_night_is_noop(self, spy_repository, sync_scope, clock) -> None:
        vm = SleepTrackerViewModel(spy_repository, scope=sync_scope, clock=clock)

        vm.on_stop_tracking()

        spy_repository.update.assert_not_called()
        assert vm.store.state.navigate_to_sleep_quality is None

    def test_second_stop_is_ignored(self, view_model: SleepTrackerViewModel, clock) -> None:
        view_model.on_start_tracking()
        clock.advance(EIGHT_HOURS)
        view_model.on_stop_tracking()
        first = view_model.on_sleep_quality_navigated()
        clock.advance(1_000)

        view_model.on_stop_tracking()

        assert view_model.store.state.navigate_to_sleep_quality is None
        assert view_model.tonight == first


class TestClear:
    """Tests for on_clear."""

    def test_clear_empties_everything(self, view_model: SleepTrackerViewModel, repository) -> None:
        view_model.on_start_tracking()

        view_model.on_clear()

        assert view_model.nights == ()
        assert view_model.tonight is None
        assert repository.get_all_nights() == []
        assert view_model.start_button_visible
        assert not view_model.stop_button_visible
        assert not view_model.clear_button_visible

    def test_clear_raises_snackbar_once(self, view_model: SleepTrackerViewModel) -> None:
        view_model.on_start_tracking()
        view_model.on_clear()

        assert view_model.on_snackbar_shown() is True
        assert view_model.on_snackbar_shown() is False


# ============================================================================
# Events
# ============================================================================


class TestEventDraining:
    """One-shot events are returned once, then reset."""

    def test_quality_event_exactly_once(self, view_model: SleepTrackerViewModel, clock) -> None:
        view_model.on_start_tracking()
        clock.advance(EIGHT_HOURS)
        view_model.on_stop_tracking()

        assert view_model.on_sleep_quality_navigated() is not None
        assert view_model.on_sleep_quality_navigated() is None

    def test_detail_event_exactly_once(self, view_model: SleepTrackerViewModel) -> None:
        view_model.on_sleep_night_clicked(5)

        assert view_model.on_sleep_detail_navigated() == 5
        assert view_model.on_sleep_detail_navigated() is None

    def test_draining_without_event(self, view_model: SleepTrackerViewModel) -> None:
        assert view_model.on_sleep_quality_navigated() is None
        assert view_model.on_sleep_detail_navigated() is None
        assert view_model.on_snackbar_shown() is False
        assert view_model.on_store_error_shown() is None


# ============================================================================
# Out-of-order results
# ============================================================================


class TestOutOfOrderResults:
    """Store calls finishing late must not overwrite newer state."""

    @pytest.fixture
    def stepped_scope(self):
        return SteppedTaskScope()

    @pytest.fixture
    def stepped_view_model(self, repository, stepped_scope, clock):
        vm = SleepTrackerViewModel(repository, scope=stepped_scope, clock=clock)
        yield vm
        vm.close()

    def test_late_initial_read_does_not_show_start_again(self, stepped_view_model, stepped_scope, repository) -> None:
        _load_nights, initial_read = stepped_scope.tasks
        initial_read.run()  # Sees the empty table

        stepped_view_model.on_start_tracking()
        start = stepped_scope.tasks[-1]
        start.run().deliver()
        initial_read.deliver()

        assert stepped_view_model.tonight is not None
        assert stepped_view_model.tonight.is_in_progress
        assert not stepped_view_model.start_button_visible

        stepped_view_model.on_start_tracking()

        assert stepped_scope.tasks[-1] is start
        assert sum(night.is_in_progress for night in repository.get_all_nights()) == 1

    def test_reload_waits_for_write_in_flight(self, stepped_view_model, stepped_scope) -> None:
        for task in list(stepped_scope.tasks):
            task.run().deliver()
        stepped_view_model.on_start_tracking()
        start = stepped_scope.tasks[-1]

        stepped_view_model.reload_tonight()
        assert stepped_scope.tasks[-1] is start

        start.run().deliver()
        reload = stepped_scope.tasks[-1]
        assert reload is not start

        reload.run().deliver()
        assert stepped_view_model.tonight is not None
        assert stepped_view_model.tonight.is_in_progress

    def test_late_initial_nights_do_not_replace_refresh(self, stepped_view_model, stepped_scope) -> None:
        load_nights, initial_read = stepped_scope.tasks
        load_nights.run()  # Sees the empty table
        initial_read.run().deliver()

        stepped_view_model.on_start_tracking()
        stepped_scope.tasks[-1].run().deliver()
        load_nights.deliver()

        assert len(stepped_view_model.nights) == 1

    def test_start_before_initial_read_keeps_existing_open_night(self, repository, stepped_scope, clock) -> None:
        existing_id = repository.insert(SleepNight(start_time_milli=1_000, end_time_milli=1_000))
        vm = SleepTrackerViewModel(repository, scope=stepped_scope, clock=clock)

        vm.on_start_tracking()
        stepped_scope.tasks[-1].run().deliver()

        assert vm.tonight.night_id == existing_id
        assert len(repository.get_all_nights()) == 1
        vm.close()


# ============================================================================
# Store failures
# ============================================================================


class TestStoreFailures:
    """Failed store calls become a pending store error and leave state alone."""

    def test_insert_failure_surfaces_error(self, spy_repository, sync_scope, clock) -> None:
        vm = SleepTrackerViewModel(spy_repository, scope=sync_scope, clock=clock)
        spy_repository.insert.side_effect = StoreError("disk full", StoreOperation.INSERT)

        vm.on_start_tracking()

        assert vm.tonight is None
        error = vm.on_store_error_shown()
        assert error.operation == StoreOperation.INSERT
        assert vm.on_store_error_shown() is None

    def test_start_can_be_retried_after_failure(self, spy_repository, sync_scope, clock) -> None:
        vm = SleepTrackerViewModel(spy_repository, scope=sync_scope, clock=clock)
        spy_repository.insert.side_effect = StoreError("disk full", StoreOperation.INSERT)
        vm.on_start_tracking()

        spy_repository.insert.side_effect = None
        vm.on_start_tracking()

        assert vm.tonight is not None

    def test_update_failure_keeps_night_open(self, spy_repository, sync_scope, clock) -> None:
        vm = SleepTrackerViewModel(spy_repository, scope=sync_scope, clock=clock)
        vm.on_start_tracking()
        spy_repository.update.side_effect = StoreError("locked", StoreOperation.UPDATE)

        vm.on_stop_tracking()

        assert vm.tonight.is_in_progress
        assert vm.store.state.navigate_to_sleep_quality is None
        assert vm.on_store_error_shown().operation == StoreOperation.UPDATE

    def test_unexpected_exception_is_wrapped(self, spy_repository, sync_scope, clock) -> None:
        vm = SleepTrackerViewModel(spy_repository, scope=sync_scope, clock=clock)
        spy_repository.clear.side_effect = OSError("gone")

        vm.on_clear()

        error = vm.on_store_error_shown()
        assert isinstance(error, StoreError)
        assert error.operation == StoreOperation.CLEAR
        assert vm.on_snackbar_shown() is False


# ============================================================================
# Lifetime
# ============================================================================


class TestClose:
    """Tests for close()."""

    def test_close_cancels_scope(self, view_model: SleepTrackerViewModel, sync_scope) -> None:
        view_model.close()

        assert sync_scope.closed
        assert view_model.is_closed

    def test_actions_after_close_are_ignored(self, view_model: SleepTrackerViewModel, repository) -> None:
        view_model.close()

        view_model.on_start_tracking()
        view_model.on_clear()

        assert repository.get_all_nights() == []
        assert view_model.tonight is None

    def test_writes_after_close_do_not_reach_state(self, view_model: SleepTrackerViewModel, repository) -> None:
        view_model.close()

        repository.insert(SleepNight(start_time_milli=1_000, end_time_milli=1_000))

        assert view_model.nights == ()


# ============================================================================
# Scenario
# ============================================================================


class TestTrackingScenario:
    """The full start, stop, clear cycle."""

    def test_start_stop_clear(self, view_model: SleepTrackerViewModel, clock) -> None:
        assert (view_model.start_button_visible, view_model.stop_button_visible) == (True, False)

        view_model.on_start_tracking()
        assert (view_model.start_button_visible, view_model.stop_button_visible) == (False, True)

        clock.advance(EIGHT_HOURS)
        view_model.on_stop_tracking()
        assert view_model.store.state.navigate_to_sleep_quality is not None
        assert view_model.stop_button_visible

        view_model.on_clear()
        assert view_model.nights == ()
        assert view_model.start_button_visible
        assert not view_model.stop_button_visible
        assert not view_model.clear_button_visible
        assert view_model.store.state.show_snackbar_event is True

    def test_summary_lists_completed_night(self, view_model: SleepTrackerViewModel, clock) -> None:
        view_model.on_start_tracking()
        clock.advance(EIGHT_HOURS)
        view_model.on_stop_tracking()

        assert "8:00:00" in view_model.nights_string
