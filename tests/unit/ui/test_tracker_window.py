"""
Tests for the tracker window.

The window is driven through its buttons with store calls running inline.
"""

from __future__ import annotations

import pytest
from PyQt6.QtCore import QSettings

from sleep_tracker_app.core.constants import TimeConstants
from sleep_tracker_app.core.dataclasses import AppConfig
from sleep_tracker_app.core.exceptions import StoreError, StoreOperation
from sleep_tracker_app.ui.sleep_tracker_view_model import SleepTrackerViewModel
from sleep_tracker_app.ui.store import Actions
from sleep_tracker_app.ui.tracker_window import TrackerWindow
from sleep_tracker_app.ui.utils.config import ConfigManager

pytestmark = pytest.mark.gui


@pytest.fixture
def view_model(qapp, repository, sync_scope, clock):
    return SleepTrackerViewModel(repository, scope=sync_scope, clock=clock)


@pytest.fixture
def window(qtbot, view_model):
    win = TrackerWindow(view_model, AppConfig(window_width=400, window_height=500))
    qtbot.addWidget(win)
    win.show()
    return win


class TestTrackerWindow:
    """Tests for button wiring and event handling."""

    def test_initial_buttons(self, window: TrackerWindow) -> None:
        assert not window.start_button.isHidden()
        assert window.stop_button.isHidden()
        assert window.clear_button.isHidden()

    def test_geometry_from_config(self, window: TrackerWindow) -> None:
        assert window.width() == 400
        assert window.height() == 500

    def test_start_button(self, qtbot, window: TrackerWindow) -> None:
        window.start_button.click()

        assert window.start_button.isHidden()
        assert not window.stop_button.isHidden()
        assert window.adapter.rowCount() == 1

    def test_stop_emits_quality_request_then_resets(self, qtbot, window: TrackerWindow, clock) -> None:
        window.start_button.click()
        clock.advance(TimeConstants.ONE_HOUR_MILLIS)

        with qtbot.waitSignal(window.sleep_quality_requested, timeout=1000) as blocker:
            window.stop_button.click()

        (night,) = blocker.args
        assert not night.is_in_progress
        qtbot.waitUntil(lambda: not window.start_button.isHidden(), timeout=1000)
        assert window.view_model.store.state.navigate_to_sleep_quality is None

    def test_clear_shows_message(self, qtbot, window: TrackerWindow) -> None:
        window.start_button.click()
        window.clear_button.click()

        assert window.adapter.rowCount() == 0
        qtbot.waitUntil(lambda: window.status_bar.currentMessage() == window.strings.cleared_message, timeout=1000)
        assert window.view_model.store.state.show_snackbar_event is False

    def test_row_click_requests_detail(self, qtbot, window: TrackerWindow) -> None:
        window.start_button.click()
        night_id = window.adapter.night_at(0).night_id

        with qtbot.waitSignal(window.sleep_detail_requested, timeout=1000) as blocker:
            window.nights_list.clicked.emit(window.adapter.index(0, 0))

        assert blocker.args == [night_id]

    def test_store_error_shown_in_status_bar(self, qtbot, window: TrackerWindow) -> None:
        window.view_model.store.dispatch(Actions.store_operation_failed(StoreError("disk full", StoreOperation.INSERT)))

        qtbot.waitUntil(lambda: "disk full" in window.status_bar.currentMessage(), timeout=1000)
        assert window.view_model.store.state.store_error is None

    def test_close_closes_view_model(self, window: TrackerWindow) -> None:
        window.close()

        assert window.view_model.is_closed

    def test_close_saves_window_size(self, qtbot, view_model, temp_dir) -> None:
        settings = QSettings(str(temp_dir / "settings.ini"), QSettings.Format.IniFormat)
        manager = ConfigManager(settings)
        win = TrackerWindow(view_model, manager.config, manager)
        qtbot.addWidget(win)
        win.show()
        win.resize(450, 520)
        qtbot.waitUntil(lambda: win.width() == 450 and win.height() == 520, timeout=1000)

        win.close()

        saved = ConfigManager(settings).config
        assert (saved.window_width, saved.window_height) == (450, 520)
