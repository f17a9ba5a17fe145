#!/usr/bin/env python3
"""
Sleep Tracker Window
Start/Stop/Clear buttons, the list of tracked nights and their summary.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from PyQt6.QtCore import QModelIndex, QTimer, pyqtSignal
from PyQt6.QtWidgets import (
    QHBoxLayout,
    QListView,
    QMainWindow,
    QPushButton,
    QTextBrowser,
    QVBoxLayout,
    QWidget,
)

from sleep_tracker_app.core.constants import WindowDefaults
from sleep_tracker_app.core.exceptions import SleepTrackerError
from sleep_tracker_app.ui.sleep_night_adapter import SleepNightAdapter
from sleep_tracker_app.ui.store import Selectors, connect_component

if TYPE_CHECKING:
    from PyQt6.QtGui import QCloseEvent

    from sleep_tracker_app.core.dataclasses import AppConfig
    from sleep_tracker_app.ui.sleep_tracker_view_model import SleepTrackerViewModel
    from sleep_tracker_app.ui.store import TrackerState
    from sleep_tracker_app.ui.utils.config import ConfigManager

logger = logging.getLogger(__name__)


class TrackerWindow(QMainWindow):
    """Main window of the sleep tracker."""

    # Emitted with the stopped SleepNight that should be rated
    sleep_quality_requested = pyqtSignal(object)
    # Emitted with the id of the night whose details were asked for
    sleep_detail_requested = pyqtSignal(int)

    def __init__(
        self,
        view_model: SleepTrackerViewModel,
        config: AppConfig | None = None,
        config_manager: ConfigManager | None = None,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.view_model = view_model
        self._config_manager = config_manager
        self.strings = view_model.formatter.strings
        self._drain_scheduled = False

        self.setWindowTitle("Track My Sleep Quality")
        if config is not None:
            self.resize(config.window_width, config.window_height)
        else:
            self.resize(WindowDefaults.WIDTH, WindowDefaults.HEIGHT)

        self.setup_ui()

        self._unsubscribers = [
            connect_component(
                view_model.store,
                state_to_props=lambda s: {
                    "start_visible": Selectors.start_button_visible(s),
                    "stop_visible": Selectors.stop_button_visible(s),
                    "clear_visible": Selectors.clear_button_visible(s),
                    "nights": s.nights,
                },
                handlers={
                    "start_visible": self.start_button.setVisible,
                    "stop_visible": self.stop_button.setVisible,
                    "clear_visible": self.clear_button.setVisible,
                    "nights": self._update_nights,
                },
            ),
            view_model.subscribe(self._on_state_change),
        ]
        self._schedule_event_drain(view_model.store.state)

    def setup_ui(self) -> None:
        """Set up the UI components."""
        central = QWidget(self)
        layout = QVBoxLayout(central)

        button_row = QHBoxLayout()
        self.start_button = QPushButton(self.strings.start_button)
        self.stop_button = QPushButton(self.strings.stop_button)
        self.clear_button = QPushButton(self.strings.clear_button)
        for button in (self.start_button, self.stop_button, self.clear_button):
            button_row.addWidget(button)
        layout.addLayout(button_row)

        self.start_button.clicked.connect(self.view_model.on_start_tracking)
        self.stop_button.clicked.connect(self.view_model.on_stop_tracking)
        self.clear_button.clicked.connect(self.view_model.on_clear)

        self.adapter = SleepNightAdapter(self.view_model.formatter, parent=self)
        self.nights_list = QListView()
        self.nights_list.setModel(self.adapter)
        self.nights_list.clicked.connect(self._on_night_clicked)
        layout.addWidget(self.nights_list, stretch=2)

        self.summary_view = QTextBrowser()
        layout.addWidget(self.summary_view, stretch=1)

        self.setCentralWidget(central)

        self.status_bar = self.statusBar()
        self.status_bar.showMessage("Ready")

    def _update_nights(self, nights: tuple) -> None:
        self.adapter.set_data(nights)
        self.summary_view.setHtml(self.view_model.nights_string)

    def _on_night_clicked(self, index: QModelIndex) -> None:
        night = self.adapter.night_at(index.row())
        if night is not None:
            self.view_model.on_sleep_night_clicked(night.night_id)

    def _on_state_change(self, old_state: TrackerState, new_state: TrackerState) -> None:
        self._schedule_event_drain(new_state)

    def _schedule_event_drain(self, state: TrackerState) -> None:
        # Subscribers run inside a dispatch; draining dispatches again, so defer it
        if self._drain_scheduled or not Selectors.has_pending_event(state):
            return
        self._drain_scheduled = True
        QTimer.singleShot(0, self._drain_events)

    def _drain_events(self) -> None:
        self._drain_scheduled = False
        if self.view_model.is_closed:
            return
        state = self.view_model.store.state

        if state.navigate_to_sleep_quality is not None:
            night = self.view_model.on_sleep_quality_navigated()
            logger.info("Requesting sleep quality rating for night %s", night.night_id)
            self.sleep_quality_requested.emit(night)
            # The rating happens elsewhere; the stopped night is no longer tonight
            self.view_model.reload_tonight()

        if state.navigate_to_sleep_detail is not None:
            night_id = self.view_model.on_sleep_detail_navigated()
            logger.info("Requesting details of night %s", night_id)
            self.sleep_detail_requested.emit(night_id)

        if state.show_snackbar_event and self.view_model.on_snackbar_shown():
            self.status_bar.showMessage(self.strings.cleared_message, WindowDefaults.SNACKBAR_TIMEOUT_MS)

        if state.store_error is not None:
            error = self.view_model.on_store_error_shown()
            self.status_bar.showMessage(
                self.strings.store_error_message.format(operation=error.operation, reason=error.message),
                WindowDefaults.SNACKBAR_TIMEOUT_MS,
            )

    def closeEvent(self, event: QCloseEvent) -> None:  # Qt naming convention
        """Handle window close event with proper cleanup."""
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []
        self._save_window_size()
        self.view_model.close()
        event.accept()

    def _save_window_size(self) -> None:
        if self._config_manager is None or not self._config_manager.is_config_valid():
            return
        try:
            self._config_manager.update_window_size(self.width(), self.height())
        except SleepTrackerError:
            logger.exception("Could not save the window size")
