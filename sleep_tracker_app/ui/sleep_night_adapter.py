#!/usr/bin/env python3
"""
Sleep Night List Adapter
Binds stored sleep nights to the rows of the tracker's list view.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import TYPE_CHECKING, Any

from PyQt6.QtCore import QAbstractListModel, QByteArray, QModelIndex, QObject, Qt

from sleep_tracker_app.core.constants import QualityIcon, SleepQuality

if TYPE_CHECKING:
    from collections.abc import Iterable

    from sleep_tracker_app.core.dataclasses import SleepNight
    from sleep_tracker_app.utils.formatting import SleepTextFormatter

logger = logging.getLogger(__name__)

_QUALITY_ICONS: dict[int, QualityIcon] = {
    SleepQuality.VERY_BAD: QualityIcon.SLEEP_0,
    SleepQuality.POOR: QualityIcon.SLEEP_1,
    SleepQuality.SO_SO: QualityIcon.SLEEP_2,
    SleepQuality.OK: QualityIcon.SLEEP_3,
    SleepQuality.PRETTY_GOOD: QualityIcon.SLEEP_4,
    SleepQuality.EXCELLENT: QualityIcon.SLEEP_5,
}


def quality_icon(sleep_quality: int) -> QualityIcon:
    """Icon for a quality rating; anything outside 0..5 shows the active icon."""
    if isinstance(sleep_quality, bool):
        return QualityIcon.SLEEP_ACTIVE
    return _QUALITY_ICONS.get(sleep_quality, QualityIcon.SLEEP_ACTIVE)


@dataclass(frozen=True)
class SleepNightRow:
    """Display values of one list row."""

    night_id: int
    sleep_length: str
    quality_text: str
    quality_icon: QualityIcon


def bind_sleep_night(night: SleepNight, formatter: SleepTextFormatter) -> SleepNightRow:
    """Compute the display values of a row."""
    return SleepNightRow(
        night_id=night.night_id,
        sleep_length=formatter.convert_duration_to_formatted(night.start_time_milli, night.end_time_milli),
        quality_text=formatter.convert_numeric_quality_to_string(night.sleep_quality),
        quality_icon=quality_icon(night.sleep_quality),
    )


class SleepNightRole(IntEnum):
    """Custom item data roles exposed by SleepNightAdapter."""

    SLEEP_LENGTH = Qt.ItemDataRole.UserRole.value + 1
    QUALITY_TEXT = Qt.ItemDataRole.UserRole.value + 2
    QUALITY_ICON = Qt.ItemDataRole.UserRole.value + 3
    NIGHT_ID = Qt.ItemDataRole.UserRole.value + 4


def _role_value(role: Any) -> int:
    # Qt passes roles as plain ints, Python callers may pass Qt.ItemDataRole members
    return role.value if isinstance(role, Enum) else int(role)


class SleepNightAdapter(QAbstractListModel):
    """
    List model over the tracker's nights, most recent first.

    Rows are bound once per set_data() call; the view reads them back
    through the standard display/tooltip roles or the SleepNightRole values.
    """

    SleepLengthRole = SleepNightRole.SLEEP_LENGTH
    QualityTextRole = SleepNightRole.QUALITY_TEXT
    QualityIconRole = SleepNightRole.QUALITY_ICON
    NightIdRole = SleepNightRole.NIGHT_ID

    def __init__(self, formatter: SleepTextFormatter, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._formatter = formatter
        self._nights: list[SleepNight] = []
        self._rows: list[SleepNightRow] = []

    def set_data(self, nights: Iterable[SleepNight]) -> None:
        """Replace every row."""
        self.beginResetModel()
        self._nights = list(nights)
        self._rows = [bind_sleep_night(night, self._formatter) for night in self._nights]
        self.endResetModel()
        logger.debug("Sleep night list reset with %s rows", len(self._rows))

    def rowCount(self, parent: QModelIndex | None = None) -> int:
        if parent is not None and parent.isValid():
            return 0
        return len(self._rows)

    def data(self, index: QModelIndex, role: int = Qt.ItemDataRole.DisplayRole) -> Any:
        if not index.isValid() or not 0 <= index.row() < len(self._rows):
            return None

        row = self._rows[index.row()]
        match _role_value(role):
            case Qt.ItemDataRole.DisplayRole.value | SleepNightRole.SLEEP_LENGTH:
                return row.sleep_length
            case Qt.ItemDataRole.ToolTipRole.value | SleepNightRole.QUALITY_TEXT:
                return row.quality_text
            case SleepNightRole.QUALITY_ICON:
                return str(row.quality_icon)
            case SleepNightRole.NIGHT_ID:
                return row.night_id
            case _:
                return None

    def roleNames(self) -> dict[int, QByteArray]:
        names = dict(super().roleNames())
        names.update(
            {
                SleepNightRole.SLEEP_LENGTH.value: QByteArray(b"sleepLength"),
                SleepNightRole.QUALITY_TEXT.value: QByteArray(b"qualityText"),
                SleepNightRole.QUALITY_ICON.value: QByteArray(b"qualityIcon"),
                SleepNightRole.NIGHT_ID.value: QByteArray(b"nightId"),
            }
        )
        return names

    def night_at(self, row: int) -> SleepNight | None:
        """Night shown in a row, or None when out of range."""
        if 0 <= row < len(self._nights):
            return self._nights[row]
        return None
