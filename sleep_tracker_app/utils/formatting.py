"""
Text formatting for sleep nights.

Durations, quality labels and the HTML summary of all nights shown by the
tracker screen. Every user-facing string lives in SleepStrings so a
translated table can be passed to SleepTextFormatter.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING

from sleep_tracker_app.core.constants import SleepQuality, TimeConstants, TimeFormat

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from sleep_tracker_app.core.dataclasses import SleepNight


@dataclass(frozen=True)
class SleepStrings:
    """User-facing strings used when formatting sleep nights."""

    seconds_length: str = "{count} seconds on {weekday}"
    minutes_length: str = "{count} minutes on {weekday}"
    hours_length: str = "{count} hours on {weekday}"
    quality_labels: Mapping[int, str] = field(
        default_factory=lambda: {
            SleepQuality.VERY_BAD: "Very bad",
            SleepQuality.POOR: "Poor",
            SleepQuality.SO_SO: "So-so",
            SleepQuality.OK: "OK",
            SleepQuality.PRETTY_GOOD: "Pretty good",
            SleepQuality.EXCELLENT: "Excellent!",
        }
    )
    unrated_quality: str = "--"
    summary_title: str = "<h3>Here is your sleep data</h3>"
    start_time: str = "Start:"
    end_time: str = "End:"
    quality: str = "Quality:"
    hours_slept: str = "Hours:Minutes:Seconds"
    start_button: str = "Start"
    stop_button: str = "Stop"
    clear_button: str = "Clear"
    cleared_message: str = "All your data is going away forever"
    store_error_message: str = "Could not {operation} sleep data: {reason}"


class SleepTextFormatter:
    """Formats sleep nights for display."""

    def __init__(self, strings: SleepStrings | None = None) -> None:
        self.strings = strings or SleepStrings()

    def convert_duration_to_formatted(self, start_time_milli: int, end_time_milli: int) -> str:
        """
        Describe how long a night lasted and which weekday it started on.

        Under a minute the length is given in seconds, under an hour in
        minutes, otherwise in whole hours.
        """
        duration_milli = end_time_milli - start_time_milli
        weekday = _local_datetime(start_time_milli).strftime(TimeFormat.WEEKDAY)

        if duration_milli < TimeConstants.ONE_MINUTE_MILLIS:
            count = duration_milli // TimeConstants.MILLIS_PER_SECOND
            template = self.strings.seconds_length
        elif duration_milli < TimeConstants.ONE_HOUR_MILLIS:
            count = duration_milli // TimeConstants.ONE_MINUTE_MILLIS
            template = self.strings.minutes_length
        else:
            count = duration_milli // TimeConstants.ONE_HOUR_MILLIS
            template = self.strings.hours_length

        return template.format(count=count, weekday=weekday)

    def convert_numeric_quality_to_string(self, quality: int) -> str:
        """Label for a 0..5 rating; anything else is shown as unrated."""
        return self.strings.quality_labels.get(quality, self.strings.unrated_quality)

    @staticmethod
    def convert_long_to_date_string(system_time_milli: int) -> str:
        """Format a millisecond timestamp like 'Monday Jan-01-2024 Time: 22:30'."""
        return _local_datetime(system_time_milli).strftime(TimeFormat.NIGHT_DATE)

    def format_nights(self, nights: Iterable[SleepNight]) -> str:
        """Build the HTML summary of every night."""
        s = self.strings
        parts = [s.summary_title]
        for night in nights:
            parts.append("<br>")
            parts.append(f"{s.start_time}\t{self.convert_long_to_date_string(night.start_time_milli)}<br>")
            if not night.is_in_progress:
                parts.append(f"{s.end_time}\t{self.convert_long_to_date_string(night.end_time_milli)}<br>")
                parts.append(f"{s.quality}\t{self.convert_numeric_quality_to_string(night.sleep_quality)}<br>")
                parts.append(f"{s.hours_slept}\t {format_elapsed(night.duration_milli)}<br><br>")
        return "".join(parts)


def format_elapsed(duration_milli: int) -> str:
    """Format a duration as h:mm:ss."""
    total_seconds = max(duration_milli, 0) // TimeConstants.MILLIS_PER_SECOND
    hours, remainder = divmod(total_seconds, TimeConstants.SECONDS_PER_HOUR)
    minutes, seconds = divmod(remainder, TimeConstants.SECONDS_PER_MINUTE)
    return f"{hours}:{minutes:02d}:{seconds:02d}"


def _local_datetime(system_time_milli: int) -> datetime:
    return datetime.fromtimestamp(system_time_milli / TimeConstants.MILLIS_PER_SECOND)
