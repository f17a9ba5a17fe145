#!/usr/bin/env python3
"""
Protocol classes for the collaborators of the tracker view-model.
Lets tests swap the threaded scope and the SQLite repository for simple stand-ins.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Callable

    from sleep_tracker_app.core.dataclasses import SleepNight


@runtime_checkable
class SleepNightStoreProtocol(Protocol):
    """The store operations the tracker needs from the sleep night repository."""

    def insert(self, night: SleepNight) -> int: ...

    def update(self, night: SleepNight) -> None: ...

    def get(self, night_id: int) -> SleepNight | None: ...

    def get_tonight(self) -> SleepNight | None: ...

    def get_all_nights(self) -> list[SleepNight]: ...

    def clear(self) -> int: ...

    def add_change_listener(self, listener: Callable[[], None]) -> Callable[[], None]: ...


@runtime_checkable
class TaskScopeProtocol(Protocol):
    """
    Runs store calls off the GUI thread.

    launch() delivers the result (or the raised exception) back on the
    GUI thread; cancel_all() drops every pending callback.
    """

    def launch(
        self,
        operation: Callable[[], Any],
        on_success: Callable[[Any], None] | None = None,
        on_error: Callable[[Exception], None] | None = None,
    ) -> Any: ...

    def cancel_all(self) -> None: ...
