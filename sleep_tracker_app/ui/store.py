"""
Single-store state container for the tracker screen.

Every change follows the same path: an Action is dispatched, passes the
middleware chain, is folded into a new TrackerState by tracker_reducer,
and the subscribers are told about (old, new) when the two differ.

    store = TrackerStore()
    unsubscribe = store.subscribe(lambda old, new: print(new.tonight))
    store.dispatch(Actions.tonight_loaded(night))

One-shot events (navigation requests, the snackbar pulse, store errors)
are pending fields in the state. They stay set until the presentation
layer drains them with the matching "*_navigated"/"*_shown" action.
"""

from __future__ import annotations

import contextlib
import logging
from collections.abc import Callable
from dataclasses import dataclass, fields, replace
from enum import StrEnum, auto
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from sleep_tracker_app.core.dataclasses import SleepNight
    from sleep_tracker_app.core.exceptions import StoreError
    from sleep_tracker_app.utils.formatting import SleepTextFormatter

logger = logging.getLogger(__name__)


# =============================================================================
# State
# =============================================================================


@dataclass(frozen=True)
class TrackerState:
    """
    Everything the tracker screen shows, as one frozen value.

    Nights: the open night (if any) and every stored night, newest first.
    Pending events: one-shot requests the window has not handled yet.
    """

    # === Nights ===
    tonight: SleepNight | None = None
    nights: tuple[SleepNight, ...] = ()  # Most recent first

    # === Pending events (cleared by the presentation layer) ===
    navigate_to_sleep_quality: SleepNight | None = None
    navigate_to_sleep_detail: int | None = None
    show_snackbar_event: bool = False
    store_error: StoreError | None = None


# =============================================================================
# Actions
# =============================================================================


class ActionType(StrEnum):
    """Kinds of things that can happen to the tracker screen."""

    # Store results
    TONIGHT_LOADED = auto()
    NIGHTS_LOADED = auto()
    NIGHTS_CLEARED = auto()

    # Navigation
    SLEEP_QUALITY_NAVIGATION_REQUESTED = auto()
    SLEEP_QUALITY_NAVIGATED = auto()
    SLEEP_DETAIL_NAVIGATION_REQUESTED = auto()
    SLEEP_DETAIL_NAVIGATED = auto()

    # Feedback
    SNACKBAR_SHOWN = auto()
    STORE_OPERATION_FAILED = auto()
    STORE_ERROR_SHOWN = auto()

    # State management
    RESET_STATE = auto()


@dataclass(frozen=True)
class Action:
    """
    Something that happened, with the data the reducer needs to apply it.

    Payload keys are fixed by the matching Actions factory.
    """

    type: ActionType
    payload: dict[str, Any] | None = None


class Actions:
    """
    Factories for every Action the tracker dispatches.

    Usage:
        store.dispatch(Actions.sleep_detail_navigation_requested(night_id=3))
    """

    @staticmethod
    def tonight_loaded(night: SleepNight | None) -> Action:
        """Create action for when the open night has been read from the store."""
        return Action(type=ActionType.TONIGHT_LOADED, payload={"night": night})

    @staticmethod
    def nights_loaded(nights: list[SleepNight] | tuple[SleepNight, ...]) -> Action:
        """Create action for when the list of all nights changes."""
        return Action(type=ActionType.NIGHTS_LOADED, payload={"nights": nights})

    @staticmethod
    def nights_cleared() -> Action:
        """Create action for when every night has been deleted."""
        return Action(type=ActionType.NIGHTS_CLEARED)

    @staticmethod
    def sleep_quality_navigation_requested(night: SleepNight) -> Action:
        """Create action asking the UI to open the rating screen for a stopped night."""
        return Action(type=ActionType.SLEEP_QUALITY_NAVIGATION_REQUESTED, payload={"night": night})

    @staticmethod
    def sleep_quality_navigated() -> Action:
        return Action(type=ActionType.SLEEP_QUALITY_NAVIGATED)

    @staticmethod
    def sleep_detail_navigation_requested(night_id: int) -> Action:
        """Create action asking the UI to open the detail screen for a night."""
        return Action(type=ActionType.SLEEP_DETAIL_NAVIGATION_REQUESTED, payload={"night_id": night_id})

    @staticmethod
    def sleep_detail_navigated() -> Action:
        return Action(type=ActionType.SLEEP_DETAIL_NAVIGATED)

    @staticmethod
    def snackbar_shown() -> Action:
        return Action(type=ActionType.SNACKBAR_SHOWN)

    @staticmethod
    def store_operation_failed(error: StoreError) -> Action:
        """Create action for a failed store operation."""
        return Action(type=ActionType.STORE_OPERATION_FAILED, payload={"error": error})

    @staticmethod
    def store_error_shown() -> Action:
        return Action(type=ActionType.STORE_ERROR_SHOWN)

    @staticmethod
    def reset_state() -> Action:
        """Back to an empty TrackerState."""
        return Action(type=ActionType.RESET_STATE)


# =============================================================================
# Reducer
# =============================================================================


def tracker_reducer(state: TrackerState, action: Action) -> TrackerState:
    """
    Fold action into state and return the resulting TrackerState.

    Side effects belong to the view model; this function only computes.
    """
    payload = action.payload or {}

    match action.type:
        case ActionType.TONIGHT_LOADED:
            return replace(state, tonight=payload.get("night"))

        case ActionType.NIGHTS_LOADED:
            return replace(state, nights=tuple(payload.get("nights", ())))

        case ActionType.NIGHTS_CLEARED:
            return replace(state, tonight=None, nights=(), show_snackbar_event=True)

        case ActionType.SLEEP_QUALITY_NAVIGATION_REQUESTED:
            night = payload.get("night")
            tonight = state.tonight
            # The stopped night replaces the open copy but tonight is not cleared
            if night is not None and tonight is not None and tonight.night_id == night.night_id:
                tonight = night
            return replace(state, tonight=tonight, navigate_to_sleep_quality=night)

        case ActionType.SLEEP_QUALITY_NAVIGATED:
            return replace(state, navigate_to_sleep_quality=None)

        case ActionType.SLEEP_DETAIL_NAVIGATION_REQUESTED:
            return replace(state, navigate_to_sleep_detail=payload.get("night_id"))

        case ActionType.SLEEP_DETAIL_NAVIGATED:
            return replace(state, navigate_to_sleep_detail=None)

        case ActionType.SNACKBAR_SHOWN:
            return replace(state, show_snackbar_event=False)

        case ActionType.STORE_OPERATION_FAILED:
            return replace(state, store_error=payload.get("error"))

        case ActionType.STORE_ERROR_SHOWN:
            return replace(state, store_error=None)

        case ActionType.RESET_STATE:
            return TrackerState()

        case _:
            logger.warning("Unknown action type: %s", action.type)
            return state


# =============================================================================
# Selectors
# =============================================================================


class Selectors:
    """
    Derived values read by the window and the view model.

    Use these instead of recomputing button visibility in widgets.
    """

    @staticmethod
    def start_button_visible(state: TrackerState) -> bool:
        """Start is offered only while no night is open."""
        return state.tonight is None

    @staticmethod
    def stop_button_visible(state: TrackerState) -> bool:
        """Stop is offered while a night is held as tonight."""
        return state.tonight is not None

    @staticmethod
    def clear_button_visible(state: TrackerState) -> bool:
        """Clear is offered when there is anything to delete."""
        return len(state.nights) > 0

    @staticmethod
    def nights_summary(state: TrackerState, formatter: SleepTextFormatter) -> str:
        """HTML summary of every stored night."""
        return formatter.format_nights(state.nights)

    @staticmethod
    def has_pending_event(state: TrackerState) -> bool:
        """Check if any one-shot event is waiting to be handled."""
        return (
            state.navigate_to_sleep_quality is not None
            or state.navigate_to_sleep_detail is not None
            or state.show_snackbar_event
            or state.store_error is not None
        )


# =============================================================================
# Store
# =============================================================================

StateListener = Callable[[TrackerState, TrackerState], None]
Middleware = Callable[[Action], Action | None]
Unsubscribe = Callable[[], None]


class TrackerStore:
    """
    Owns the current TrackerState.

    Dispatch is synchronous and not re-entrant: a listener that wants to
    dispatch again must go through dispatch_safe() or dispatch_async(),
    which defer the action to the Qt event loop.
    """

    def __init__(self, initial_state: TrackerState | None = None) -> None:
        self._state = initial_state or TrackerState()
        self._listeners: list[StateListener] = []
        self._middleware_chain: list[Middleware] = []
        self._dispatch_depth = 0

        logger.debug("Tracker store created: %s", self._state)

    @property
    def state(self) -> TrackerState:
        return self._state

    @property
    def is_dispatching(self) -> bool:
        return self._dispatch_depth > 0

    def dispatch(self, action: Action) -> None:
        """Run action through middleware and the reducer, then notify listeners."""
        if self.is_dispatching:
            msg = f"{action.type} dispatched from inside another dispatch; use dispatch_safe()"
            raise RuntimeError(msg)

        self._dispatch_depth += 1
        try:
            final_action = self._apply_middleware(action)
            if final_action is None:
                logger.debug("%s dropped by middleware", action.type)
                return

            previous = self._state
            current = tracker_reducer(previous, final_action)
            if current == previous:
                logger.debug("%s left the state as it was", final_action.type)
                return

            self._state = current
            logger.debug("%s changed %s", final_action.type, sorted(changed_fields(previous, current)))
            self._notify(previous, current)
        finally:
            self._dispatch_depth -= 1

    def dispatch_async(self, action: Action) -> None:
        """Queue action for the next turn of the Qt event loop."""
        from PyQt6.QtCore import QTimer

        logger.debug("%s deferred to the event loop", action.type)
        QTimer.singleShot(0, lambda: self.dispatch(action))

    def dispatch_safe(self, action: Action) -> None:
        """Dispatch now, or defer when called from a listener."""
        if self.is_dispatching:
            self.dispatch_async(action)
            return
        self.dispatch(action)

    def subscribe(self, listener: StateListener) -> Unsubscribe:
        """Register listener; the returned callable removes it again."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            with contextlib.suppress(ValueError):
                self._listeners.remove(listener)

        return unsubscribe

    def add_middleware(self, middleware: Middleware) -> None:
        """Append middleware. Returning None from it cancels the action."""
        self._middleware_chain.append(middleware)

    def _apply_middleware(self, action: Action) -> Action | None:
        current: Action | None = action
        for middleware in self._middleware_chain:
            current = middleware(current)
            if current is None:
                break
        return current

    def _notify(self, previous: TrackerState, current: TrackerState) -> None:
        # Iterate over a snapshot; listeners may unsubscribe themselves
        for listener in tuple(self._listeners):
            try:
                listener(previous, current)
            except Exception:
                logger.exception("State listener %r failed", listener)


def changed_fields(previous: TrackerState, current: TrackerState) -> dict[str, tuple[Any, Any]]:
    """Map each field that differs between two states to its (before, after) pair."""
    return {
        field.name: (getattr(previous, field.name), getattr(current, field.name))
        for field in fields(TrackerState)
        if getattr(previous, field.name) != getattr(current, field.name)
    }


def logging_middleware(action: Action) -> Action:
    """Log every action at INFO and pass it on unchanged."""
    logger.info("Tracker action %s %s", action.type, action.payload)
    return action


# =============================================================================
# Widget binding
# =============================================================================


def connect_component(
    store: TrackerStore,
    state_to_props: Callable[[TrackerState], dict[str, Any]],
    handlers: dict[str, Callable[[Any], None]],
) -> Unsubscribe:
    """
    Bind widget setters to values derived from the state.

    state_to_props maps a state to named values; each handler is called
    with its value right away and afterwards whenever that value changes.

        connect_component(
            store,
            state_to_props=lambda s: {"stop": Selectors.stop_button_visible(s)},
            handlers={"stop": stop_button.setVisible},
        )
    """
    shown: dict[str, Any] = {}

    def render(state: TrackerState) -> None:
        props = state_to_props(state)
        for name, value in props.items():
            handler = handlers.get(name)
            if handler is not None and (name not in shown or shown[name] != value):
                handler(value)
        shown.clear()
        shown.update(props)

    render(store.state)
    return store.subscribe(lambda _previous, current: render(current))
