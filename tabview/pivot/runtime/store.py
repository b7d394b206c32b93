"""Observable, versioned application state container.

StateRef holds the current AppState snapshot and notifies subscribers
after every accepted write.

Architecture:
    Writes are compare-and-set on the snapshot version. A snapshot handed to
    ``set_value`` must have been derived from the current one (same
    ``version``); the store stamps it with ``version + 1``. A write based on
    an older snapshot raises StaleWriteError instead of silently clobbering
    a newer state.

    Notification is synchronous and re-entrant: a handler may write to the
    store, and nested notifications run before the outer ``set_value``
    returns.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import replace

from ..core.exceptions import StaleWriteError
from ..models.state import AppState, set_error

logger = logging.getLogger(__name__)

ChangeHandler = Callable[["StateRef"], None]
ErrorHandler = Callable[[BaseException], None]

_EVENTS = ("change", "error")


class StateRef:
    """Mutable reference to an immutable AppState snapshot."""

    def __init__(self, initial: AppState) -> None:
        self._value = initial
        self._handlers: dict[str, list[Callable]] = {event: [] for event in _EVENTS}

    @property
    def version(self) -> int:
        return self._value.version

    def get_value(self) -> AppState:
        return self._value

    def set_value(self, state: AppState) -> None:
        """Install ``state`` and notify ``change`` handlers.

        Raises:
            StaleWriteError: If ``state`` was not derived from the current snapshot
        """
        if state.version != self._value.version:
            raise StaleWriteError(self._value.version, state.version)
        self._value = replace(state, version=state.version + 1)
        for handler in list(self._handlers["change"]):
            handler(self)

    def update(self, fn: Callable[[AppState], AppState]) -> AppState:
        """Apply a pure transition to the current snapshot and write the result."""
        self.set_value(fn(self._value))
        return self._value

    def on(self, event: str, handler: Callable) -> None:
        self._check_event(event)
        self._handlers[event].append(handler)

    def off(self, event: str, handler: Callable) -> None:
        self._check_event(event)
        if handler in self._handlers[event]:
            self._handlers[event].remove(handler)

    def report_error(self, error: BaseException) -> None:
        """Error channel for asynchronous pipeline failures.

        Records the error in state and hands it to ``error`` handlers. With
        no handler registered the error is logged.
        """
        self.update(lambda st: set_error(st, error))
        handlers = list(self._handlers["error"])
        if not handlers:
            logger.error(
                "Unhandled pipeline error",
                exc_info=(type(error), error, error.__traceback__),
            )
            return
        for handler in handlers:
            handler(error)

    @staticmethod
    def _check_event(event: str) -> None:
        if event not in _EVENTS:
            raise ValueError(f"Unknown event {event!r}, expected one of {_EVENTS}")
