"""Debounced loading indicator timer.

The timer is started when a compile/fetch begins and stopped when the
fetch lands. ``on_fire`` only runs if the work outlives the reveal delay,
so fast round-trips never flash a spinner.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from ..core.enums import IndicatorState

logger = logging.getLogger(__name__)


class LoadingTimer:
    """Single debounced timer: IDLE -> SCHEDULED -> FIRING, any -> IDLE on stop."""

    def __init__(self) -> None:
        self._state = IndicatorState.IDLE
        self._handle: asyncio.TimerHandle | None = None

    @property
    def state(self) -> IndicatorState:
        return self._state

    @property
    def running(self) -> bool:
        return self._state is not IndicatorState.IDLE

    def start(self, delay_ms: int, on_fire: Callable[[], None]) -> None:
        """Schedule ``on_fire`` after ``delay_ms``.

        No-op while already scheduled or firing; the pending delay is not
        reset. Must be called from inside a running event loop.
        """
        if self.running:
            return
        loop = asyncio.get_running_loop()
        self._state = IndicatorState.SCHEDULED
        self._handle = loop.call_later(delay_ms / 1000.0, self._fire, on_fire)

    def stop(self) -> None:
        """Cancel any pending fire and return to idle."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        self._state = IndicatorState.IDLE

    def _fire(self, on_fire: Callable[[], None]) -> None:
        self._handle = None
        self._state = IndicatorState.FIRING
        logger.debug("loading_indicator_fired")
        on_fire()
