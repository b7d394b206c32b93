"""Unit tests for the debounced loading timer."""

from __future__ import annotations

import asyncio

import pytest

from tabview.pivot.core import IndicatorState
from tabview.pivot.runtime import LoadingTimer


@pytest.mark.asyncio
async def test_fires_after_delay():
    """Test on_fire runs once the delay elapses and state becomes FIRING."""
    timer = LoadingTimer()
    fired: list[str] = []

    timer.start(10, lambda: fired.append("fired"))
    assert timer.state is IndicatorState.SCHEDULED
    await asyncio.sleep(0.05)

    assert fired == ["fired"]
    assert timer.state is IndicatorState.FIRING
    assert timer.state.visible


@pytest.mark.asyncio
async def test_stop_before_delay_cancels():
    """Test stop() cancels a pending fire."""
    timer = LoadingTimer()
    fired: list[str] = []

    timer.start(20, lambda: fired.append("fired"))
    timer.stop()
    await asyncio.sleep(0.05)

    assert fired == []
    assert timer.state is IndicatorState.IDLE
    assert not timer.running


@pytest.mark.asyncio
async def test_restart_while_scheduled_is_noop():
    """Test start() while scheduled neither resets the delay nor swaps the callback."""
    timer = LoadingTimer()
    fired: list[str] = []

    timer.start(60, lambda: fired.append("first"))
    await asyncio.sleep(0.03)
    timer.start(60, lambda: fired.append("second"))
    await asyncio.sleep(0.06)

    assert fired == ["first"]


@pytest.mark.asyncio
async def test_restart_after_stop():
    """Test the timer can be started again after stop()."""
    timer = LoadingTimer()
    fired: list[str] = []

    timer.start(10, lambda: fired.append("first"))
    await asyncio.sleep(0.03)
    timer.stop()
    timer.start(10, lambda: fired.append("second"))
    await asyncio.sleep(0.03)

    assert fired == ["first", "second"]


def test_start_requires_running_loop():
    """Test start() outside an event loop raises."""
    timer = LoadingTimer()
    with pytest.raises(RuntimeError):
        timer.start(10, lambda: None)
    assert timer.state is IndicatorState.IDLE
