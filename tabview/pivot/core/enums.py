"""Core enumerations shared across models and runtime.

Key Types:
    - ColumnType: Value type of a schema column
    - IndicatorState: Lifecycle of the debounced loading indicator
"""

from enum import Enum


class ColumnType(str, Enum):
    """Column value types understood by the grid layer."""

    INTEGER = "integer"
    REAL = "real"
    TEXT = "text"
    BOOLEAN = "boolean"

    @property
    def is_numeric(self) -> bool:
        return self in (ColumnType.INTEGER, ColumnType.REAL)


class IndicatorState(str, Enum):
    """Loading indicator states.

    IDLE -> SCHEDULED on start, SCHEDULED -> FIRING when the reveal delay
    elapses, any -> IDLE on stop.
    """

    IDLE = "idle"
    SCHEDULED = "scheduled"
    FIRING = "firing"

    @property
    def visible(self) -> bool:
        """Whether a spinner should be shown."""
        return self is IndicatorState.FIRING
