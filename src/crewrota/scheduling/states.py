"""Per-day unit states and their display metadata."""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Mapping


class DayState(str, Enum):
    """State of one unit on one day. Values are the single-letter grid labels."""

    EMPTY = "-"
    STANDUP = "S"
    INDUCTION = "I"
    PRODUCING = "P"
    WINDDOWN = "B"
    REST = "D"

    @property
    def code(self) -> str:
        return self.value

    @classmethod
    def from_code(cls, code: str) -> DayState:
        """Return the state for a grid label (``"P"``) or member name (``"PRODUCING"``)."""
        try:
            return cls(code)
        except ValueError:
            return cls[str(code).upper()]


_COLORS: Mapping[DayState, str] = MappingProxyType(
    {
        DayState.EMPTY: "#ffffff",
        DayState.STANDUP: "#3b82f6",
        DayState.INDUCTION: "#f59e0b",
        DayState.PRODUCING: "#22c55e",
        DayState.WINDDOWN: "#ef4444",
        DayState.REST: "#9ca3af",
    }
)

_LABELS: Mapping[DayState, str] = MappingProxyType(
    {
        DayState.STANDUP: "Standup",
        DayState.INDUCTION: "Induction",
        DayState.PRODUCING: "Producing",
        DayState.WINDDOWN: "Winddown",
        DayState.REST: "Rest",
        DayState.EMPTY: "Empty",
    }
)


def state_color(state: DayState) -> str:
    """Return the hex display colour for ``state``."""
    return _COLORS[DayState(state)]


def state_label(state: DayState) -> str:
    return _LABELS[DayState(state)]


def legend() -> tuple[tuple[DayState, str, str], ...]:
    """Return ``(state, label, colour)`` rows in display order."""
    return tuple((state, label, _COLORS[state]) for state, label in _LABELS.items())


__all__ = ["DayState", "state_color", "state_label", "legend"]
