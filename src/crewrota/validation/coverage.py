"""Post-hoc checks on a built schedule: coverage counts and per-unit transitions."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from crewrota.scheduling.states import DayState

if TYPE_CHECKING:
    from crewrota.planning.builder import ScheduleResult

__all__ = [
    "FORBIDDEN_TRANSITIONS",
    "ScheduleAlert",
    "first_coverage_day",
    "collect_alerts",
    "validate_schedule",
]

FORBIDDEN_TRANSITIONS: frozenset[tuple[DayState, DayState]] = frozenset(
    {
        (DayState.STANDUP, DayState.STANDUP),
        (DayState.STANDUP, DayState.WINDDOWN),
        (DayState.WINDDOWN, DayState.STANDUP),
        (DayState.INDUCTION, DayState.STANDUP),
        (DayState.REST, DayState.INDUCTION),
    }
)


@dataclass(frozen=True, slots=True)
class ScheduleAlert:
    """One validation finding. ``kind`` is ``three_producing``, ``under_coverage`` or
    ``invalid_transition``."""

    kind: str
    day: int
    message: str
    unit: str | None = None


def _as_state(value: object) -> DayState:
    try:
        return DayState(value)
    except ValueError:
        return DayState.EMPTY


def first_coverage_day(p_count: Sequence[int]) -> int:
    """First day with exactly two units producing, or ``-1``.

    Distinct from ``Diagnostics.first_producing_day`` (first day with any unit producing);
    coverage gaps are only reported from this day on.
    """
    return next((day for day, count in enumerate(p_count) if count == 2), -1)


def collect_alerts(schedule: ScheduleResult) -> list[ScheduleAlert]:
    alerts: list[ScheduleAlert] = []
    p_count = list(schedule.p_count)

    for day, count in enumerate(p_count):
        if count == 3:
            alerts.append(
                ScheduleAlert(
                    "three_producing",
                    day,
                    f"ERROR: day {day} has 3 units producing (#P=3).",
                )
            )

    start = first_coverage_day(p_count)
    if start != -1:
        for day in range(start, len(p_count)):
            if p_count[day] == 1:
                alerts.append(
                    ScheduleAlert(
                        "under_coverage",
                        day,
                        f"ERROR: day {day} has only 1 unit producing (#P=1) after coverage start.",
                    )
                )
            if p_count[day] == 0:
                alerts.append(
                    ScheduleAlert(
                        "under_coverage",
                        day,
                        f"ERROR: day {day} has 0 units producing (#P=0) after coverage start.",
                    )
                )

    for name, raw_row in zip(schedule.names, schedule.states):
        row = [_as_state(value) for value in raw_row]
        for day in range(1, len(row)):
            prev, curr = row[day - 1], row[day]
            if prev is DayState.EMPTY or curr is DayState.EMPTY:
                continue
            if (prev, curr) in FORBIDDEN_TRANSITIONS:
                alerts.append(
                    ScheduleAlert(
                        "invalid_transition",
                        day - 1,
                        f"Invalid transition for {name} day {day - 1}->{day}: {prev.value}-{curr.value}",
                        unit=name,
                    )
                )
    return alerts


def validate_schedule(schedule: ScheduleResult) -> list[str]:
    """Return alert messages in check order; an empty list means no violations."""
    return [alert.message for alert in collect_alerts(schedule)]
