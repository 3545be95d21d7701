"""Tabular and JSON exports of built schedules."""

from __future__ import annotations

import json
from pathlib import Path

import pandas as pd

from crewrota.planning.builder import ScheduleResult
from crewrota.scheduling.states import state_color, state_label
from crewrota.validation.coverage import first_coverage_day

__all__ = [
    "SCHEDULE_COLUMNS",
    "COVERAGE_COLUMNS",
    "schedule_dataframe",
    "coverage_dataframe",
    "write_schedule_json",
    "read_schedule_json",
]

SCHEDULE_COLUMNS = ["day", "unit", "start_day", "state", "label", "color"]
COVERAGE_COLUMNS = ["day", "producing_count", "after_start", "ok"]


def schedule_dataframe(result: ScheduleResult) -> pd.DataFrame:
    """Long-form grid: one row per (unit, day)."""
    rows = [
        {
            "day": day,
            "unit": name,
            "start_day": start,
            "state": state.value,
            "label": state_label(state),
            "color": state_color(state),
        }
        for name, start, row in zip(result.names, result.starts, result.states)
        for day, state in enumerate(row)
    ]
    if not rows:
        return pd.DataFrame(columns=SCHEDULE_COLUMNS)
    return pd.DataFrame(rows).reindex(columns=SCHEDULE_COLUMNS)


def coverage_dataframe(result: ScheduleResult) -> pd.DataFrame:
    """Per-day producing count; ``ok`` is False for count 3 and for counts other than two
    from the first fully covered day on."""
    start = first_coverage_day(result.p_count)
    rows = []
    for day, count in enumerate(result.p_count):
        after_start = start != -1 and day >= start
        rows.append(
            {
                "day": day,
                "producing_count": count,
                "after_start": after_start,
                "ok": count != 3 and (not after_start or count == 2),
            }
        )
    if not rows:
        return pd.DataFrame(columns=COVERAGE_COLUMNS)
    return pd.DataFrame(rows).reindex(columns=COVERAGE_COLUMNS)


def write_schedule_json(result: ScheduleResult, path: str | Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(result.to_dict(), indent=2), encoding="utf-8")
    return path


def read_schedule_json(path: str | Path) -> ScheduleResult:
    with Path(path).open("r", encoding="utf-8") as handle:
        return ScheduleResult.from_dict(json.load(handle))
