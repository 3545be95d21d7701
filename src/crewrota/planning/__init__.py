"""Schedule building, background jobs, and exports.

``build_schedule`` is the library entry point; the CLI and ``submit_build`` wrap it so both
interactive and scripted callers share the same assembly logic.
"""

from crewrota.planning.builder import (
    UNIT_NAMES,
    ScheduleResult,
    build_schedule,
    compute_horizon,
    trim_length,
)
from crewrota.planning.jobs import ScheduleJob, submit_build
from crewrota.planning.reporting import (
    coverage_dataframe,
    read_schedule_json,
    schedule_dataframe,
    write_schedule_json,
)

__all__ = [
    "UNIT_NAMES",
    "ScheduleResult",
    "build_schedule",
    "compute_horizon",
    "trim_length",
    "ScheduleJob",
    "submit_build",
    "schedule_dataframe",
    "coverage_dataframe",
    "write_schedule_json",
    "read_schedule_json",
]
