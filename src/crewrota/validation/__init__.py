"""Schedule validators."""

from .coverage import (
    FORBIDDEN_TRANSITIONS,
    ScheduleAlert,
    collect_alerts,
    first_coverage_day,
    validate_schedule,
)

__all__ = [
    "FORBIDDEN_TRANSITIONS",
    "ScheduleAlert",
    "collect_alerts",
    "first_coverage_day",
    "validate_schedule",
]
