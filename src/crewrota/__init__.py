"""crewrota: rotating work/rest calendars for three interchangeable units.

``build_schedule`` phase-aligns three units so that two of them are producing on every day
after production starts; ``validate_schedule`` re-checks a built schedule.
"""

from crewrota.optimization import Diagnostics, get_phase_solver, score_offsets
from crewrota.planning import ScheduleResult, build_schedule, submit_build
from crewrota.scheduling import DayState, RegimeParams, RegimePolicy, state_at, state_color
from crewrota.validation import validate_schedule

__version__ = "0.1.0"

__all__ = [
    "DayState",
    "RegimeParams",
    "RegimePolicy",
    "state_at",
    "state_color",
    "Diagnostics",
    "score_offsets",
    "get_phase_solver",
    "ScheduleResult",
    "build_schedule",
    "submit_build",
    "validate_schedule",
    "__version__",
]
