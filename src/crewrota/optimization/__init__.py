"""Offset search: coverage scoring and pluggable phase solvers."""

from .scoring import Diagnostics, OffsetScorer, max_offset, producing_counts, score_offsets
from .solvers import (
    DEFAULT_SOLVER,
    BruteForcePhaseSolver,
    CancelToken,
    PhaseSolution,
    PhaseSolver,
    StaggeredPhaseSolver,
    available_solvers,
    get_phase_solver,
)

__all__ = [
    "Diagnostics",
    "OffsetScorer",
    "max_offset",
    "producing_counts",
    "score_offsets",
    "CancelToken",
    "PhaseSolution",
    "PhaseSolver",
    "BruteForcePhaseSolver",
    "StaggeredPhaseSolver",
    "DEFAULT_SOLVER",
    "available_solvers",
    "get_phase_solver",
]
