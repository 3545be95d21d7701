from __future__ import annotations

import pytest

from crewrota.core.errors import SolveCancelledError, UnknownSolverError
from crewrota.optimization.solvers import (
    BruteForcePhaseSolver,
    CancelToken,
    StaggeredPhaseSolver,
    available_solvers,
    get_phase_solver,
)
from crewrota.planning.builder import compute_horizon
from crewrota.scheduling.regime import RegimeParams

REGIME = RegimeParams(W=14, R=7, I=5, totalCoverageDays=90)


def test_registry_lookup():
    assert available_solvers() == ["brute-force", "staggered"]
    assert isinstance(get_phase_solver(None), BruteForcePhaseSolver)
    assert isinstance(get_phase_solver("Brute"), BruteForcePhaseSolver)
    assert isinstance(get_phase_solver("staggered"), StaggeredPhaseSolver)
    custom = StaggeredPhaseSolver(cycle_shifts=0)
    assert get_phase_solver(custom) is custom
    with pytest.raises(UnknownSolverError):
        get_phase_solver("annealing")


def test_brute_force_returns_lowest_score():
    solution = BruteForcePhaseSolver().solve(REGIME, compute_horizon(REGIME))
    assert solution.starts == (0, 7, 14)
    assert solution.diagnostics.score == 141
    assert not solution.timed_out
    assert solution.candidates_evaluated == (26 * 3 + 21) ** 2


def test_brute_force_stops_on_first_perfect_pair():
    # Nobody produces within three days, so the very first pair is already perfect.
    solution = BruteForcePhaseSolver().solve(REGIME, 3)
    assert solution.starts == (0, 0, 0)
    assert solution.diagnostics.is_perfect
    assert solution.diagnostics.first_producing_day == -1
    assert solution.candidates_evaluated == 1


def test_staggered_agrees_with_brute_force_on_standard_regime():
    horizon = compute_horizon(REGIME)
    brute = BruteForcePhaseSolver().solve(REGIME, horizon)
    staggered = StaggeredPhaseSolver().solve(REGIME, horizon)
    assert staggered.starts == brute.starts
    assert staggered.diagnostics == brute.diagnostics
    assert staggered.candidates_evaluated < brute.candidates_evaluated


def test_cancel_token_aborts_search():
    token = CancelToken()
    token.cancel()
    assert token.cancelled
    with pytest.raises(SolveCancelledError):
        BruteForcePhaseSolver().solve(REGIME, compute_horizon(REGIME), cancel_token=token)


def test_time_limit_returns_best_so_far():
    solution = BruteForcePhaseSolver().solve(REGIME, compute_horizon(REGIME), time_limit=1e-9)
    assert solution.timed_out
    assert solution.offset2 == 0


def test_zero_time_limit_stops_after_first_row():
    solution = BruteForcePhaseSolver().solve(REGIME, compute_horizon(REGIME), time_limit=0)
    assert solution.timed_out
    assert solution.offset2 == 0
    assert solution.candidates_evaluated == 26 * 3 + 21
