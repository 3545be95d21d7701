"""Phase solvers that pick start offsets for units 2 and 3.

Unit 1 always starts on day 0. A solver searches ``(offset2, offset3)`` pairs and returns
the first perfect assignment it meets, or the lowest-scoring one when no perfect assignment
exists inside its search space. Solvers are looked up by name through
:func:`get_phase_solver` so callers (and tests) can swap the strategy.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

import numpy as np

from crewrota.core.errors import SolveCancelledError, UnknownSolverError
from crewrota.optimization.scoring import Diagnostics, OffsetScorer, max_offset, score_offsets
from crewrota.scheduling.layout import build_layout
from crewrota.scheduling.regime import DEFAULT_POLICY, RegimeParams, RegimePolicy, resolve_policy

if TYPE_CHECKING:
    from crewrota.telemetry import RunTelemetryLogger

__all__ = [
    "CancelToken",
    "PhaseSolution",
    "PhaseSolver",
    "BruteForcePhaseSolver",
    "StaggeredPhaseSolver",
    "DEFAULT_SOLVER",
    "available_solvers",
    "get_phase_solver",
]


class CancelToken:
    """Thread-safe cancellation flag checked between outer search iterations."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise SolveCancelledError("offset search cancelled")


@dataclass(frozen=True, slots=True)
class PhaseSolution:
    """Offsets chosen by a phase solver.

    Attributes
    ----------
    offset2, offset3:
        Start days of units 2 and 3.
    diagnostics:
        Coverage diagnostics for ``[0, offset2, offset3]`` over the solve horizon.
    solver:
        Name of the solver that produced the solution.
    candidates_evaluated:
        Number of offset pairs scored.
    timed_out:
        True when the time limit ended the search before the space was exhausted.
    """

    offset2: int
    offset3: int
    diagnostics: Diagnostics
    solver: str
    candidates_evaluated: int = 0
    timed_out: bool = False

    @property
    def starts(self) -> tuple[int, int, int]:
        return (0, self.offset2, self.offset3)


class PhaseSolver(Protocol):
    """Interface for offset search strategies."""

    name: str

    def solve(
        self,
        regime: RegimeParams,
        horizon: int,
        *,
        policy: RegimePolicy | str = DEFAULT_POLICY,
        cancel_token: CancelToken | None = None,
        time_limit: float | None = None,
        telemetry: RunTelemetryLogger | None = None,
    ) -> PhaseSolution:
        """Return the chosen offsets for ``regime`` over ``horizon`` days."""


def _fallback(regime: RegimeParams, scorer: OffsetScorer, name: str) -> PhaseSolution:
    offset3 = regime.work_days + 1
    diagnostics = score_offsets(regime, scorer.horizon, (0, 0, offset3), policy=scorer.policy)
    return PhaseSolution(0, offset3, diagnostics, name)


class BruteForcePhaseSolver:
    """Exhaustive search over ``[0, max_offset]^2`` in ``offset2``-major ascending order.

    The first perfect pair wins outright; otherwise the strictly lowest score is kept, so ties
    go to the pair met first.
    """

    name = "brute-force"

    def solve(
        self,
        regime: RegimeParams,
        horizon: int,
        *,
        policy: RegimePolicy | str = DEFAULT_POLICY,
        cancel_token: CancelToken | None = None,
        time_limit: float | None = None,
        telemetry: RunTelemetryLogger | None = None,
    ) -> PhaseSolution:
        policy = resolve_policy(policy)
        upper = max_offset(regime, horizon)
        scorer = OffsetScorer(regime, horizon, upper, policy=policy)
        if upper < 0:
            return _fallback(regime, scorer, self.name)

        deadline = time.perf_counter() + time_limit if time_limit is not None else None
        best: tuple[int, int, int] | None = None  # (score, offset2, offset3)
        evaluated = 0
        timed_out = False
        for step, offset2 in enumerate(range(upper + 1), start=1):
            if cancel_token is not None:
                cancel_token.raise_if_cancelled()
            if deadline is not None and best is not None and time.perf_counter() > deadline:
                timed_out = True
                break

            row = scorer.score_row(offset2)
            evaluated += len(row["offset3"])
            perfect = np.flatnonzero(row["is_perfect"])
            if perfect.size:
                offset3 = int(row["offset3"][perfect[0]])
                evaluated -= len(row["offset3"]) - int(perfect[0]) - 1
                if telemetry is not None and telemetry.wants_step(step):
                    telemetry.log_step(
                        step=step,
                        offset2=offset2,
                        best_score=int(row["score"][perfect[0]]),
                        best_offsets=(offset2, offset3),
                        candidates_evaluated=evaluated,
                    )
                return PhaseSolution(
                    offset2,
                    offset3,
                    scorer.diagnostics(offset2, offset3),
                    self.name,
                    candidates_evaluated=evaluated,
                )

            idx = int(np.argmin(row["score"]))
            score = int(row["score"][idx])
            if best is None or score < best[0]:
                best = (score, offset2, int(row["offset3"][idx]))
            if telemetry is not None and telemetry.wants_step(step):
                telemetry.log_step(
                    step=step,
                    offset2=offset2,
                    best_score=best[0],
                    best_offsets=(best[1], best[2]),
                    candidates_evaluated=evaluated,
                )

        if best is None:
            return _fallback(regime, scorer, self.name)
        _, offset2, offset3 = best
        return PhaseSolution(
            offset2,
            offset3,
            scorer.diagnostics(offset2, offset3),
            self.name,
            candidates_evaluated=evaluated,
            timed_out=timed_out,
        )


class StaggeredPhaseSolver:
    """Score only offsets near one and two thirds of the cycle length.

    When the producing share of a cycle is two thirds, the units must be phased a third of a
    cycle apart; this solver checks those phases (rounded both ways, in either unit order)
    plus whole-cycle shifts instead of the full quadratic space.
    """

    name = "staggered"

    def __init__(self, cycle_shifts: int = 1) -> None:
        self.cycle_shifts = cycle_shifts

    def candidates(self, regime: RegimeParams, upper: int, policy: RegimePolicy) -> list[tuple[int, int]]:
        layout = build_layout(regime.work_days, regime.rest_days, regime.induction_days, policy)
        cycle = max(1, layout.cycle_length)
        thirds = sorted({cycle // 3, -(-cycle // 3)})
        two_thirds = sorted({(2 * cycle) // 3, -(-2 * cycle // 3)})
        pairs: set[tuple[int, int]] = set()
        for shift2 in range(self.cycle_shifts + 1):
            for shift3 in range(self.cycle_shifts + 1):
                for a in thirds:
                    for b in two_thirds:
                        pairs.add((a + shift2 * cycle, b + shift3 * cycle))
                        pairs.add((b + shift2 * cycle, a + shift3 * cycle))
        return sorted((o2, o3) for o2, o3 in pairs if 0 <= o2 <= upper and 0 <= o3 <= upper)

    def solve(
        self,
        regime: RegimeParams,
        horizon: int,
        *,
        policy: RegimePolicy | str = DEFAULT_POLICY,
        cancel_token: CancelToken | None = None,
        time_limit: float | None = None,
        telemetry: RunTelemetryLogger | None = None,
    ) -> PhaseSolution:
        policy = resolve_policy(policy)
        upper = max_offset(regime, horizon)
        scorer = OffsetScorer(regime, horizon, upper, policy=policy)
        best: PhaseSolution | None = None
        evaluated = 0
        for step, (offset2, offset3) in enumerate(self.candidates(regime, upper, policy), start=1):
            if cancel_token is not None:
                cancel_token.raise_if_cancelled()
            diagnostics = scorer.diagnostics(offset2, offset3)
            evaluated += 1
            if diagnostics.is_perfect:
                return PhaseSolution(offset2, offset3, diagnostics, self.name, candidates_evaluated=evaluated)
            if best is None or diagnostics.score < best.diagnostics.score:
                best = PhaseSolution(offset2, offset3, diagnostics, self.name)
            if telemetry is not None and telemetry.wants_step(step):
                telemetry.log_step(
                    step=step,
                    offset2=offset2,
                    best_score=best.diagnostics.score,
                    best_offsets=(best.offset2, best.offset3),
                    candidates_evaluated=evaluated,
                )
        if best is None:
            return _fallback(regime, scorer, self.name)
        return PhaseSolution(
            best.offset2,
            best.offset3,
            best.diagnostics,
            self.name,
            candidates_evaluated=evaluated,
        )


_SOLVERS: dict[str, type] = {
    BruteForcePhaseSolver.name: BruteForcePhaseSolver,
    StaggeredPhaseSolver.name: StaggeredPhaseSolver,
}

DEFAULT_SOLVER = BruteForcePhaseSolver.name


def available_solvers() -> list[str]:
    return sorted(_SOLVERS)


def get_phase_solver(name: str | PhaseSolver | None = None) -> PhaseSolver:
    """Resolve a phase solver by name (``None`` selects the brute-force default).

    Raises
    ------
    UnknownSolverError
        If ``name`` is not registered.
    """
    if name is None:
        return BruteForcePhaseSolver()
    if not isinstance(name, str):
        return name
    key = name.strip().lower()
    if key in {"brute", "bruteforce"}:
        key = BruteForcePhaseSolver.name
    try:
        return _SOLVERS[key]()
    except KeyError as exc:
        available = ", ".join(available_solvers())
        raise UnknownSolverError(f"Unknown phase solver '{name}'. Available: {available}") from exc
