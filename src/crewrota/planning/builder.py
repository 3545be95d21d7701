"""Schedule assembly: clamp, solve offsets, expand the state grid, trim to coverage.

Example
-------
>>> from crewrota.planning import build_schedule
>>> result = build_schedule({"W": 14, "R": 7, "I": 5, "totalCoverageDays": 90})
>>> result.starts
(0, 7, 14)
>>> result.diagnostics.three_producing_days
0
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from crewrota.optimization.scoring import Diagnostics
from crewrota.optimization.solvers import CancelToken, PhaseSolver, get_phase_solver
from crewrota.scheduling.layout import build_layout
from crewrota.scheduling.regime import DEFAULT_POLICY, RegimeParams, RegimePolicy, resolve_policy
from crewrota.scheduling.states import DayState
from crewrota.telemetry import RunTelemetryLogger

__all__ = [
    "UNIT_NAMES",
    "HORIZON_CYCLE_FACTOR",
    "HORIZON_SLACK_DAYS",
    "ScheduleResult",
    "compute_horizon",
    "trim_length",
    "build_schedule",
]

UNIT_NAMES = ("S1", "S2", "S3")
HORIZON_CYCLE_FACTOR = 6
HORIZON_SLACK_DAYS = 20


@dataclass(frozen=True)
class ScheduleResult:
    """Trimmed three-unit schedule returned by :func:`build_schedule`.

    Attributes
    ----------
    params:
        Clamped regime parameters the schedule was built from.
    starts:
        First STANDUP day of each unit; unit 1 is always 0.
    days:
        Length of the trimmed schedule.
    names:
        Unit labels, in row order.
    states:
        One row of :class:`DayState` per unit, ``days`` long.
    p_count:
        Number of PRODUCING units per day.
    diagnostics:
        Solver diagnostics over the full search horizon.
    policy:
        Regime policy used for the unit timelines.
    solver:
        Name of the phase solver that chose the offsets.
    timed_out:
        True when the solver stopped at its time limit.
    """

    params: RegimeParams
    starts: tuple[int, int, int]
    days: int
    names: tuple[str, ...]
    states: tuple[tuple[DayState, ...], ...]
    p_count: tuple[int, ...]
    diagnostics: Diagnostics
    policy: RegimePolicy = DEFAULT_POLICY
    solver: str = "brute-force"
    timed_out: bool = False
    horizon: int = field(default=0, compare=False)

    @property
    def two_producing_days(self) -> int:
        return sum(1 for count in self.p_count if count == 2)

    @property
    def coverage_target_met(self) -> bool:
        return self.two_producing_days >= self.params.coverage_days

    def state_rows_as_labels(self) -> list[list[str]]:
        return [[state.value for state in row] for row in self.states]

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready representation (state rows as single-letter labels)."""
        return {
            "params": self.params.model_dump(by_alias=True),
            "policy": self.policy.value,
            "solver": self.solver,
            "starts": list(self.starts),
            "days": self.days,
            "names": list(self.names),
            "states": self.state_rows_as_labels(),
            "p_count": list(self.p_count),
            "diagnostics": self.diagnostics.to_dict(),
            "timed_out": self.timed_out,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> ScheduleResult:
        """Rebuild a result written by :meth:`to_dict`."""
        states = tuple(
            tuple(DayState.from_code(code) for code in row) for row in payload["states"]
        )
        p_count = payload.get("p_count")
        if p_count is None:
            p_count = [
                sum(1 for row in states if row[day] is DayState.PRODUCING)
                for day in range(len(states[0]) if states else 0)
            ]
        return cls(
            params=RegimeParams.coerce(payload.get("params")),
            starts=tuple(int(s) for s in payload.get("starts", (0, 0, 0))),
            days=int(payload.get("days", len(p_count))),
            names=tuple(payload.get("names", UNIT_NAMES)),
            states=states,
            p_count=tuple(int(c) for c in p_count),
            diagnostics=Diagnostics(**payload["diagnostics"]),
            policy=resolve_policy(payload.get("policy")),
            solver=str(payload.get("solver", "brute-force")),
            timed_out=bool(payload.get("timed_out", False)),
        )


def compute_horizon(regime: RegimeParams) -> int:
    """Days simulated while searching: the coverage target plus six regime spans and slack."""
    return regime.coverage_days + regime.cycle_span * HORIZON_CYCLE_FACTOR + HORIZON_SLACK_DAYS


def trim_length(p_count: list[int], coverage_days: int) -> int:
    """Length up to (and including) the day the ``count == 2`` tally reaches ``coverage_days``.

    Returns ``len(p_count)`` when the tally never gets there.
    """
    tally = 0
    for day, count in enumerate(p_count):
        if count == 2:
            tally += 1
        if tally >= coverage_days:
            return day + 1
    return len(p_count)


def build_schedule(
    params: RegimeParams | Mapping[str, Any] | None = None,
    *,
    policy: RegimePolicy | str | None = None,
    solver: str | PhaseSolver | None = None,
    cancel_token: CancelToken | None = None,
    time_limit: float | None = None,
    telemetry_log: str | Path | None = None,
    telemetry_context: Mapping[str, Any] | None = None,
    telemetry_step_interval: int | None = None,
) -> ScheduleResult:
    """Build a three-unit rota for ``params``.

    Parameters
    ----------
    params:
        ``RegimeParams`` or a mapping with ``W``/``R``/``I``/``totalCoverageDays`` (or the
        long field names). Values are clamped, never rejected.
    policy:
        Regime policy (default ``transition-deducted/v2``).
    solver:
        Phase solver name or instance (default brute force).
    cancel_token:
        Optional token; cancelling it makes the search raise ``SolveCancelledError``.
    time_limit:
        Optional search budget in seconds; the best offsets found so far are used when it
        runs out and ``timed_out`` is set on the result.
    telemetry_log:
        Optional JSONL path receiving one run record per build.
    telemetry_context:
        Extra metadata merged into the run record.
    telemetry_step_interval:
        Emit a step record every N outer search iterations (requires ``telemetry_log``).
    """
    regime = RegimeParams.coerce(params)
    policy = resolve_policy(policy)
    phase_solver = get_phase_solver(solver)
    horizon = compute_horizon(regime)

    logger = (
        RunTelemetryLogger(
            log_path=Path(telemetry_log),
            solver=phase_solver.name,
            regime=regime.model_dump(by_alias=True),
            policy=policy.value,
            context=telemetry_context,
            step_interval=telemetry_step_interval,
        )
        if telemetry_log
        else None
    )
    if logger is None:
        return _build(regime, horizon, policy, phase_solver, cancel_token, time_limit, None)

    with logger:
        result = _build(regime, horizon, policy, phase_solver, cancel_token, time_limit, logger)
        logger.finalize(
            status="ok",
            metrics={
                **result.diagnostics.to_dict(),
                "days": result.days,
                "horizon": horizon,
                "two_producing_days": result.two_producing_days,
            },
            extra={"starts": list(result.starts), "timed_out": result.timed_out},
        )
    return result


def _build(
    regime: RegimeParams,
    horizon: int,
    policy: RegimePolicy,
    phase_solver: PhaseSolver,
    cancel_token: CancelToken | None,
    time_limit: float | None,
    logger: RunTelemetryLogger | None,
) -> ScheduleResult:
    solution = phase_solver.solve(
        regime,
        horizon,
        policy=policy,
        cancel_token=cancel_token,
        time_limit=time_limit,
        telemetry=logger,
    )
    starts = solution.starts
    layout = build_layout(regime.work_days, regime.rest_days, regime.induction_days, policy)

    grid = [
        [layout.state_at_offset(day - start) if day >= start else DayState.EMPTY for day in range(horizon)]
        for start in starts
    ]
    p_count = [
        sum(1 for row in grid if row[day] is DayState.PRODUCING) for day in range(horizon)
    ]
    days = trim_length(p_count, regime.coverage_days)

    return ScheduleResult(
        params=regime,
        starts=starts,
        days=days,
        names=UNIT_NAMES,
        states=tuple(tuple(row[:days]) for row in grid),
        p_count=tuple(p_count[:days]),
        diagnostics=solution.diagnostics,
        policy=policy,
        solver=solution.solver,
        timed_out=solution.timed_out,
        horizon=horizon,
    )
