"""Background schedule builds for callers that must not block (interactive front ends)."""

from __future__ import annotations

from collections.abc import Mapping
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any

from crewrota.optimization.solvers import CancelToken, PhaseSolver
from crewrota.planning.builder import ScheduleResult, build_schedule
from crewrota.scheduling.regime import RegimeParams, RegimePolicy

__all__ = ["ScheduleJob", "submit_build"]


@dataclass
class ScheduleJob:
    """Handle on a build running in a worker thread."""

    future: Future[ScheduleResult]
    cancel_token: CancelToken = field(default_factory=CancelToken)
    _executor: ThreadPoolExecutor | None = field(default=None, repr=False)

    def cancel(self) -> None:
        """Request cooperative cancellation; the search stops at its next outer iteration."""
        self.cancel_token.cancel()
        self.future.cancel()

    def done(self) -> bool:
        return self.future.done()

    def result(self, timeout: float | None = None) -> ScheduleResult:
        """Wait for the schedule.

        Raises ``SolveCancelledError`` if the job was cancelled while searching,
        ``concurrent.futures.CancelledError`` if it was cancelled before it started, and
        ``concurrent.futures.TimeoutError`` if ``timeout`` elapses first.
        """
        try:
            return self.future.result(timeout=timeout)
        finally:
            if self._executor is not None and self.future.done():
                self._executor.shutdown(wait=False)
                self._executor = None


def submit_build(
    params: RegimeParams | Mapping[str, Any] | None = None,
    *,
    policy: RegimePolicy | str | None = None,
    solver: str | PhaseSolver | None = None,
    time_limit: float | None = None,
    executor: ThreadPoolExecutor | None = None,
    **build_kwargs: Any,
) -> ScheduleJob:
    """Run :func:`build_schedule` on ``executor`` (a private single worker by default)."""
    owned = executor is None
    pool = executor or ThreadPoolExecutor(max_workers=1, thread_name_prefix="crewrota-build")
    token = CancelToken()
    future = pool.submit(
        build_schedule,
        params,
        policy=policy,
        solver=solver,
        cancel_token=token,
        time_limit=time_limit,
        **build_kwargs,
    )
    return ScheduleJob(future=future, cancel_token=token, _executor=pool if owned else None)
