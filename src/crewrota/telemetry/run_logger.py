"""JSONL run records for schedule builds."""

from __future__ import annotations

import time
from contextlib import AbstractContextManager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping
from uuid import uuid4

from crewrota.core.errors import SolveCancelledError

from .jsonl import append_jsonl


def _iso_now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


@dataclass(slots=True)
class RunTelemetryLogger(AbstractContextManager["RunTelemetryLogger"]):
    """Write one ``run`` record per schedule build, plus optional ``step`` records.

    Parameters
    ----------
    log_path:
        JSONL file receiving run records. Step records go to ``steps/<run_id>.jsonl`` next
        to it.
    solver:
        Phase solver name (``"brute-force"``, ``"staggered"``).
    regime:
        Clamped regime parameters, alias keyed.
    policy:
        Regime policy value.
    context:
        Caller metadata such as the CLI command or preset name.
    step_interval:
        Log the search state on the first outer iteration and every ``step_interval``-th
        after it. Falsy values disable step records.
    """

    log_path: Path
    solver: str
    regime: Mapping[str, Any] | None = None
    policy: str | None = None
    context: Mapping[str, Any] | None = None
    step_interval: int | None = None
    schema_version: str = "1.0"
    run_id: str = field(default_factory=lambda: uuid4().hex, init=False)
    _started: float | None = field(default=None, init=False)
    _started_at: str | None = field(default=None, init=False)
    _written: bool = field(default=False, init=False)

    def __post_init__(self) -> None:
        self.log_path = Path(self.log_path)

    @property
    def steps_path(self) -> Path | None:
        if not self.step_interval or self.step_interval <= 0:
            return None
        return self.log_path.parent / "steps" / f"{self.run_id}.jsonl"

    def __enter__(self) -> "RunTelemetryLogger":
        self._started = time.perf_counter()
        self._started_at = _iso_now()
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc_type is None:
            self.finalize(status="ok")
        elif issubclass(exc_type, SolveCancelledError):
            self.finalize(status="cancelled", error=repr(exc))
        else:
            self.finalize(status="error", error=repr(exc))
        return False

    def wants_step(self, step: int) -> bool:
        if self.steps_path is None:
            return False
        return step == 1 or step % self.step_interval == 0

    def log_step(
        self,
        *,
        step: int,
        offset2: int,
        best_score: float,
        best_offsets: tuple[int, int] | None,
        candidates_evaluated: int,
    ) -> None:
        """Append the best pair seen after outer iteration ``step``."""
        path = self.steps_path
        if path is None:
            return
        append_jsonl(
            path,
            {
                **self._header("step"),
                "timestamp": _iso_now(),
                "step": step,
                "offset2": offset2,
                "best_score": best_score,
                "best_offsets": list(best_offsets) if best_offsets else None,
                "candidates_evaluated": candidates_evaluated,
            },
        )

    def elapsed(self) -> float:
        return 0.0 if self._started is None else time.perf_counter() - self._started

    def finalize(
        self,
        *,
        status: str = "ok",
        metrics: Mapping[str, Any] | None = None,
        extra: Mapping[str, Any] | None = None,
        error: str | None = None,
    ) -> None:
        """Write the run record. Only the first call per build is recorded."""
        if self._written:
            return
        self._written = True
        append_jsonl(
            self.log_path,
            {
                **self._header("run"),
                "solver": self.solver,
                "policy": self.policy,
                "regime": dict(self.regime or {}),
                "status": status,
                "metrics": dict(metrics or {}),
                "context": dict(self.context or {}),
                "extra": dict(extra or {}),
                "error": error,
                "started_at": self._started_at,
                "finished_at": _iso_now(),
                "duration_seconds": round(self.elapsed(), 3),
            },
        )

    def _header(self, record_type: str) -> dict[str, Any]:
        return {
            "record_type": record_type,
            "schema_version": self.schema_version,
            "run_id": self.run_id,
        }


__all__ = ["RunTelemetryLogger"]
