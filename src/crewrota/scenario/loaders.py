"""Regime config loading (YAML metadata validated by pydantic)."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from crewrota.core.errors import CrewRotaValueError, UnknownPolicyError
from crewrota.optimization.solvers import DEFAULT_SOLVER, available_solvers
from crewrota.scheduling.regime import DEFAULT_POLICY, RegimeParams, RegimePolicy, resolve_policy

__all__ = ["RegimeConfig", "load_regime_config", "dump_regime_config"]


class RegimeConfig(BaseModel):
    """A named regime plus the solve settings used to build it."""

    model_config = ConfigDict(frozen=True)

    name: str = "regime"
    regime: RegimeParams = Field(default_factory=RegimeParams)
    policy: RegimePolicy = DEFAULT_POLICY
    solver: str = DEFAULT_SOLVER
    time_limit_s: float | None = None

    @field_validator("policy", mode="before")
    @classmethod
    def _resolve_policy(cls, value: Any) -> RegimePolicy:
        try:
            return resolve_policy(value)
        except UnknownPolicyError as exc:
            raise ValueError(str(exc)) from exc

    @field_validator("solver")
    @classmethod
    def _known_solver(cls, value: str) -> str:
        key = value.strip().lower()
        if key not in available_solvers():
            raise ValueError(f"solver must be one of {', '.join(available_solvers())}")
        return key

    @field_validator("time_limit_s")
    @classmethod
    def _positive_limit(cls, value: float | None) -> float | None:
        if value is not None and value <= 0:
            raise ValueError("time_limit_s must be positive")
        return value


def load_regime_config(path: str | Path) -> RegimeConfig:
    """Load a regime YAML file.

    The file either nests the parameters under ``regime:`` or lists ``W``/``R``/``I``/
    ``totalCoverageDays`` at the top level.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(path)
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle)
    if not isinstance(data, dict):
        raise CrewRotaValueError(f"Regime config {path} must be a mapping")

    payload = dict(data)
    if "regime" not in payload:
        regime_keys = {
            "W", "R", "I", "totalCoverageDays",
            "work_days", "rest_days", "induction_days", "coverage_days",
        }
        payload["regime"] = {k: payload.pop(k) for k in list(payload) if k in regime_keys}
    payload.setdefault("name", path.stem)
    try:
        return RegimeConfig.model_validate(payload)
    except ValidationError as exc:
        raise CrewRotaValueError(f"Invalid regime config {path}: {exc}") from exc


def dump_regime_config(config: RegimeConfig, path: str | Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = {
        "name": config.name,
        "regime": config.regime.model_dump(by_alias=True),
        "policy": config.policy.value,
        "solver": config.solver,
    }
    if config.time_limit_s is not None:
        data["time_limit_s"] = config.time_limit_s
    with path.open("w", encoding="utf-8") as handle:
        yaml.safe_dump(data, handle, sort_keys=False)
    return path
