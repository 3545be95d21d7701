"""Regime parameters (W x R with induction) and their clamping rules."""

from __future__ import annotations

import math
from collections.abc import Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from crewrota.core.errors import UnknownPolicyError

__all__ = [
    "MIN_WORK_DAYS",
    "MIN_REST_DAYS",
    "MIN_INDUCTION_DAYS",
    "MAX_INDUCTION_DAYS",
    "MIN_COVERAGE_DAYS",
    "MAX_COVERAGE_DAYS",
    "RegimePolicy",
    "DEFAULT_POLICY",
    "RegimeParams",
    "clamp_int",
    "resolve_policy",
]

MIN_WORK_DAYS = 1
MIN_REST_DAYS = 2
MIN_INDUCTION_DAYS = 1
MAX_INDUCTION_DAYS = 5
MIN_COVERAGE_DAYS = 1
MAX_COVERAGE_DAYS = 5000


class RegimePolicy(str, Enum):
    """Versioned interpretation of a W x R regime.

    ``TRANSITION_DEDUCTED`` places STANDUP at the start of the on-duty block and takes the
    two transition days out of the nominal rest period, so only ``R - 2`` days are REST.
    ``FULL_REST`` keeps STANDUP and WINDDOWN inside the W days and treats all R days as REST.
    """

    TRANSITION_DEDUCTED = "transition-deducted/v2"
    FULL_REST = "full-rest/v1"


DEFAULT_POLICY = RegimePolicy.TRANSITION_DEDUCTED

_POLICY_ALIASES = {
    "v2": RegimePolicy.TRANSITION_DEDUCTED,
    "transition-deducted": RegimePolicy.TRANSITION_DEDUCTED,
    "v1": RegimePolicy.FULL_REST,
    "full-rest": RegimePolicy.FULL_REST,
}


def resolve_policy(value: RegimePolicy | str | None) -> RegimePolicy:
    """Return the policy for an enum member, its value, or a short alias (``"v1"``)."""
    if value is None:
        return DEFAULT_POLICY
    if isinstance(value, RegimePolicy):
        return value
    key = str(value).strip().lower()
    if key in _POLICY_ALIASES:
        return _POLICY_ALIASES[key]
    try:
        return RegimePolicy(key)
    except ValueError as exc:
        choices = ", ".join(sorted([p.value for p in RegimePolicy] + list(_POLICY_ALIASES)))
        raise UnknownPolicyError(f"Unknown regime policy '{value}'. Available: {choices}") from exc


def clamp_int(value: Any, lower: int, upper: int | None = None) -> int:
    """Floor ``value`` to an int inside ``[lower, upper]``.

    Non-numeric, NaN and infinite inputs collapse to ``lower``. Integers are clamped
    exactly, whatever their size.
    """
    if isinstance(value, int):
        result = int(value)
    else:
        try:
            number = float(value)
        except (TypeError, ValueError, OverflowError):
            number = math.nan
        result = math.floor(number) if math.isfinite(number) else lower
    if upper is not None:
        result = min(upper, result)
    return max(lower, result)


class RegimeParams(BaseModel):
    """Immutable regime inputs for one schedule build.

    Field aliases (``W``, ``R``, ``I``, ``totalCoverageDays``) follow the short names used on
    rota sheets; the long names are accepted as well. Out-of-range values are clamped, never
    rejected.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    work_days: int = Field(14, alias="W")
    rest_days: int = Field(7, alias="R")
    induction_days: int = Field(5, alias="I")
    coverage_days: int = Field(90, alias="totalCoverageDays")

    @field_validator("work_days", mode="before")
    @classmethod
    def _clamp_work(cls, value: Any) -> int:
        return clamp_int(value, MIN_WORK_DAYS)

    @field_validator("rest_days", mode="before")
    @classmethod
    def _clamp_rest(cls, value: Any) -> int:
        return clamp_int(value, MIN_REST_DAYS)

    @field_validator("induction_days", mode="before")
    @classmethod
    def _clamp_induction(cls, value: Any) -> int:
        return clamp_int(value, MIN_INDUCTION_DAYS, MAX_INDUCTION_DAYS)

    @field_validator("coverage_days", mode="before")
    @classmethod
    def _clamp_coverage(cls, value: Any) -> int:
        return clamp_int(value, MIN_COVERAGE_DAYS, MAX_COVERAGE_DAYS)

    @classmethod
    def coerce(cls, value: RegimeParams | Mapping[str, Any] | None = None) -> RegimeParams:
        """Return ``value`` as a ``RegimeParams`` (``None`` yields the defaults)."""
        if isinstance(value, cls):
            return value
        if value is None:
            return cls()
        return cls.model_validate(dict(value))

    @property
    def cycle_span(self) -> int:
        """``W + R + I``; drives the search bounds and horizon."""
        return self.work_days + self.rest_days + self.induction_days

    def short_label(self) -> str:
        return f"{self.work_days}x{self.rest_days} I{self.induction_days} T{self.coverage_days}"
