"""Coverage scoring for candidate unit offsets."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import asdict, dataclass
from typing import Any

import numpy as np

from crewrota.scheduling.layout import producing_vector, state_at
from crewrota.scheduling.regime import DEFAULT_POLICY, RegimeParams, RegimePolicy
from crewrota.scheduling.states import DayState

__all__ = [
    "THREE_PRODUCING_PENALTY",
    "NOT_TWO_PENALTY",
    "Diagnostics",
    "max_offset",
    "producing_counts",
    "diagnostics_from_counts",
    "score_offsets",
    "OffsetScorer",
]

THREE_PRODUCING_PENALTY = 1000
NOT_TWO_PENALTY = 10


@dataclass(frozen=True, slots=True)
class Diagnostics:
    """Residual coverage violations for one offset assignment.

    ``first_producing_day`` is the first day with at least one unit producing (``-1`` when
    no unit produces inside the horizon); ``not_two_after_start_days`` counts days from
    then on whose producing count differs from two.
    """

    first_producing_day: int
    three_producing_days: int
    not_two_after_start_days: int
    score: int
    is_perfect: bool

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def max_offset(regime: RegimeParams, horizon: int) -> int:
    """Largest start offset searched for units 2 and 3."""
    return min(horizon - 1, regime.cycle_span * 3 + 20)


def producing_counts(
    regime: RegimeParams,
    horizon: int,
    starts: Sequence[int],
    *,
    policy: RegimePolicy | str = DEFAULT_POLICY,
) -> list[int]:
    """Per-day number of PRODUCING units over ``[0, horizon)``."""
    counts = [0] * max(0, horizon)
    for start in starts:
        for day in range(len(counts)):
            state = state_at(
                day,
                start,
                regime.work_days,
                regime.rest_days,
                regime.induction_days,
                policy=policy,
            )
            if state is DayState.PRODUCING:
                counts[day] += 1
    return counts


def diagnostics_from_counts(counts: Sequence[int], offset2: int, offset3: int) -> Diagnostics:
    first = next((day for day, count in enumerate(counts) if count > 0), -1)
    three = sum(1 for count in counts if count == 3)
    not_two = 0
    if first != -1:
        not_two = sum(1 for count in counts[first:] if count != 2)
    score = three * THREE_PRODUCING_PENALTY + not_two * NOT_TWO_PENALTY + abs(offset2) + abs(offset3)
    return Diagnostics(
        first_producing_day=first,
        three_producing_days=three,
        not_two_after_start_days=not_two,
        score=score,
        is_perfect=three == 0 and not_two == 0,
    )


def score_offsets(
    regime: RegimeParams,
    horizon: int,
    offsets: Sequence[int],
    *,
    policy: RegimePolicy | str = DEFAULT_POLICY,
) -> Diagnostics:
    """Score the start offsets ``[0, offset2, offset3]`` by walking every unit-day.

    This is the reference scorer; :class:`OffsetScorer` reproduces it in bulk.
    """
    counts = producing_counts(regime, horizon, offsets, policy=policy)
    return diagnostics_from_counts(counts, offsets[1], offsets[2])


class OffsetScorer:
    """Vectorised scorer for a fixed regime and horizon.

    Every unit follows the same timeline shifted by its offset, so the producing vector of a
    unit starting on day ``o`` is the unit-1 vector delayed by ``o`` days. The shifted vectors
    for all candidate offsets are stacked once and each call to :meth:`score_row` evaluates
    every ``offset3`` for a given ``offset2``.
    """

    def __init__(
        self,
        regime: RegimeParams,
        horizon: int,
        upper_offset: int,
        *,
        policy: RegimePolicy | str = DEFAULT_POLICY,
    ) -> None:
        self.regime = regime
        self.horizon = horizon
        self.upper_offset = upper_offset
        self.policy = policy
        self.base = producing_vector(
            horizon, 0, regime.work_days, regime.rest_days, regime.induction_days, policy=policy
        )
        n_offsets = max(0, upper_offset + 1)
        shifted = np.zeros((n_offsets, horizon), dtype=np.int16)
        for offset in range(n_offsets):
            shifted[offset, offset:] = self.base[: horizon - offset]
        self.shifted = shifted
        self._days = np.arange(horizon)

    def score_row(self, offset2: int, offset3: np.ndarray | None = None) -> dict[str, np.ndarray]:
        """Return diagnostic arrays for ``(offset2, o3)`` over the requested ``o3`` values."""
        if offset3 is None:
            offset3 = np.arange(self.shifted.shape[0])
        offset3 = np.asarray(offset3, dtype=np.int64)
        counts = self.base + self.shifted[offset2] + self.shifted[offset3]
        producing = counts > 0
        any_producing = producing.any(axis=1)
        first = np.where(any_producing, producing.argmax(axis=1), -1)
        after_start = (self._days[None, :] >= first[:, None]) & any_producing[:, None]
        three = (counts == 3).sum(axis=1)
        not_two = ((counts != 2) & after_start).sum(axis=1)
        score = (
            three * THREE_PRODUCING_PENALTY
            + not_two * NOT_TWO_PENALTY
            + abs(offset2)
            + np.abs(offset3)
        )
        return {
            "offset3": offset3,
            "first_producing_day": first,
            "three_producing_days": three,
            "not_two_after_start_days": not_two,
            "score": score,
            "is_perfect": (three == 0) & (not_two == 0),
        }

    def diagnostics(self, offset2: int, offset3: int) -> Diagnostics:
        row = self.score_row(offset2, np.array([offset3]))
        return Diagnostics(
            first_producing_day=int(row["first_producing_day"][0]),
            three_producing_days=int(row["three_producing_days"][0]),
            not_two_after_start_days=int(row["not_two_after_start_days"][0]),
            score=int(row["score"][0]),
            is_perfect=bool(row["is_perfect"][0]),
        )
