"""Segment breakpoint tables and the per-unit day-state function.

A unit's timeline is a non-repeating *lead* (its first on-duty block, which carries the
induction days) followed by a repeating *cycle*. Both are stored as ordered
``(state, length)`` segments with cumulative end boundaries, so a day lookup is a bisect on a
tuple and :func:`state_at` stays pure and allocation-free.
"""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass, field
from functools import lru_cache
from itertools import accumulate

import numpy as np

from crewrota.scheduling.regime import DEFAULT_POLICY, RegimePolicy, resolve_policy
from crewrota.scheduling.states import DayState

__all__ = [
    "Segment",
    "SegmentLayout",
    "build_layout",
    "state_at",
    "rest_block_days",
    "first_block_producing_days",
    "second_standup_day",
    "producing_vector",
]


@dataclass(frozen=True, slots=True)
class Segment:
    state: DayState
    length: int


@dataclass(frozen=True, slots=True)
class SegmentLayout:
    """Lead and cycle segment tables for one regime under one policy."""

    lead: tuple[Segment, ...]
    cycle: tuple[Segment, ...]
    lead_bounds: tuple[int, ...] = field(init=False)
    cycle_bounds: tuple[int, ...] = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "lead_bounds", tuple(accumulate(s.length for s in self.lead)))
        object.__setattr__(self, "cycle_bounds", tuple(accumulate(s.length for s in self.cycle)))

    @property
    def lead_length(self) -> int:
        return self.lead_bounds[-1] if self.lead_bounds else 0

    @property
    def cycle_length(self) -> int:
        return self.cycle_bounds[-1] if self.cycle_bounds else 0

    def state_at_offset(self, rel: int) -> DayState:
        """State ``rel`` days after the unit's first STANDUP (``rel >= 0``)."""
        if rel < 0:
            return DayState.EMPTY
        if rel < self.lead_length:
            return self.lead[bisect_right(self.lead_bounds, rel)].state
        cycle_len = self.cycle_length
        if cycle_len == 0:
            return DayState.EMPTY
        pos = (rel - self.lead_length) % cycle_len
        return self.cycle[bisect_right(self.cycle_bounds, pos)].state

    def count(self, state: DayState) -> int:
        """Number of ``state`` days in the lead."""
        return sum(s.length for s in self.lead if s.state is state)


def rest_block_days(rest_days: int) -> int:
    """Pure REST days left once the two transition days are taken out of R."""
    return max(0, rest_days - 2)


def first_block_producing_days(work_days: int, induction_days: int) -> int:
    return max(0, work_days - induction_days)


def _segments(*pairs: tuple[DayState, int]) -> tuple[Segment, ...]:
    return tuple(Segment(state, length) for state, length in pairs if length > 0)


@lru_cache(maxsize=256)
def _cached_layout(work_days: int, rest_days: int, induction_days: int, policy: RegimePolicy) -> SegmentLayout:
    if policy is RegimePolicy.FULL_REST:
        work = max(2, work_days)
        rest = max(0, rest_days)
        induction = min(max(0, induction_days), work - 2)
        lead = _segments(
            (DayState.STANDUP, 1),
            (DayState.INDUCTION, induction),
            (DayState.PRODUCING, work - 2 - induction),
            (DayState.WINDDOWN, 1),
            (DayState.REST, rest),
        )
        cycle = _segments(
            (DayState.STANDUP, 1),
            (DayState.PRODUCING, work - 2),
            (DayState.WINDDOWN, 1),
            (DayState.REST, rest),
        )
        return SegmentLayout(lead, cycle)

    real_rest = rest_block_days(rest_days)
    lead = _segments(
        (DayState.STANDUP, 1),
        (DayState.INDUCTION, max(0, induction_days)),
        (DayState.PRODUCING, first_block_producing_days(work_days, induction_days)),
        (DayState.WINDDOWN, 1),
        (DayState.REST, real_rest),
        (DayState.STANDUP, 1),
    )
    cycle = _segments(
        (DayState.PRODUCING, max(0, work_days)),
        (DayState.WINDDOWN, 1),
        (DayState.REST, real_rest),
        (DayState.STANDUP, 1),
    )
    return SegmentLayout(lead, cycle)


def build_layout(
    work_days: int,
    rest_days: int,
    induction_days: int,
    policy: RegimePolicy | str = DEFAULT_POLICY,
) -> SegmentLayout:
    """Return the (cached) segment layout for a regime."""
    return _cached_layout(int(work_days), int(rest_days), int(induction_days), resolve_policy(policy))


def state_at(
    t: int,
    start_day: int,
    work_days: int,
    rest_days: int,
    induction_days: int,
    *,
    policy: RegimePolicy | str = DEFAULT_POLICY,
) -> DayState:
    """Return the state on day ``t`` of a unit whose first STANDUP falls on ``start_day``.

    Days before ``start_day`` are EMPTY. Total over all integers ``t``.
    """
    if t < start_day:
        return DayState.EMPTY
    layout = build_layout(work_days, rest_days, induction_days, policy)
    return layout.state_at_offset(t - start_day)


def second_standup_day(start_day: int, work_days: int, rest_days: int, induction_days: int) -> int:
    """Day of the STANDUP that opens the first full cycle (transition-deducted policy)."""
    return (
        start_day
        + 1
        + induction_days
        + first_block_producing_days(work_days, induction_days)
        + 1
        + rest_block_days(rest_days)
    )


def producing_vector(
    horizon: int,
    start_day: int,
    work_days: int,
    rest_days: int,
    induction_days: int,
    *,
    policy: RegimePolicy | str = DEFAULT_POLICY,
) -> np.ndarray:
    """0/1 vector over ``[0, horizon)`` marking PRODUCING days."""
    layout = build_layout(work_days, rest_days, induction_days, policy)
    vector = np.zeros(max(0, horizon), dtype=np.int16)
    for day in range(max(0, start_day), max(0, horizon)):
        if layout.state_at_offset(day - start_day) is DayState.PRODUCING:
            vector[day] = 1
    return vector
