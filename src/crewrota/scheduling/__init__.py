"""Scheduling primitives: regimes, day states, and segment layouts."""

from .layout import (
    Segment,
    SegmentLayout,
    build_layout,
    first_block_producing_days,
    producing_vector,
    rest_block_days,
    second_standup_day,
    state_at,
)
from .regime import DEFAULT_POLICY, RegimeParams, RegimePolicy, clamp_int, resolve_policy
from .states import DayState, legend, state_color, state_label

__all__ = [
    "DayState",
    "state_color",
    "state_label",
    "legend",
    "RegimeParams",
    "RegimePolicy",
    "DEFAULT_POLICY",
    "clamp_int",
    "resolve_policy",
    "Segment",
    "SegmentLayout",
    "build_layout",
    "state_at",
    "rest_block_days",
    "first_block_producing_days",
    "second_standup_day",
    "producing_vector",
]
