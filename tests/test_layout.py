from __future__ import annotations

from hypothesis import given, settings
from hypothesis import strategies as st

from crewrota.scheduling.layout import (
    build_layout,
    producing_vector,
    second_standup_day,
    state_at,
)
from crewrota.scheduling.regime import RegimePolicy
from crewrota.scheduling.states import DayState

S, I, P, B, D, E = (
    DayState.STANDUP,
    DayState.INDUCTION,
    DayState.PRODUCING,
    DayState.WINDDOWN,
    DayState.REST,
    DayState.EMPTY,
)

work_days = st.integers(min_value=1, max_value=30)
rest_days = st.integers(min_value=2, max_value=15)
induction_days = st.integers(min_value=1, max_value=5)
start_days = st.integers(min_value=0, max_value=40)


def _row(start, days, W, R, I_, policy=RegimePolicy.TRANSITION_DEDUCTED):
    return [state_at(t, start, W, R, I_, policy=policy) for t in range(days)]


def test_fourteen_by_seven_timeline():
    row = _row(0, 43, 14, 7, 5)
    expected = [S] + [I] * 5 + [P] * 9 + [B] + [D] * 5 + [S] + [P] * 14 + [B] + [D] * 5 + [S]
    assert row == expected


def test_fourteen_by_seven_layout_lengths():
    layout = build_layout(14, 7, 5)
    assert layout.lead_length == 22
    assert layout.cycle_length == 21
    assert layout.count(P) == 9
    assert second_standup_day(0, 14, 7, 5) == 21


def test_minimal_work_block_keeps_standup_after_winddown():
    # Rest collapses to zero days, so winddown runs straight into the next standup.
    row = _row(0, 13, 1, 2, 5)
    assert row == [S, I, I, I, I, I, B, S, P, B, S, P, B]


def test_full_rest_policy_timeline():
    row = _row(0, 42, 14, 7, 5, RegimePolicy.FULL_REST)
    expected = [S] + [I] * 5 + [P] * 7 + [B] + [D] * 7 + [S] + [P] * 12 + [B] + [D] * 7
    assert row == expected


def test_policy_accepts_string_alias():
    assert state_at(13, 0, 14, 7, 5, policy="v1") is B
    assert state_at(13, 0, 14, 7, 5, policy="v2") is P


@settings(max_examples=200, deadline=None)
@given(
    W=work_days,
    R=rest_days,
    I_=induction_days,
    start=start_days,
    t=st.integers(min_value=-50, max_value=400),
)
def test_empty_before_start_and_never_empty_after(W, R, I_, start, t):
    state = state_at(t, start, W, R, I_)
    if t < start:
        assert state is E
    else:
        assert state is not E
    assert state_at(start, start, W, R, I_) is S


@settings(max_examples=200, deadline=None)
@given(W=work_days, R=rest_days, I_=induction_days, start=start_days, k=st.integers(0, 200))
def test_periodic_after_second_standup(W, R, I_, start, k):
    cycle = W + 1 + max(0, R - 2) + 1
    anchor = second_standup_day(start, W, R, I_)
    assert state_at(anchor, start, W, R, I_) is S
    t = anchor + k
    assert state_at(t, start, W, R, I_) is state_at(t + cycle, start, W, R, I_)


@settings(max_examples=100, deadline=None)
@given(W=work_days, R=rest_days, I_=induction_days, start=start_days)
def test_first_block_counts(W, R, I_, start):
    anchor = second_standup_day(start, W, R, I_)
    first_block = [state_at(t, start, W, R, I_) for t in range(start, anchor)]
    assert first_block.count(I) == I_
    assert first_block.count(P) == max(0, W - I_)
    assert first_block.count(B) == 1
    assert first_block.count(D) == max(0, R - 2)


@settings(max_examples=100, deadline=None)
@given(W=work_days, R=rest_days, I_=induction_days, start=start_days)
def test_induction_only_in_first_block(W, R, I_, start):
    anchor = second_standup_day(start, W, R, I_)
    later = [state_at(t, start, W, R, I_) for t in range(anchor, anchor + 3 * (W + R + 2))]
    assert I not in later


def test_producing_vector_matches_state_at():
    vector = producing_vector(120, 9, 14, 7, 5)
    expected = [1 if state_at(t, 9, 14, 7, 5) is P else 0 for t in range(120)]
    assert vector.tolist() == expected
    assert producing_vector(0, 0, 14, 7, 5).size == 0
