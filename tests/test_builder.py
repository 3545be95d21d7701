from __future__ import annotations

import pytest

from crewrota.core.errors import SolveCancelledError
from crewrota.optimization.solvers import CancelToken
from crewrota.planning.builder import (
    ScheduleResult,
    build_schedule,
    compute_horizon,
    trim_length,
)
from crewrota.scheduling.layout import first_block_producing_days
from crewrota.scheduling.regime import RegimeParams, RegimePolicy
from crewrota.scheduling.states import DayState
from crewrota.validation import validate_schedule


def test_fourteen_by_seven_schedule(schedule_14x7):
    result = schedule_14x7
    assert result.starts == (0, 7, 14)
    assert result.days == 108
    assert result.names == ("S1", "S2", "S3")
    assert result.horizon == 90 + 26 * 6 + 20
    diag = result.diagnostics
    assert (
        diag.first_producing_day,
        diag.three_producing_days,
        diag.not_two_after_start_days,
        diag.score,
        diag.is_perfect,
    ) == (6, 0, 12, 141, False)
    assert result.policy is RegimePolicy.TRANSITION_DEDUCTED
    assert result.solver == "brute-force"


def test_schedule_shape_and_counts(schedule_14x7):
    result = schedule_14x7
    assert len(result.states) == 3
    assert all(len(row) == result.days for row in result.states)
    assert len(result.p_count) == result.days
    for day, count in enumerate(result.p_count):
        assert count == sum(1 for row in result.states if row[day] is DayState.PRODUCING)
    assert result.two_producing_days == 90
    assert result.p_count[-1] == 2
    assert result.coverage_target_met


def test_units_are_empty_before_their_start(schedule_14x7):
    for start, row in zip(schedule_14x7.starts, schedule_14x7.states):
        assert all(state is DayState.EMPTY for state in row[:start])
        assert row[start] is DayState.STANDUP


def test_build_is_deterministic():
    params = {"W": 10, "R": 5, "I": 2, "totalCoverageDays": 40}
    assert build_schedule(params) == build_schedule(params)


def test_inputs_are_clamped():
    result = build_schedule({"W": 0, "R": -4, "I": 12, "totalCoverageDays": 0})
    assert result.params == RegimeParams(W=1, R=2, I=5, totalCoverageDays=1)
    assert all(len(row) == result.days for row in result.states)


def test_minimal_regime_reports_winddown_to_standup():
    result = build_schedule({"W": 1, "R": 2, "I": 5, "totalCoverageDays": 90})
    alerts = validate_schedule(result)
    assert "Invalid transition for S1 day 6->7: B-S" in alerts


def test_ten_by_five_avoids_triple_production():
    result = build_schedule({"W": 10, "R": 5, "I": 2, "totalCoverageDays": 90})
    assert result.diagnostics.three_producing_days == 0
    assert 3 not in result.p_count


def test_twenty_one_by_seven_builds():
    result = build_schedule({"W": 21, "R": 7, "I": 3, "totalCoverageDays": 90})
    assert result.days > 0
    assert result.starts[0] == 0


def test_full_rest_policy_has_no_invalid_transitions():
    result = build_schedule(RegimeParams(), policy="v1")
    assert result.policy is RegimePolicy.FULL_REST
    assert not [alert for alert in validate_schedule(result) if alert.startswith("Invalid")]


def test_staggered_solver_matches_default(schedule_14x7):
    result = build_schedule(RegimeParams(), solver="staggered")
    assert result.starts == schedule_14x7.starts
    assert result.solver == "staggered"


def test_cancelled_build_raises():
    token = CancelToken()
    token.cancel()
    with pytest.raises(SolveCancelledError):
        build_schedule(RegimeParams(), cancel_token=token)


def test_time_limit_marks_result():
    result = build_schedule(RegimeParams(), time_limit=1e-9)
    assert result.timed_out
    assert result.starts[1] == 0


@pytest.mark.parametrize(
    ("p_count", "target", "expected"),
    [
        ([0, 2, 2, 1, 2], 3, 5),
        ([2, 2, 2], 2, 2),
        ([1, 1, 2], 5, 3),
        ([], 1, 0),
    ],
)
def test_trim_length(p_count, target, expected):
    assert trim_length(p_count, target) == expected


def test_compute_horizon():
    assert compute_horizon(RegimeParams(W=10, R=5, I=2, totalCoverageDays=30)) == 30 + 17 * 6 + 20


def test_result_survives_dict_export(schedule_14x7):
    payload = schedule_14x7.to_dict()
    assert payload["params"] == {"W": 14, "R": 7, "I": 5, "totalCoverageDays": 90}
    assert payload["policy"] == "transition-deducted/v2"
    assert payload["states"][1][:8] == ["-"] * 7 + ["S"]
    assert ScheduleResult.from_dict(payload) == schedule_14x7


@pytest.mark.slow
def test_long_coverage_target():
    result = build_schedule({"W": 14, "R": 6, "I": 4, "totalCoverageDays": 950})
    assert result.days >= 950
    assert result.two_producing_days <= result.days


def test_minimal_regime_short_target_reports_residual_violations():
    result = build_schedule({"W": 1, "R": 2, "I": 5, "totalCoverageDays": 10})
    assert first_block_producing_days(1, 5) == 0
    assert result.days > 0
    assert not result.diagnostics.is_perfect
    assert result.diagnostics.not_two_after_start_days > 0
    assert validate_schedule(result)
