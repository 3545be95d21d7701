from __future__ import annotations

import math

import pytest
from pydantic import ValidationError

from crewrota.core.errors import UnknownPolicyError
from crewrota.scheduling.regime import (
    DEFAULT_POLICY,
    RegimeParams,
    RegimePolicy,
    clamp_int,
    resolve_policy,
)


@pytest.mark.parametrize(
    ("value", "lower", "upper", "expected"),
    [
        (14, 1, None, 14),
        (0, 1, None, 1),
        (-3, 2, None, 2),
        (7.9, 1, None, 7),
        ("12", 1, None, 12),
        ("abc", 1, None, 1),
        (None, 2, None, 2),
        (math.nan, 1, 5, 1),
        (math.inf, 1, 5000, 1),
        (-math.inf, 1, 5000, 1),
        (9, 1, 5, 5),
        (10_000, 1, 5000, 5000),
    ],
)
def test_clamp_int(value, lower, upper, expected):
    assert clamp_int(value, lower, upper) == expected


def test_regime_aliases_and_field_names_are_equivalent():
    by_alias = RegimeParams(W=14, R=7, I=5, totalCoverageDays=90)
    by_name = RegimeParams(work_days=14, rest_days=7, induction_days=5, coverage_days=90)
    assert by_alias == by_name
    assert by_alias.model_dump(by_alias=True) == {"W": 14, "R": 7, "I": 5, "totalCoverageDays": 90}


def test_regime_clamps_out_of_range_inputs():
    params = RegimeParams.coerce({"W": 0, "R": 1, "I": 9, "totalCoverageDays": 99_999})
    assert params.work_days == 1
    assert params.rest_days == 2
    assert params.induction_days == 5
    assert params.coverage_days == 5000


def test_regime_clamps_non_finite_and_non_numeric_inputs():
    params = RegimeParams.coerce({"W": math.nan, "R": "x", "I": None, "totalCoverageDays": math.inf})
    assert (params.work_days, params.rest_days, params.induction_days, params.coverage_days) == (
        1,
        2,
        1,
        1,
    )


def test_regime_is_immutable():
    params = RegimeParams()
    with pytest.raises(ValidationError):
        params.work_days = 3  # type: ignore[misc]


def test_coerce_defaults_and_identity():
    params = RegimeParams.coerce(None)
    assert params.short_label() == "14x7 I5 T90"
    assert RegimeParams.coerce(params) is params
    assert params.cycle_span == 26


def test_resolve_policy_aliases():
    assert resolve_policy(None) is DEFAULT_POLICY
    assert resolve_policy("v1") is RegimePolicy.FULL_REST
    assert resolve_policy("transition-deducted/v2") is RegimePolicy.TRANSITION_DEDUCTED
    assert resolve_policy(RegimePolicy.FULL_REST) is RegimePolicy.FULL_REST
    with pytest.raises(UnknownPolicyError):
        resolve_policy("v3")


def test_clamp_int_handles_huge_integers():
    assert clamp_int(10**400, 1, 5000) == 5000
    assert clamp_int(-(10**400), 2) == 2
    assert clamp_int(10**400, 1) == 10**400


def test_regime_clamps_huge_integers():
    assert RegimeParams(W=14, R=7, I=5, totalCoverageDays=10**400).coverage_days == 5000
    assert RegimeParams(W=14, R=7, I=10**400, totalCoverageDays=90).induction_days == 5
