from __future__ import annotations

import pytest

from crewrota.scheduling import states
from crewrota.scheduling.states import DayState, legend, state_color, state_label


def test_state_codes_match_grid_labels():
    assert [state.value for state in DayState] == ["-", "S", "I", "P", "B", "D"]


@pytest.mark.parametrize(
    ("state", "color"),
    [
        (DayState.EMPTY, "#ffffff"),
        (DayState.STANDUP, "#3b82f6"),
        (DayState.INDUCTION, "#f59e0b"),
        (DayState.PRODUCING, "#22c55e"),
        (DayState.WINDDOWN, "#ef4444"),
        (DayState.REST, "#9ca3af"),
    ],
)
def test_state_color_mapping(state, color):
    assert state_color(state) == color


def test_color_mapping_is_total_and_read_only():
    for state in DayState:
        assert state_color(state).startswith("#")
        assert state_label(state)
    assert {row[0] for row in legend()} == set(DayState)
    with pytest.raises(TypeError):
        states._COLORS[DayState.REST] = "#000000"  # type: ignore[index]


def test_from_code_accepts_labels_and_names():
    assert DayState.from_code("P") is DayState.PRODUCING
    assert DayState.from_code("winddown") is DayState.WINDDOWN
    with pytest.raises(KeyError):
        DayState.from_code("Z")
