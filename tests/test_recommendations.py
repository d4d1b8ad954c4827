from __future__ import annotations

import typing

import pytest

from quiz_core.config import OPERATORS
from quiz_core.scoring import filter_recommendations, score_percent
from quiz_core.types import AxisScore, Operator

from tests.conftest import rec


def _scores(**normalized: float) -> dict[str, AxisScore]:
    return {k: AxisScore(key=k, raw_score=0, max_score=0, normalized=v) for k, v in normalized.items()}


def test_empty_conditions_always_pass():
    r = rec("open")
    for scores in (_scores(), _scores(A=-1.0), _scores(A=1.0)):
        assert filter_recommendations([r], scores) == [r]


@pytest.mark.parametrize(
    "op, threshold, normalized, expected",
    [
        ("gte", 50, 0.5, True),
        ("gte", 50, 0.49, False),
        ("lte", -20, -0.2, True),
        ("lte", -20, -0.1, False),
        ("eq", 25, 0.25, True),
        ("eq", 25, 0.26, False),
    ],
)
def test_operators(op, threshold, normalized, expected):
    r = rec("r", ("A", threshold, op))
    assert (filter_recommendations([r], _scores(A=normalized)) == [r]) is expected


def test_all_conditions_must_hold():
    r = rec("both", ("A", 50, "gte"), ("B", 0, "lte"))
    assert filter_recommendations([r], _scores(A=0.75, B=-0.25)) == [r]
    assert filter_recommendations([r], _scores(A=0.75, B=0.25)) == []


@pytest.mark.parametrize("normalized", [-1.0, 0.0, 0.49, 0.5, 0.75, 1.0])
def test_unknown_operator_behaves_like_gte(normalized):
    bogus = rec("bogus", ("A", 50, "bogus"))
    gte = rec("gte", ("A", 50, "gte"))
    scores = _scores(A=normalized)
    assert bool(filter_recommendations([bogus], scores)) == bool(filter_recommendations([gte], scores))


def test_missing_axis_is_treated_as_zero():
    at_zero = rec("z", ("GONE", 0, "eq"))
    above = rec("p", ("GONE", 1, "gte"))
    assert filter_recommendations([at_zero, above], _scores(A=0.9)) == [at_zero]


def test_input_order_is_preserved_not_priority():
    low = rec("low", priority=0)
    high = rec("high", priority=9)
    assert filter_recommendations([low, high], _scores()) == [low, high]


def test_score_percent_rounds_half_away_from_zero():
    assert score_percent(0.125) == 13
    assert score_percent(-0.125) == -13
    assert score_percent(0.3) == 30
    assert score_percent(-0.004) == 0
    assert score_percent(1.0) == 100


def test_eq_uses_rounded_percent():
    # -1/8 -> -12.5% -> -13
    r = rec("r", ("A", -13, "eq"))
    assert filter_recommendations([r], _scores(A=-0.125)) == [r]


def test_operator_alias_lists_the_known_operators():
    assert typing.get_args(Operator) == OPERATORS
