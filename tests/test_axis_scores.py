from __future__ import annotations

import pytest

from quiz_core.scoring import compute_axis_scores
from quiz_core.types import Axis, Polarity, Question


AXES = [Axis("A", "Left", "Right")]


def _one(a_side, value, weight=1):
    q = Question(id="q", axis_key="A", a_side=a_side, weight=weight)
    return compute_axis_scores([q], {"q": value}, AXES)["A"]


@pytest.mark.parametrize("a_side", [Polarity.LEFT_IS_A, "LEFT", True])
def test_a_left_strongly_a_is_fully_left(a_side):
    assert _one(a_side, -2).normalized == -1.0
    assert _one(a_side, 2).normalized == 1.0


@pytest.mark.parametrize("a_side", [Polarity.RIGHT_IS_A, "RIGHT", False])
def test_a_right_inverts_sign(a_side):
    assert _one(a_side, -2).normalized == 1.0
    assert _one(a_side, 2).normalized == -1.0


def test_neutral_answer_contributes_nothing():
    for a_side in (True, False):
        score = _one(a_side, 0, weight=3)
        assert score.raw_score == 0
        assert score.max_score == 6
        assert score.normalized == 0


def test_axis_without_answers_is_zero_not_nan():
    axes = [Axis("A"), Axis("B")]
    q = Question(id="q", axis_key="A")
    scores = compute_axis_scores([q], {"q": 1}, axes)
    assert set(scores) == {"A", "B"}
    assert scores["B"].max_score == 0
    assert scores["B"].normalized == 0


def test_weight_scales_raw_and_max_together():
    single = _one(True, -1, weight=1)
    double = _one(True, -1, weight=2)
    assert double.raw_score == 2 * single.raw_score
    assert double.max_score == 2 * single.max_score
    assert double.normalized == single.normalized == -0.5


def test_missing_weight_defaults_to_one():
    score = _one(True, 2, weight=0)
    assert score.raw_score == 2
    assert score.max_score == 2
    assert score.normalized == 1.0


def test_unanswered_questions_are_skipped(xy_quiz):
    axes, questions = xy_quiz
    scores = compute_axis_scores(questions, {"q1": -2}, axes)
    assert scores["X"].raw_score == -2
    assert scores["X"].max_score == 2
    assert scores["X"].normalized == -1.0
    assert scores["Y"].normalized == 0


def test_unknown_axis_key_is_dropped():
    q_ok = Question(id="q1", axis_key="A")
    q_bad = Question(id="q2", axis_key="NOPE")
    scores = compute_axis_scores([q_ok, q_bad], {"q1": 1, "q2": 2}, AXES)
    assert list(scores) == ["A"]
    assert scores["A"].raw_score == 1
    assert scores["A"].max_score == 2


def test_question_order_is_irrelevant(xy_quiz):
    axes, questions = xy_quiz
    answers = {"q1": -1, "q2": 2, "q3": 0, "q4": -2}
    forward = compute_axis_scores(questions, answers, axes)
    backward = compute_axis_scores(list(reversed(questions)), answers, axes)
    assert forward == backward


def test_inputs_are_not_mutated(xy_quiz):
    axes, questions = xy_quiz
    answers = {"q1": 2, "q3": -1}
    before = (list(axes), list(questions), dict(answers))
    compute_axis_scores(questions, answers, axes)
    assert (axes, questions, answers) == before
