from __future__ import annotations

import pytest

from quiz_core.quiz_bank import load_sample_quiz
from quiz_core.results import lookup_result_type
from quiz_core.scoring import compute_axis_scores, compute_result_code, filter_recommendations


# q1: X, A=LEFT   q2: X, A=RIGHT   q3: Y, A=LEFT   q4: Y, A=RIGHT   (all weight 1)
PINNED = [
    ({"q1": -2, "q2": 1, "q3": 1, "q4": -1}, -0.75, 0.5, "01"),
    ({"q1": 2, "q2": -2, "q3": -2, "q4": 2}, 1.0, -1.0, "10"),
    ({"q1": 0, "q2": 0, "q3": 0, "q4": 0}, 0.0, 0.0, "11"),
    ({"q1": -1, "q2": 2, "q3": -1, "q4": 1}, -0.75, -0.5, "00"),
    ({"q1": 1, "q2": 1, "q3": 2, "q4": -2}, 0.0, 1.0, "11"),
]


@pytest.mark.parametrize("answers, x, y, code", PINNED)
def test_pinned_table(xy_quiz, answers, x, y, code):
    axes, questions = xy_quiz
    scores = compute_axis_scores(questions, answers, axes)
    assert scores["X"].normalized == pytest.approx(x)
    assert scores["Y"].normalized == pytest.approx(y)
    assert compute_result_code(scores, axes) == code


def test_sample_quiz_round():
    quiz = load_sample_quiz()
    # SOCIAL: q1 A=L w1, q2 A=R w1, q3 A=L w2; PACE: q4 A=L, q5 A=R, q6 A=L
    answers = {"q1": -2, "q2": 2, "q3": -1, "q4": -2, "q5": 1, "q6": 0}
    scores = compute_axis_scores(quiz.questions, answers, quiz.axes)
    # SOCIAL raw = -2 - 2 - 2 = -6 over 2+2+4 = 8
    assert scores["SOCIAL"].normalized == pytest.approx(-0.75)
    # PACE raw = -2 - 1 + 0 = -3 over 6
    assert scores["PACE"].normalized == pytest.approx(-0.5)

    code = compute_result_code(scores, quiz.axes)
    assert code == "00"
    assert lookup_result_type(quiz.results, code).name == "The Architect"

    recs = filter_recommendations(quiz.recommendations, scores)
    assert [r.id for r in recs] == ["r1", "r3", "r4"]
