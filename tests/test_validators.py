from __future__ import annotations

from quiz_core.quiz_bank import load_quiz, load_sample_quiz
from quiz_core.results import all_result_codes, missing_result_codes, pole_labels
from quiz_core.types import Axis
from quiz_core.validators import has_errors, validate_answers, validate_quiz

from tests.conftest import build_record


def _codes(issues):
    return {i.code for i in issues}


def test_complete_record_has_no_errors():
    assert not has_errors(validate_quiz(load_quiz(build_record())))
    assert validate_quiz(load_sample_quiz()) == []


def test_axis_count_bounds():
    record = build_record()
    record["axes"] = record["axes"][:1]
    issues = validate_quiz(load_quiz(record))
    assert "axis_count" in _codes(issues)
    assert "question_axis" in _codes(issues)


def test_catalog_must_cover_every_code():
    record = build_record()
    record["results"] = [r for r in record["results"] if r["code"] != "10"]
    issues = validate_quiz(load_quiz(record))
    assert "result_missing" in _codes(issues)
    assert has_errors(issues)


def test_unknown_operator_is_only_a_warning():
    record = build_record()
    record["recommendations"][1]["conditions"][0]["operator"] = "bogus"
    issues = validate_quiz(load_quiz(record))
    assert [i.level for i in issues if i.code == "condition_operator"] == ["warning"]
    assert not has_errors(issues)


def test_condition_threshold_and_axis():
    record = build_record()
    record["recommendations"][1]["conditions"] = [{"axis_key": "Z", "threshold": 150, "operator": "gte"}]
    assert {"condition_axis", "condition_threshold"} <= _codes(validate_quiz(load_quiz(record)))


def test_result_codes_enumeration():
    axes = [Axis("A", "a0", "a1"), Axis("B", "b0", "b1"), Axis("C", "c0", "c1")]
    codes = all_result_codes(axes)
    assert len(codes) == 8
    assert codes[0] == "000" and codes[-1] == "111"
    assert missing_result_codes(axes[:2], []) == ["00", "01", "10", "11"]
    assert pole_labels(axes, "010") == ["a0", "b1", "c0"]


def test_validate_answers_reports_each_problem():
    quiz = load_quiz(build_record())
    out = validate_answers(quiz.questions, {"q1": 2, "q2": 5, "zz": 0})
    assert out["unknown"] == ["zz"]
    assert out["invalid"] == ["q2"]
    assert out["unanswered"] == ["q3", "q4"]
