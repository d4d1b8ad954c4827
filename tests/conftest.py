from __future__ import annotations

import pytest

from quiz_core.types import Axis, Polarity, Question, Recommendation, RecommendationCondition


def build_xy_quiz() -> tuple[list[Axis], list[Question]]:
    """Two axes, four weight-1 questions with alternating polarity."""

    axes = [Axis("X", "Left-X", "Right-X"), Axis("Y", "Left-Y", "Right-Y")]
    questions = [
        Question(id="q1", axis_key="X", a_side=Polarity.LEFT_IS_A),
        Question(id="q2", axis_key="X", a_side=Polarity.RIGHT_IS_A),
        Question(id="q3", axis_key="Y", a_side=Polarity.LEFT_IS_A),
        Question(id="q4", axis_key="Y", a_side=Polarity.RIGHT_IS_A),
    ]
    return axes, questions


def rec(rid: str, *conds: tuple[str, int, str], priority: int = 0) -> Recommendation:
    return Recommendation(
        id=rid,
        title=f"Recommendation {rid}",
        priority=priority,
        conditions=tuple(RecommendationCondition(axis_key=k, threshold=th, operator=op) for k, th, op in conds),
    )


def build_record(status: str = "PUBLIC", creator_id: str = "user-1") -> dict:
    """A stored quiz record covering every result code."""

    return {
        "id": "quiz-1",
        "slug": "team-style",
        "title": "Team style",
        "description": "",
        "status": status,
        "creator_id": creator_id,
        "created_at": "2025-01-01T00:00:00+00:00",
        "updated_at": "2025-01-01T00:00:00+00:00",
        "axes": [
            {"key": "X", "left_label": "Solo", "right_label": "Team"},
            {"key": "Y", "left_label": "Planner", "right_label": "Improviser"},
        ],
        "questions": [
            {"id": "q1", "axis_key": "X", "a_side": True, "weight": 1, "text": "t1", "option_a": "a", "option_b": "b"},
            {"id": "q2", "axis_key": "X", "a_side": False, "weight": 1, "text": "t2", "option_a": "a", "option_b": "b"},
            {"id": "q3", "axis_key": "Y", "a_side": True, "weight": 1, "text": "t3", "option_a": "a", "option_b": "b"},
            {"id": "q4", "axis_key": "Y", "a_side": False, "weight": 1, "text": "t4", "option_a": "a", "option_b": "b"},
        ],
        "results": [
            {"code": code, "name": f"Type {code}", "tagline": "", "description": ""}
            for code in ("00", "01", "10", "11")
        ],
        "recommendations": [
            {"id": "always", "title": "Always", "priority": 0, "conditions": []},
            {"id": "solo", "title": "Solo", "priority": 5,
             "conditions": [{"axis_key": "X", "threshold": -50, "operator": "lte"}]},
            {"id": "team", "title": "Team", "priority": 1,
             "conditions": [{"axis_key": "X", "threshold": 50, "operator": "gte"}]},
        ],
        "share": {},
    }


@pytest.fixture
def xy_quiz() -> tuple[list[Axis], list[Question]]:
    return build_xy_quiz()
