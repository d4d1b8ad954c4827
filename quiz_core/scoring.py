from __future__ import annotations
import math
from typing import Dict, Iterable, List, Mapping, Sequence

from .config import DEFAULT_WEIGHT
from .types import Axis, AxisScore, Polarity, Question, Recommendation, RecommendationCondition, resolve_polarity


def _direction(question: Question) -> int:
    """
    Answer scale is -2 (strongly A) .. +2 (strongly B).
      A is LEFT:  -2 * +1 -> negative (LEFT side), +2 -> positive (RIGHT side)
      A is RIGHT: -2 * -1 -> positive (RIGHT side, where A sits)
    normalized < 0 therefore always means LEFT, >= 0 always RIGHT.
    """
    return 1 if resolve_polarity(question.a_side) is Polarity.LEFT_IS_A else -1


def compute_axis_scores(
    questions: Iterable[Question],
    answers: Mapping[str, int],
    axes: Sequence[Axis],
) -> Dict[str, AxisScore]:
    """
    Per-axis weighted score. Unanswered questions contribute nothing and
    questions whose axis_key is not among `axes` are dropped.
    Every axis in `axes` is present in the output.
    """
    raw: Dict[str, float] = {a.key: 0 for a in axes}
    mx: Dict[str, float] = {a.key: 0 for a in axes}

    for q in questions:
        value = answers.get(q.id)
        if value is None:
            continue
        if q.axis_key not in raw:
            continue
        weight = q.weight or DEFAULT_WEIGHT
        raw[q.axis_key] += value * weight * _direction(q)
        mx[q.axis_key] += 2 * weight

    out: Dict[str, AxisScore] = {}
    for key in raw:
        normalized = raw[key] / mx[key] if mx[key] > 0 else 0
        out[key] = AxisScore(key=key, raw_score=raw[key], max_score=mx[key], normalized=normalized)
    return out


def compute_result_code(axis_scores: Mapping[str, AxisScore], axes: Sequence[Axis]) -> str:
    """One digit per axis in the given order: "0" if normalized < 0 (LEFT), else "1"."""
    digits: List[str] = []
    for axis in axes:
        score = axis_scores.get(axis.key)
        normalized = score.normalized if score is not None else 0
        digits.append("0" if normalized < 0 else "1")
    return "".join(digits)


def score_percent(normalized: float) -> int:
    """normalized * 100 rounded half away from zero (12.5 -> 13, -12.5 -> -13)."""
    pct = normalized * 100
    return int(math.copysign(math.floor(abs(pct) + 0.5), pct))


def _condition_holds(cond: RecommendationCondition, axis_scores: Mapping[str, AxisScore]) -> bool:
    score = axis_scores.get(cond.axis_key)
    pct = score_percent(score.normalized if score is not None else 0)
    op = cond.operator
    if op == "lte":
        return pct <= cond.threshold
    if op == "eq":
        return pct == cond.threshold
    # "gte" and anything unrecognised
    return pct >= cond.threshold


def filter_recommendations(
    recommendations: Sequence[Recommendation],
    axis_scores: Mapping[str, AxisScore],
) -> List[Recommendation]:
    """Keeps input order; priority sorting is the caller's job."""
    kept: List[Recommendation] = []
    for rec in recommendations:
        conditions = rec.conditions or ()
        if all(_condition_holds(c, axis_scores) for c in conditions):
            kept.append(rec)
    return kept


__all__ = ["compute_axis_scores", "compute_result_code", "filter_recommendations", "score_percent"]
