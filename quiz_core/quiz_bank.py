from __future__ import annotations
import json, importlib.resources as ir
from pathlib import Path
from typing import Any, Dict, List

from .config import DEFAULT_WEIGHT
from .types import (
    Axis,
    Question,
    QuizDefinition,
    Recommendation,
    RecommendationCondition,
    ResultType,
    resolve_polarity,
)


def _get(d: Dict[str, Any], *names: str, default: Any = None) -> Any:
    # records come snake_case from storage and camelCase from the public payload
    for n in names:
        if n in d and d[n] is not None:
            return d[n]
    return default


def _priority(raw: Any) -> int:
    if isinstance(raw, str):
        return 1 if raw.upper() == "HIGH" else 0
    try:
        return int(raw or 0)
    except (TypeError, ValueError):
        return 0


def load_axis(r: Dict[str, Any]) -> Axis:
    return Axis(
        key=str(r["key"]),
        left_label=str(_get(r, "left_label", "leftLabel", default="")),
        right_label=str(_get(r, "right_label", "rightLabel", default="")),
    )


def load_question(r: Dict[str, Any]) -> Question:
    return Question(
        id=str(r["id"]),
        axis_key=str(_get(r, "axis_key", "axisKey", "axis", default="")),
        a_side=resolve_polarity(_get(r, "a_side", "aSide", default=True)),
        weight=_get(r, "weight", default=DEFAULT_WEIGHT) or DEFAULT_WEIGHT,
        text=str(_get(r, "text", default="")),
        option_a=str(_get(r, "option_a", "optionA", default="")),
        option_b=str(_get(r, "option_b", "optionB", default="")),
    )


def load_result_type(r: Dict[str, Any]) -> ResultType:
    return ResultType(
        code=str(r["code"]),
        name=str(_get(r, "name", default="")),
        tagline=str(_get(r, "tagline", default="")),
        description=str(_get(r, "description", "description_short", "descriptionShort", default="")),
    )


def load_recommendation(r: Dict[str, Any]) -> Recommendation:
    conds = tuple(
        RecommendationCondition(
            axis_key=str(_get(c, "axis_key", "axisKey", default="")),
            threshold=int(_get(c, "threshold", default=0)),
            operator=str(_get(c, "operator", default="gte")),
        )
        for c in (r.get("conditions") or [])
    )
    return Recommendation(
        id=str(r["id"]),
        title=str(_get(r, "title", default="")),
        description=_get(r, "description"),
        url=_get(r, "url"),
        priority=_priority(r.get("priority")),
        conditions=conds,
    )


def load_quiz(record: Dict[str, Any]) -> QuizDefinition:
    """Stored or transport record -> engine types. Axis order is preserved."""
    recs: List[Recommendation] = [load_recommendation(r) for r in record.get("recommendations") or []]
    # highest priority first; sorted() is stable for ties
    recs = sorted(recs, key=lambda r: r.priority, reverse=True)
    return QuizDefinition(
        id=str(record.get("id", "")),
        slug=str(record.get("slug", "")),
        title=str(record.get("title", "")),
        status=record.get("status", "DRAFT"),
        description=str(record.get("description") or ""),
        axes=[load_axis(a) for a in record.get("axes") or []],
        questions=[load_question(q) for q in record.get("questions") or []],
        results=[load_result_type(r) for r in _get(record, "results", "result_types", "resultTypes", default=[])],
        recommendations=recs,
        share=dict(record.get("share") or {}),
    )


def load_quiz_file(path: str | Path) -> QuizDefinition:
    raw = json.loads(Path(path).read_text(encoding="utf-8"))
    # accept both the bare record and the {"quiz": {...}} public payload
    if isinstance(raw, dict) and "quiz" in raw and isinstance(raw["quiz"], dict):
        raw = raw["quiz"]
    return load_quiz(raw)


def load_sample_quiz() -> QuizDefinition:
    data = ir.files(__package__).joinpath("data/sample_quiz.json").read_text(encoding="utf-8")
    return load_quiz(json.loads(data))
