from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Dict, List, Literal, Mapping, Sequence

from .config import ANSWER_VALUES, AXES_MAX, AXES_MIN, OPERATORS, THRESHOLD_MAX, THRESHOLD_MIN
from .results import missing_result_codes
from .types import Question, QuizDefinition

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Issue:
    level: Literal["error", "warning"]
    code: str
    message: str


def _axis_issues(quiz: QuizDefinition) -> List[Issue]:
    out: List[Issue] = []
    n = len(quiz.axes)
    if n < AXES_MIN or n > AXES_MAX:
        out.append(Issue("error", "axis_count", f"quiz needs {AXES_MIN}-{AXES_MAX} axes, has {n}"))
    seen: set[str] = set()
    for a in quiz.axes:
        if a.key in seen:
            out.append(Issue("error", "axis_duplicate", f"axis key '{a.key}' is defined twice"))
        seen.add(a.key)
    return out


def _question_issues(quiz: QuizDefinition) -> List[Issue]:
    out: List[Issue] = []
    keys = {a.key for a in quiz.axes}
    if not quiz.questions:
        out.append(Issue("error", "no_questions", "quiz has no questions"))
    for q in quiz.questions:
        if q.axis_key not in keys:
            out.append(Issue("error", "question_axis", f"question {q.id} references unknown axis '{q.axis_key}'"))
        if q.weight <= 0:
            out.append(Issue("error", "question_weight", f"question {q.id} has non-positive weight {q.weight}"))
    covered = {q.axis_key for q in quiz.questions}
    for a in quiz.axes:
        if a.key not in covered:
            out.append(Issue("warning", "axis_unused", f"axis '{a.key}' has no questions"))
    return out


def _recommendation_issues(quiz: QuizDefinition) -> List[Issue]:
    out: List[Issue] = []
    keys = {a.key for a in quiz.axes}
    for rec in quiz.recommendations:
        for c in rec.conditions:
            if c.axis_key not in keys:
                out.append(Issue("error", "condition_axis", f"recommendation {rec.id} references unknown axis '{c.axis_key}'"))
            if not THRESHOLD_MIN <= c.threshold <= THRESHOLD_MAX:
                out.append(Issue("error", "condition_threshold", f"recommendation {rec.id} threshold {c.threshold} outside {THRESHOLD_MIN}..{THRESHOLD_MAX}"))
            if c.operator not in OPERATORS:
                out.append(Issue("warning", "condition_operator", f"recommendation {rec.id} operator '{c.operator}' is evaluated as 'gte'"))
    return out


def _catalog_issues(quiz: QuizDefinition) -> List[Issue]:
    if not AXES_MIN <= len(quiz.axes) <= AXES_MAX:
        return []
    missing = missing_result_codes(quiz.axes, quiz.results)
    if not missing:
        return []
    return [Issue("error", "result_missing", f"no result type for code(s): {', '.join(missing)}")]


def validate_quiz(quiz: QuizDefinition) -> List[Issue]:
    issues = _axis_issues(quiz) + _question_issues(quiz) + _recommendation_issues(quiz) + _catalog_issues(quiz)
    if issues:
        log.debug("quiz %s: %d validation issue(s)", quiz.id, len(issues))
    return issues


def has_errors(issues: Sequence[Issue]) -> bool:
    return any(i.level == "error" for i in issues)


def validate_answers(questions: Sequence[Question], answers: Mapping[str, int]) -> Dict[str, List[str]]:
    """
    {"unknown": [...], "invalid": [...], "unanswered": [...]} of question ids.
    The scorer itself tolerates all three; the delivery layer decides.
    """
    ids = {q.id for q in questions}
    unknown = [qid for qid in answers if qid not in ids]
    invalid = [qid for qid, v in answers.items() if qid in ids and v not in ANSWER_VALUES]
    unanswered = [q.id for q in questions if q.id not in answers]
    return {"unknown": unknown, "invalid": invalid, "unanswered": unanswered}
