from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Literal, Optional, Union

AnswerValue = Literal[-2, -1, 0, 1, 2]
Operator = Literal["gte", "lte", "eq"]
QuizStatus = Literal["DRAFT", "PUBLIC", "UNLISTED", "PRIVATE"]


class Polarity(str, Enum):
    """Which pole of the axis option A stands for."""
    LEFT_IS_A = "LEFT"
    RIGHT_IS_A = "RIGHT"


RawASide = Union[bool, str, Polarity]


def resolve_polarity(raw: RawASide) -> Polarity:
    # stored records carry a bool, the public payload carries "LEFT"/"RIGHT"
    if isinstance(raw, Polarity):
        return raw
    if isinstance(raw, str):
        return Polarity.LEFT_IS_A if raw == "LEFT" else Polarity.RIGHT_IS_A
    return Polarity.LEFT_IS_A if raw is True else Polarity.RIGHT_IS_A


@dataclass(frozen=True)
class Axis:
    key: str
    left_label: str = ""
    right_label: str = ""

@dataclass(frozen=True)
class Question:
    id: str; axis_key: str
    a_side: Polarity = Polarity.LEFT_IS_A
    weight: float = 1
    text: str = ""
    option_a: str = ""
    option_b: str = ""

@dataclass(frozen=True)
class AxisScore:
    key: str
    raw_score: float
    max_score: float
    normalized: float  # -1.0 .. 1.0, negative = LEFT

@dataclass(frozen=True)
class RecommendationCondition:
    axis_key: str
    threshold: int
    operator: Union[Operator, str] = "gte"  # anything else evaluates as gte

@dataclass(frozen=True)
class Recommendation:
    id: str; title: str
    description: Optional[str] = None
    url: Optional[str] = None
    priority: int = 0
    conditions: tuple[RecommendationCondition, ...] = ()

@dataclass(frozen=True)
class ResultType:
    code: str; name: str
    tagline: str = ""
    description: str = ""

@dataclass
class QuizDefinition:
    id: str
    slug: str
    title: str
    status: QuizStatus = "DRAFT"
    description: str = ""
    axes: List[Axis] = field(default_factory=list)
    questions: List[Question] = field(default_factory=list)
    results: List[ResultType] = field(default_factory=list)
    recommendations: List[Recommendation] = field(default_factory=list)
    share: Dict[str, Optional[str]] = field(default_factory=dict)
