# quiz_core/results.py
from __future__ import annotations
import itertools
from typing import Iterable, List, Optional, Sequence

from .types import Axis, ResultType


def lookup_result_type(catalog: Iterable[ResultType], code: str) -> Optional[ResultType]:
    # exact match only; a miss means the catalog failed coverage validation
    for rt in catalog:
        if rt.code == code:
            return rt
    return None


def all_result_codes(axes: Sequence[Axis]) -> List[str]:
    return ["".join(bits) for bits in itertools.product("01", repeat=len(axes))]


def missing_result_codes(axes: Sequence[Axis], catalog: Iterable[ResultType]) -> List[str]:
    have = {rt.code for rt in catalog}
    return [code for code in all_result_codes(axes) if code not in have]


def pole_labels(axes: Sequence[Axis], code: str) -> List[str]:
    """Human-readable pole per digit, e.g. ["Introvert", "Planner"]."""
    out: List[str] = []
    for axis, digit in zip(axes, code):
        out.append(axis.left_label if digit == "0" else axis.right_label)
    return out
