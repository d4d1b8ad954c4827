"""AI-assisted quiz drafting.

A topic is turned into a prompt, sent to the configured chat-completion
backend, and the reply is validated into a `Draft` before anything is
written to a quiz record.
"""
from __future__ import annotations

import json
import logging
import os
import re
import time
import uuid
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .azure_cfg import client as azure_client, is_configured, settings as azure_settings
from .config import (
    AXES_MAX,
    AXES_MIN,
    DEFAULT_WEIGHT,
    DRAFT_AXIS_COUNT,
    DRAFT_MAX_TOKENS,
    DRAFT_MIN_QUESTIONS,
    DRAFT_QUESTION_COUNT,
    DRAFT_RESULT_COUNT,
    DRAFT_TEMPERATURE,
    get_backend,
    load_config,
)

log = logging.getLogger(__name__)

_FENCE_RX = re.compile(r"^```(?:json)?\s*|\s*```$")


class DraftGenerationError(RuntimeError):
    pass


class DraftBackendUnavailable(DraftGenerationError):
    pass


class _DraftModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class DraftAxis(_DraftModel):
    key: str
    left_label: str = Field(alias="leftLabel")
    right_label: str = Field(alias="rightLabel")


class DraftResult(_DraftModel):
    code: str
    name: str
    description: str


class DraftQuestion(_DraftModel):
    text: str
    option_a: str = Field(alias="optionA")
    option_b: str = Field(alias="optionB")
    axis: str
    weight: Optional[float] = None
    a_side: Optional[bool] = Field(default=None, alias="aSide")


class Draft(_DraftModel):
    title: str
    description: str
    axes: List[DraftAxis] = Field(min_length=AXES_MIN, max_length=AXES_MAX)
    results: List[DraftResult]
    questions: List[DraftQuestion] = Field(min_length=DRAFT_MIN_QUESTIONS)


def build_topic(
    title: str,
    primary_tag: Optional[str] = None,
    purpose: Optional[Dict[str, Any]] = None,
    tone: Optional[Dict[str, Any]] = None,
    target: Optional[Dict[str, Any]] = None,
) -> str:
    """Fold the creation-form context into a single topic line for the prompt."""
    parts = [title]
    if primary_tag:
        parts.append(f" (category: {primary_tag})")
    purpose = purpose or {}
    if purpose.get("selected"):
        note = f" ({purpose['note']})" if purpose.get("note") else ""
        parts.append(f"\nPurpose: {', '.join(purpose['selected'])}{note}")
    tone = tone or {}
    if tone.get("design") or tone.get("writing"):
        line = "\nTone:"
        if tone.get("design"): line += f" design={tone['design']}"
        if tone.get("writing"): line += f" writing={tone['writing']}"
        parts.append(line)
    target = target or {}
    if target.get("tags"):
        note = f" ({target['note']})" if target.get("note") else ""
        parts.append(f"\nAudience: {', '.join(target['tags'])}{note}")
    return "".join(parts)


def build_prompt(topic: str) -> str:
    return (
        f'Create a diagnostic quiz about "{topic}".\n'
        "Return a JSON structure with:\n"
        '1. "title": string\n'
        '2. "description": string\n'
        f'3. "axes": array of {DRAFT_AXIS_COUNT} objects with {{ "key", "leftLabel", "rightLabel" }}\n'
        f'4. "results": array of {DRAFT_RESULT_COUNT} objects with {{ "code", "name", "description" }}\n'
        f'5. "questions": array of {DRAFT_QUESTION_COUNT} objects with '
        '{ "text", "optionA", "optionB", "axis", "weight" (1), "aSide" (true/false) }\n'
        "Ensure all keys are present.\n"
        'CRITICAL: the "axis" field of each question MUST EXACTLY match one of the "key" values in "axes".\n'
        'CRITICAL: "aSide": true means optionA corresponds to the axis "leftLabel"; false means "rightLabel".\n'
        'Result "code" is one digit per axis in axis order: "0" for the left pole, "1" for the right pole.\n'
        "Output strictly valid JSON matching this structure. No markdown code blocks."
    )


def extract_json(text: str) -> Dict[str, Any]:
    t = (text or "").strip()
    first, last = t.find("{"), t.rfind("}")
    if first != -1 and last != -1:
        t = t[first:last + 1]
    else:
        t = _FENCE_RX.sub("", t)
    try:
        data = json.loads(t)
    except json.JSONDecodeError as e:
        raise DraftGenerationError(f"reply is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise DraftGenerationError("reply JSON is not an object")
    return data


def backend_in_use() -> str:
    if get_backend(load_config()) == "azure" and is_configured():
        return "azure"
    return "none"


def _complete(prompt: str) -> str:
    s = azure_settings(); cli = azure_client()
    resp = cli.chat.completions.create(
        model=s.deployment,
        messages=[
            {"role": "system", "content": "You are a professional JSON generator."},
            {"role": "user", "content": prompt},
        ],
        temperature=DRAFT_TEMPERATURE,
        max_tokens=DRAFT_MAX_TOKENS,
        response_format={"type": "json_object"},
    )
    return resp.choices[0].message.content or ""


def _log_call(topic: str, raw: str, ok: bool, t0: float) -> None:
    path = os.getenv("LLM_DRAFT_LOG")
    if not path:
        return
    entry = {
        "ts": round(time.time(), 3),
        "topic": topic[:400],
        "raw": raw[:4000],
        "ok": ok,
        "rt_ms": int((time.time() - t0) * 1000),
    }
    try:
        with open(path, "a", encoding="utf-8") as f:
            f.write(json.dumps(entry, ensure_ascii=False) + "\n")
    except OSError as e:
        log.debug("draft log write failed: %s", e)


def generate_draft(topic: str) -> Draft:
    if backend_in_use() == "none":
        raise DraftBackendUnavailable("no LLM backend configured for draft generation")
    t0 = time.time()
    raw = ""
    try:
        raw = _complete(build_prompt(topic))
        draft = Draft.model_validate(extract_json(raw))
    except ValidationError as e:
        _log_call(topic, raw, False, t0)
        raise DraftGenerationError(f"draft failed validation: {e.error_count()} error(s)") from e
    except DraftGenerationError:
        _log_call(topic, raw, False, t0)
        raise
    except Exception as e:
        _log_call(topic, raw, False, t0)
        log.exception("draft backend call failed")
        raise DraftGenerationError("failed to generate draft") from e
    _log_call(topic, raw, True, t0)
    log.info("draft generated: %d axes, %d questions, %d results",
             len(draft.axes), len(draft.questions), len(draft.results))
    return draft


def apply_draft(record: Dict[str, Any], draft: Draft) -> Dict[str, Any]:
    """Return a copy of `record` whose content sections are replaced by the draft."""
    out = dict(record)
    out["title"] = draft.title
    out["description"] = draft.description
    out["axes"] = [
        {"key": a.key, "left_label": a.left_label, "right_label": a.right_label}
        for a in draft.axes
    ]
    out["results"] = [
        {"code": r.code, "name": r.name, "tagline": "", "description": r.description}
        for r in draft.results
    ]
    out["questions"] = [
        {
            "id": uuid.uuid4().hex,
            "text": q.text,
            "option_a": q.option_a,
            "option_b": q.option_b,
            "axis_key": q.axis,
            "a_side": True if q.a_side is None else q.a_side,
            "weight": q.weight or DEFAULT_WEIGHT,
        }
        for q in draft.questions
    ]
    return out
