from __future__ import annotations
from fastapi import FastAPI, HTTPException, Header, Response
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
import logging, uuid, os, typing as t

from quiz_core.config import (
    EVENT_FIELDS,
    PUBLIC_CACHE_CONTROL,
    REQUIRE_CATALOG_COVERAGE,
    REQUIRE_COMPLETE_ANSWERS,
    SLUG_LENGTH,
    STATS_EXPORT_ENABLED,
    UNLISTED_CACHE_CONTROL,
    VISIBLE_STATUSES,
)
from quiz_core.draft import (
    Draft,
    DraftBackendUnavailable,
    DraftGenerationError,
    apply_draft,
    backend_in_use,
    build_topic,
    generate_draft,
)
from quiz_core.quiz_bank import load_quiz
from quiz_core.results import lookup_result_type, pole_labels
from quiz_core.scoring import compute_axis_scores, compute_result_code, filter_recommendations, score_percent
from quiz_core.stats_export import rows_from_stats, to_csv as stats_to_csv, to_json as stats_to_json
from quiz_core.types import AnswerValue, Polarity, resolve_polarity
from quiz_core.validators import has_errors, validate_answers, validate_quiz
from .storage import (
    delete_quiz,
    find_quiz_by_slug,
    increment_stat,
    list_quizzes_for_user,
    load_quiz_record,
    load_stats,
    quiz_exists,
    save_quiz,
    slug_taken,
    update_quiz,
    utcnow_iso,
)

log = logging.getLogger(__name__)

app = FastAPI(title="Type Quiz API")


@app.get("/")
def root():
    return {"status": "ok", "service": "type-quiz-api"}


ALLOWED_ORIGINS = [o.strip() for o in os.getenv("ALLOWED_ORIGINS", "http://localhost:3000").split(",") if o.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
    allow_credentials=False,
)

# ---- Schemas ----
class CreateQuizReq(BaseModel):
    title: str | None = None
    topic: str | None = None       # legacy: single topic line
    selected_tags: list[str] = []
    primary_tag: str | None = None
    purpose: dict[str, t.Any] | None = None
    tone: dict[str, t.Any] | None = None
    target: dict[str, t.Any] | None = None

class BasicReq(BaseModel):
    title: str | None = Field(default=None, min_length=1)
    description: str | None = None
    slug: str | None = Field(default=None, min_length=1, pattern=r"^[A-Za-z0-9_-]+$")

class AxisIn(BaseModel):
    key: str = Field(min_length=1)
    left_label: str
    right_label: str

class QuestionIn(BaseModel):
    id: str | None = None
    text: str = Field(min_length=1)
    option_a: str = Field(min_length=1)
    option_b: str = Field(min_length=1)
    axis_key: str
    a_side: bool | str = True   # True / "LEFT": option A is the left pole
    weight: float = Field(default=1, gt=0)

class QuestionPatch(BaseModel):
    text: str | None = Field(default=None, min_length=1)
    option_a: str | None = Field(default=None, min_length=1)
    option_b: str | None = Field(default=None, min_length=1)

class ResultIn(BaseModel):
    code: str = Field(pattern=r"^[01]+$")
    name: str = Field(min_length=1)
    tagline: str = ""
    description: str = ""

class ResultPatch(BaseModel):
    name: str | None = Field(default=None, min_length=1)
    tagline: str | None = None
    description: str | None = None

class ConditionIn(BaseModel):
    axis_key: str
    threshold: int = Field(ge=-100, le=100)
    operator: str = "gte"

class RecommendationIn(BaseModel):
    id: str | None = None
    title: str = Field(min_length=1)
    description: str | None = None
    url: str | None = None
    priority: int = 0
    conditions: list[ConditionIn] = []

class StatusReq(BaseModel):
    status: t.Literal["DRAFT", "PUBLIC", "UNLISTED", "PRIVATE"]

class DraftReq(BaseModel):
    topic: str = Field(min_length=1)

class AnswersReq(BaseModel):
    answers: dict[str, AnswerValue]

class EventReq(BaseModel):
    quiz_id: str
    type: str

# ---- Helpers ----
def _require_user(x_user_id: str | None) -> str:
    if not x_user_id:
        raise HTTPException(401, "Unauthorized")
    return x_user_id


def _owned_quiz(quiz_id: str, user_id: str) -> dict[str, t.Any]:
    record = load_quiz_record(quiz_id)
    if not record or record.get("creator_id") != user_id:
        raise HTTPException(404, "Not Found or Unauthorized")
    return record


def _visible_quiz(slug: str) -> dict[str, t.Any]:
    record = find_quiz_by_slug(slug)
    if not record or record.get("status") not in VISIBLE_STATUSES:
        raise HTTPException(404, "Not Found")
    return record


def _edit(quiz_id: str, user_id: str, fn: t.Callable[[dict[str, t.Any]], t.Any]) -> dict[str, t.Any]:
    """Read-modify-write an owned quiz under the store lock; `fn` mutates or returns a replacement."""
    def apply(record: dict[str, t.Any]) -> dict[str, t.Any]:
        if record.get("creator_id") != user_id:
            raise HTTPException(404, "Not Found or Unauthorized")
        out = fn(record)
        if isinstance(out, dict):
            record = out
        record["updated_at"] = utcnow_iso()
        return record

    record = update_quiz(quiz_id, apply)
    if record is None:
        raise HTTPException(404, "Not Found or Unauthorized")
    return record


def _new_slug() -> str:
    while True:
        slug = uuid.uuid4().hex[:SLUG_LENGTH]
        if not slug_taken(slug):
            return slug


def _issues(record: dict[str, t.Any]) -> list[dict[str, str]]:
    return [i.__dict__ for i in validate_quiz(load_quiz(record))]


def _set_cache_headers(response: Response, status: str) -> None:
    if status == "PUBLIC":
        response.headers["Cache-Control"] = PUBLIC_CACHE_CONTROL
    elif status == "UNLISTED":
        response.headers["Cache-Control"] = UNLISTED_CACHE_CONTROL
        response.headers["X-Robots-Tag"] = "noindex, nofollow"


def _public_payload(record: dict[str, t.Any]) -> dict[str, t.Any]:
    quiz = load_quiz(record)
    return {
        "quiz": {
            "id": quiz.id,
            "slug": quiz.slug,
            "status": quiz.status,
            "title": quiz.title,
            "description": quiz.description,
            "designTemplate": record.get("theme") or "simple",
            "axes": [
                {"key": a.key, "leftLabel": a.left_label, "rightLabel": a.right_label}
                for a in quiz.axes
            ],
            "questions": [
                {
                    "id": q.id,
                    "text": q.text,
                    "optionA": q.option_a,
                    "optionB": q.option_b,
                    "axisKey": q.axis_key,
                    "aSide": q.a_side.value,
                    "weight": q.weight,
                }
                for q in quiz.questions
            ],
            "results": [
                {"code": r.code, "name": r.name, "tagline": r.tagline, "description": r.description}
                for r in quiz.results
            ],
            "recommendations": [_recommendation_payload(r) for r in quiz.recommendations],
            "share": {
                "selectedSubcopy": quiz.share.get("subcopy"),
                "selectedShareText": quiz.share.get("share_text"),
            },
        }
    }


def _recommendation_payload(rec) -> dict[str, t.Any]:
    return {
        "id": rec.id,
        "title": rec.title,
        "description": rec.description,
        "url": rec.url,
        "priority": "HIGH" if rec.priority > 0 else "NORMAL",
        "conditions": [
            {"axisKey": c.axis_key, "threshold": c.threshold, "operator": c.operator}
            for c in rec.conditions
        ],
    }


def _run_draft(quiz_id: str, topic: str) -> Draft:
    # the backend call runs outside the store lock
    try:
        return generate_draft(topic)
    except DraftBackendUnavailable as e:
        raise HTTPException(503, str(e))
    except DraftGenerationError as e:
        log.warning("draft generation failed for quiz %s: %s", quiz_id, e)
        raise HTTPException(502, "Failed to generate draft")

# ---- Health ----
@app.get("/health")
def health():
    return {
        "llm_backend": backend_in_use(),
        "stats_export": STATS_EXPORT_ENABLED,
    }

# ---- Creator endpoints ----
@app.post("/quizzes")
def create_quiz(req: CreateQuizReq, x_user_id: str | None = Header(None)):
    user_id = _require_user(x_user_id)
    if req.selected_tags and req.title:
        topic = build_topic(req.title, req.primary_tag, req.purpose, req.tone, req.target)
        title = req.title
    else:
        topic = req.topic or ""
        title = req.topic or req.title or "Untitled Quiz"

    now = utcnow_iso()
    record: dict[str, t.Any] = {
        "id": str(uuid.uuid4()),
        "slug": _new_slug(),
        "title": title,
        "description": "",
        "status": "DRAFT",
        "creator_id": user_id,
        "created_at": now,
        "updated_at": now,
        "axes": [],
        "questions": [],
        "results": [],
        "recommendations": [],
        "share": {},
    }
    save_quiz(record)

    # the shell is kept even when drafting fails; the creator can retry from the editor
    draft_error = None
    if topic:
        try:
            draft = _run_draft(record["id"], topic)
            record = _edit(record["id"], user_id, lambda rec: apply_draft(rec, draft))
        except HTTPException as e:
            draft_error = e.detail
    return {"id": record["id"], "slug": record["slug"], "drafted": bool(topic) and draft_error is None, "draft_error": draft_error}


@app.get("/users/{user_id}/quizzes")
def list_quizzes(user_id: str, x_user_id: str | None = Header(None)):
    if _require_user(x_user_id) != user_id:
        raise HTTPException(404, "Not Found or Unauthorized")
    return {"quizzes": list_quizzes_for_user(user_id)}


@app.get("/quizzes/{quiz_id}")
def get_quiz(quiz_id: str, x_user_id: str | None = Header(None)):
    record = _owned_quiz(quiz_id, _require_user(x_user_id))
    return {"quiz": record, "issues": _issues(record)}


@app.patch("/quizzes/{quiz_id}")
def update_basic(quiz_id: str, req: BasicReq, x_user_id: str | None = Header(None)):
    user_id = _require_user(x_user_id)

    def change(record):
        if req.slug is not None and req.slug != record.get("slug"):
            if slug_taken(req.slug, exclude_id=quiz_id):
                raise HTTPException(409, "slug already in use")
            record["slug"] = req.slug
        if req.title is not None:
            record["title"] = req.title
        if req.description is not None:
            record["description"] = req.description

    return {"quiz": _edit(quiz_id, user_id, change)}


@app.put("/quizzes/{quiz_id}/axes")
def replace_axes(quiz_id: str, axes: list[AxisIn], x_user_id: str | None = Header(None)):
    rows = [a.model_dump() for a in axes]
    record = _edit(quiz_id, _require_user(x_user_id), lambda rec: rec.update(axes=rows))
    return {"axes": record["axes"], "issues": _issues(record)}


@app.put("/quizzes/{quiz_id}/questions")
def replace_questions(quiz_id: str, questions: list[QuestionIn], x_user_id: str | None = Header(None)):
    stored = []
    for q in questions:
        row = q.model_dump()
        row["id"] = q.id or uuid.uuid4().hex
        row["a_side"] = resolve_polarity(q.a_side) is Polarity.LEFT_IS_A
        stored.append(row)
    record = _edit(quiz_id, _require_user(x_user_id), lambda rec: rec.update(questions=stored))
    return {"questions": record["questions"], "issues": _issues(record)}


def _patch_row(rows: list[dict[str, t.Any]], field: str, value: str, changes: dict[str, t.Any], what: str) -> dict[str, t.Any]:
    row = next((r for r in rows if r.get(field) == value), None)
    if row is None:
        raise HTTPException(404, f"{what} not found")
    row.update(changes)
    return row


@app.patch("/quizzes/{quiz_id}/questions/{question_id}")
def update_question(quiz_id: str, question_id: str, req: QuestionPatch, x_user_id: str | None = Header(None)):
    changes = req.model_dump(exclude_none=True)
    hit: dict[str, t.Any] = {}

    def change(record):
        hit["row"] = _patch_row(record.get("questions") or [], "id", question_id, changes, "question")

    _edit(quiz_id, _require_user(x_user_id), change)
    return {"question": hit["row"]}


@app.put("/quizzes/{quiz_id}/results")
def replace_results(quiz_id: str, results: list[ResultIn], x_user_id: str | None = Header(None)):
    user_id = _require_user(x_user_id)
    codes = [r.code for r in results]
    if len(set(codes)) != len(codes):
        raise HTTPException(422, "duplicate result codes")
    rows = [r.model_dump() for r in results]
    record = _edit(quiz_id, user_id, lambda rec: rec.update(results=rows))
    return {"results": record["results"], "issues": _issues(record)}


@app.patch("/quizzes/{quiz_id}/results/{code}")
def update_result(quiz_id: str, code: str, req: ResultPatch, x_user_id: str | None = Header(None)):
    changes = req.model_dump(exclude_none=True)
    hit: dict[str, t.Any] = {}

    def change(record):
        hit["row"] = _patch_row(record.get("results") or [], "code", code, changes, "result type")

    _edit(quiz_id, _require_user(x_user_id), change)
    return {"result": hit["row"]}


@app.put("/quizzes/{quiz_id}/recommendations")
def replace_recommendations(quiz_id: str, recs: list[RecommendationIn], x_user_id: str | None = Header(None)):
    stored = []
    for r in recs:
        row = r.model_dump()
        row["id"] = r.id or uuid.uuid4().hex
        stored.append(row)
    record = _edit(quiz_id, _require_user(x_user_id), lambda rec: rec.update(recommendations=stored))
    return {"recommendations": record["recommendations"], "issues": _issues(record)}


@app.post("/quizzes/{quiz_id}/publish")
def publish(quiz_id: str, req: StatusReq, x_user_id: str | None = Header(None)):
    def change(record):
        # validated against the locked copy
        if req.status in VISIBLE_STATUSES:
            issues = validate_quiz(load_quiz(record))
            if not REQUIRE_CATALOG_COVERAGE:
                issues = [i for i in issues if i.code != "result_missing"]
            if has_errors(issues):
                raise HTTPException(422, {"message": "quiz is not ready to publish", "issues": [i.__dict__ for i in issues]})
        record["status"] = req.status

    _edit(quiz_id, _require_user(x_user_id), change)
    log.info("quiz %s status -> %s", quiz_id, req.status)
    return {"success": True, "status": req.status}


@app.post("/quizzes/{quiz_id}/ai/generate-draft")
def generate_draft_endpoint(quiz_id: str, req: DraftReq, x_user_id: str | None = Header(None)):
    user_id = _require_user(x_user_id)
    _owned_quiz(quiz_id, user_id)
    draft = _run_draft(quiz_id, req.topic)
    record = _edit(quiz_id, user_id, lambda rec: apply_draft(rec, draft))
    return {"success": True, "quiz": record, "issues": _issues(record)}


@app.delete("/quizzes/{quiz_id}")
def delete_quiz_endpoint(quiz_id: str, x_user_id: str | None = Header(None)):
    _owned_quiz(quiz_id, _require_user(x_user_id))
    delete_quiz(quiz_id)
    return {"ok": True}


@app.get("/quizzes/{quiz_id}/stats")
def get_stats(quiz_id: str, x_user_id: str | None = Header(None)):
    if not STATS_EXPORT_ENABLED:
        raise HTTPException(404, "stats export disabled")
    _owned_quiz(quiz_id, _require_user(x_user_id))
    return {"quiz_id": quiz_id, **stats_to_json(rows_from_stats(load_stats(quiz_id)))}


@app.get("/quizzes/{quiz_id}/stats.csv")
def get_stats_csv(quiz_id: str, x_user_id: str | None = Header(None)):
    if not STATS_EXPORT_ENABLED:
        raise HTTPException(404, "stats export disabled")
    _owned_quiz(quiz_id, _require_user(x_user_id))
    body = stats_to_csv(rows_from_stats(load_stats(quiz_id)))
    return Response(
        content=body,
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename=\"{quiz_id}_stats.csv\""},
    )

# ---- Respondent endpoints ----
@app.get("/q/{slug}")
def public_quiz(slug: str, response: Response):
    record = _visible_quiz(slug)
    _set_cache_headers(response, record["status"])
    return _public_payload(record)


@app.post("/q/{slug}/result")
def score_quiz(slug: str, req: AnswersReq):
    record = _visible_quiz(slug)
    quiz = load_quiz(record)

    check = validate_answers(quiz.questions, req.answers)
    if check["unknown"]:
        raise HTTPException(422, {"message": "unknown question id(s)", "ids": check["unknown"]})
    if REQUIRE_COMPLETE_ANSWERS and check["unanswered"]:
        raise HTTPException(422, {"message": "unanswered question(s)", "ids": check["unanswered"]})

    scores = compute_axis_scores(quiz.questions, req.answers, quiz.axes)
    code = compute_result_code(scores, quiz.axes)
    result = lookup_result_type(quiz.results, code)
    if result is None:
        log.warning("quiz %s: no result type for code %s", quiz.id, code)
    recs = filter_recommendations(quiz.recommendations, scores)

    return {
        "code": code,
        "poles": pole_labels(quiz.axes, code),
        "result": result.__dict__ if result else None,
        "axis_scores": [
            {
                "key": a.key,
                "left_label": a.left_label,
                "right_label": a.right_label,
                "raw_score": scores[a.key].raw_score,
                "max_score": scores[a.key].max_score,
                "normalized": scores[a.key].normalized,
                "percent": score_percent(scores[a.key].normalized),
            }
            for a in quiz.axes
        ],
        "recommendations": [_recommendation_payload(r) for r in recs],
    }


@app.post("/events")
def track_event(req: EventReq):
    field = EVENT_FIELDS.get(req.type)
    if field is None:
        raise HTTPException(422, "Invalid type")
    if not quiz_exists(req.quiz_id):
        raise HTTPException(404, "quiz not found")
    counters = increment_stat(req.quiz_id, field)
    return {"success": True, "counters": counters}
