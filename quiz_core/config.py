from __future__ import annotations
import os, json, pathlib


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw.strip())
    except ValueError:
        return default


ANSWER_MIN: int = -2
ANSWER_MAX: int = 2
ANSWER_VALUES: tuple[int, ...] = tuple(range(ANSWER_MIN, ANSWER_MAX + 1))
DEFAULT_WEIGHT: float = 1

AXES_MIN: int = 2
AXES_MAX: int = 4

THRESHOLD_MIN: int = -100
THRESHOLD_MAX: int = 100
OPERATORS: tuple[str, ...] = ("gte", "lte", "eq")

VISIBLE_STATUSES: tuple[str, ...] = ("PUBLIC", "UNLISTED")
SLUG_LENGTH: int = 10

PUBLIC_CACHE_CONTROL: str = "public, s-maxage=60, stale-while-revalidate=300"
UNLISTED_CACHE_CONTROL: str = "private, no-store"

# event type -> daily counter field
EVENT_FIELDS: dict[str, str] = {
    "view": "views",
    "start": "starts",
    "complete": "completes",
    "share_copy": "share_copy",
    "promo_generate": "promo_generate",
    "reco_click": "reco_click",
}

DRAFT_AXIS_COUNT: int = 4
DRAFT_RESULT_COUNT: int = 8
DRAFT_QUESTION_COUNT: int = 10
DRAFT_MIN_QUESTIONS: int = 5
DRAFT_TEMPERATURE: float = 0.7
DRAFT_MAX_TOKENS: int = 4000

REQUIRE_COMPLETE_ANSWERS: bool = True
REQUIRE_CATALOG_COVERAGE: bool = True
STATS_EXPORT_ENABLED: bool = True

# // env overrides for staging/ops
DRAFT_AXIS_COUNT = _env_int("DRAFT_AXIS_COUNT", DRAFT_AXIS_COUNT)
DRAFT_RESULT_COUNT = _env_int("DRAFT_RESULT_COUNT", DRAFT_RESULT_COUNT)
DRAFT_QUESTION_COUNT = _env_int("DRAFT_QUESTION_COUNT", DRAFT_QUESTION_COUNT)
DRAFT_TEMPERATURE = _env_float("DRAFT_TEMPERATURE", DRAFT_TEMPERATURE)
DRAFT_MAX_TOKENS = _env_int("DRAFT_MAX_TOKENS", DRAFT_MAX_TOKENS)
REQUIRE_COMPLETE_ANSWERS = _env_bool("REQUIRE_COMPLETE_ANSWERS", REQUIRE_COMPLETE_ANSWERS)
REQUIRE_CATALOG_COVERAGE = _env_bool("REQUIRE_CATALOG_COVERAGE", REQUIRE_CATALOG_COVERAGE)
STATS_EXPORT_ENABLED = _env_bool("STATS_EXPORT_ENABLED", STATS_EXPORT_ENABLED)


def _env_true(name: str) -> bool:
    return os.environ.get(name, "").lower() in ("1","true","yes","on")
def load_config() -> dict:
    cfg = {}
    p = pathlib.Path("config.json")
    if p.exists():
        try: cfg = json.loads(p.read_text(encoding="utf-8"))
        except Exception: cfg = {}
    e = os.environ
    if e.get("USE_LLM_DRAFT"): cfg["USE_LLM_DRAFT"] = _env_true("USE_LLM_DRAFT")
    if e.get("LLM_BACKEND"): cfg["LLM_BACKEND"] = e.get("LLM_BACKEND")
    return cfg
def get_backend(cfg: dict) -> str|None:
    if not cfg.get("USE_LLM_DRAFT"): return None
    b = (cfg.get("LLM_BACKEND") or "").lower().strip()
    return b if b == "azure" else None
