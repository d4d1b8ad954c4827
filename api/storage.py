"""Utility helpers for persisting quizzes and their daily event counters.

Quizzes are kept as one JSON file each, with a small index used for slug
lookups and dashboard listings.  Counters live in one file per quiz keyed by
UTC date.  A production deployment can swap this module for a database-backed
repository exposing the same functions.
"""

from __future__ import annotations

import json
import logging
import os
import re
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

log = logging.getLogger(__name__)

DATA_ROOT = Path(os.getenv("DATA_DIR", "data")).resolve()
QUIZZES_DIR = DATA_ROOT / "quizzes"
STATS_DIR = DATA_ROOT / "stats"
QUIZ_INDEX_PATH = DATA_ROOT / "quizzes_index.json"

_LOCK = threading.Lock()
_ID_RX = re.compile(r"^[A-Za-z0-9_-]+$")


def _ensure_dirs() -> None:
    QUIZZES_DIR.mkdir(parents=True, exist_ok=True)
    STATS_DIR.mkdir(parents=True, exist_ok=True)


def _read_json(path: Path, default: Any) -> Any:
    if not path.exists():
        return default
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        log.warning("unreadable JSON at %s, using default", path)
        return default


def _write_json(path: Path, payload: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.write_text(json.dumps(payload, indent=2, sort_keys=True, ensure_ascii=False), encoding="utf-8")
    tmp.replace(path)


def utcnow_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def utc_today() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%d")


def _index_entry(record: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "slug": record.get("slug"),
        "title": record.get("title"),
        "status": record.get("status"),
        "creatorId": record.get("creator_id"),
        "createdAt": record.get("created_at"),
    }


def valid_id(quiz_id: str) -> bool:
    return isinstance(quiz_id, str) and bool(_ID_RX.match(quiz_id))


def _quiz_path(quiz_id: str) -> Path:
    # ids are used as file names; anything else must never reach the filesystem
    if not valid_id(quiz_id):
        raise ValueError(f"invalid quiz id: {quiz_id!r}")
    return QUIZZES_DIR / f"{quiz_id}.json"


def _stats_path(quiz_id: str) -> Path:
    if not valid_id(quiz_id):
        raise ValueError(f"invalid quiz id: {quiz_id!r}")
    return STATS_DIR / f"{quiz_id}.json"


def _save_locked(record: Dict[str, Any]) -> None:
    quiz_id = record["id"]
    path = _quiz_path(quiz_id)
    index: Dict[str, Dict[str, Any]] = _read_json(QUIZ_INDEX_PATH, {})
    index[quiz_id] = _index_entry(record)
    _write_json(QUIZ_INDEX_PATH, index)
    _write_json(path, record)


def _load_locked(quiz_id: str) -> Optional[Dict[str, Any]]:
    if not valid_id(quiz_id):
        return None
    record = _read_json(_quiz_path(quiz_id), None)
    return record if isinstance(record, dict) else None


def save_quiz(record: Dict[str, Any]) -> None:
    """Persist the quiz record and refresh its index entry."""

    _ensure_dirs()
    with _LOCK:
        _save_locked(record)


def update_quiz(
    quiz_id: str,
    fn: Callable[[Dict[str, Any]], Optional[Dict[str, Any]]],
) -> Optional[Dict[str, Any]]:
    """
    Read-modify-write one quiz under the store lock.
    `fn` edits the record in place or returns a replacement; exceptions it
    raises abort the write. Returns the saved record, or None if missing.
    """

    _ensure_dirs()
    with _LOCK:
        record = _load_locked(quiz_id)
        if record is None:
            return None
        replaced = fn(record)
        if replaced is not None:
            record = replaced
        _save_locked(record)
    return record


def load_quiz_record(quiz_id: str) -> Optional[Dict[str, Any]]:
    return _load_locked(quiz_id)


def quiz_exists(quiz_id: str) -> bool:
    if not valid_id(quiz_id):
        return False
    index: Dict[str, Dict[str, Any]] = _read_json(QUIZ_INDEX_PATH, {})
    return quiz_id in index


def find_quiz_by_slug(slug: str) -> Optional[Dict[str, Any]]:
    index: Dict[str, Dict[str, Any]] = _read_json(QUIZ_INDEX_PATH, {})
    for qid, meta in index.items():
        if meta.get("slug") == slug:
            return load_quiz_record(qid)
    return None


def slug_taken(slug: str, exclude_id: Optional[str] = None) -> bool:
    index: Dict[str, Dict[str, Any]] = _read_json(QUIZ_INDEX_PATH, {})
    return any(meta.get("slug") == slug and qid != exclude_id for qid, meta in index.items())


def delete_quiz(quiz_id: str) -> bool:
    if not valid_id(quiz_id):
        return False
    removed = False
    with _LOCK:
        index: Dict[str, Dict[str, Any]] = _read_json(QUIZ_INDEX_PATH, {})
        if quiz_id in index:
            index.pop(quiz_id, None)
            _write_json(QUIZ_INDEX_PATH, index)
            removed = True
        for path in (_quiz_path(quiz_id), _stats_path(quiz_id)):
            if path.exists():
                try:
                    path.unlink()
                except OSError:
                    log.warning("could not remove %s", path)
    return removed


def list_quizzes_for_user(user_id: str) -> List[Dict[str, Any]]:
    index: Dict[str, Dict[str, Any]] = _read_json(QUIZ_INDEX_PATH, {})
    out: List[Dict[str, Any]] = []
    for qid, meta in index.items():
        if meta.get("creatorId") == user_id:
            item = {"id": qid}
            item.update({k: v for k, v in meta.items() if k != "id"})
            out.append(item)
    out.sort(key=lambda r: r.get("createdAt") or "", reverse=True)
    return out


def increment_stat(quiz_id: str, field: str, day: Optional[str] = None) -> Dict[str, int]:
    """Bump one counter for `day` (UTC today by default); returns that day's counters."""

    _ensure_dirs()
    day = day or utc_today()
    path = _stats_path(quiz_id)
    with _LOCK:
        stats = _read_json(path, {})
        if not isinstance(stats, dict):
            log.warning("stats file %s is not an object, resetting", path)
            stats = {}
        counters = stats.setdefault(day, {})
        counters[field] = int(counters.get(field, 0)) + 1
        _write_json(path, stats)
    return dict(counters)


def load_stats(quiz_id: str) -> Dict[str, Dict[str, int]]:
    if not valid_id(quiz_id):
        return {}
    stats = _read_json(_stats_path(quiz_id), {})
    return stats if isinstance(stats, dict) else {}
