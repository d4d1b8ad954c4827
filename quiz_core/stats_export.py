"""Export per-day quiz event counters in JSON/CSV formats."""
from __future__ import annotations

from typing import Iterable, List, Dict, Any
import csv
import io

from .config import EVENT_FIELDS

_FIELDS: tuple[str, ...] = ("date",) + tuple(EVENT_FIELDS.values())


def _normalize_row(row: Dict[str, Any]) -> Dict[str, Any]:
    out: Dict[str, Any] = {"date": str(row.get("date") or "")}
    for key in _FIELDS[1:]:
        try:
            out[key] = int(row.get(key) or 0)
        except (TypeError, ValueError):
            out[key] = 0
    return out


def rows_from_stats(stats: Dict[str, Dict[str, Any]]) -> List[Dict[str, Any]]:
    """{"2025-01-31": {"views": 3, ...}} -> rows sorted by date."""
    return [_normalize_row({"date": day, **(counters or {})}) for day, counters in sorted(stats.items())]


def totals(rows: Iterable[Dict[str, Any]]) -> Dict[str, int]:
    out = {key: 0 for key in _FIELDS[1:]}
    for row in rows:
        for key in out:
            out[key] += int(row.get(key) or 0)
    return out


def to_json(rows: Iterable[Dict[str, Any]]) -> Dict[str, Any]:
    normalized = [_normalize_row(r or {}) for r in rows]
    return {"days": normalized, "totals": totals(normalized)}


def to_csv(rows: Iterable[Dict[str, Any]]) -> str:
    buf = io.StringIO()
    writer = csv.DictWriter(buf, fieldnames=_FIELDS)
    writer.writeheader()
    for row in rows:
        writer.writerow(_normalize_row(row or {}))
    return buf.getvalue()


__all__ = ["rows_from_stats", "totals", "to_json", "to_csv"]
