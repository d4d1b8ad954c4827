from __future__ import annotations

import csv
import io

from quiz_core.stats_export import rows_from_stats, to_csv, to_json


def test_rows_sorted_and_zero_filled():
    rows = rows_from_stats({
        "2025-02-02": {"views": 3},
        "2025-02-01": {"views": "2", "completes": 1},
    })
    assert [r["date"] for r in rows] == ["2025-02-01", "2025-02-02"]
    assert rows[0]["views"] == 2 and rows[0]["starts"] == 0


def test_json_totals_and_csv_header():
    rows = rows_from_stats({"2025-02-01": {"views": 2, "reco_click": 1}, "2025-02-02": {"views": 3}})
    payload = to_json(rows)
    assert payload["totals"]["views"] == 5
    assert payload["totals"]["reco_click"] == 1

    parsed = list(csv.DictReader(io.StringIO(to_csv(rows))))
    assert parsed[0]["date"] == "2025-02-01"
    assert parsed[1]["views"] == "3"
    assert set(parsed[0]) >= {"views", "starts", "completes", "share_copy", "promo_generate", "reco_click"}
