"""CSV and JSON report writers for reconciliation results."""

from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Dict, Iterable, List, Sequence

from recontab.reconcile.models import ReconcileResult, RowResult

BASE_COLUMNS = ("status", "key", "reasons")
REASON_SEPARATOR = " | "


def flatten_row(row: RowResult) -> Dict[str, str]:
    """Flatten a result row into ``status``/``key``/``reasons`` plus prefixed fields."""

    flat: Dict[str, str] = {
        "status": row.status.value,
        "key": row.key,
        "reasons": REASON_SEPARATOR.join(row.reasons),
    }
    for prefix, source in (("left", row.left_row), ("right", row.right_row)):
        for column, value in (source or {}).items():
            flat[f"{prefix}.{column}"] = "" if value is None else str(value)
    return flat


def write_csv_report(path: Path, rows: Iterable[RowResult]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    flattened: List[Dict[str, str]] = [flatten_row(row) for row in rows]
    if not flattened:
        path.write_text("", encoding="utf-8")
        return
    extra = sorted(
        {key for row in flattened for key in row.keys()} - set(BASE_COLUMNS)
    )
    fieldnames: Sequence[str] = [*BASE_COLUMNS, *extra]
    with path.open("w", newline="", encoding="utf-8") as fh:
        writer = csv.DictWriter(fh, fieldnames=fieldnames, restval="")
        writer.writeheader()
        writer.writerows(flattened)


def write_json_report(path: Path, result: ReconcileResult) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as fh:
        json.dump(result.model_dump(mode="json"), fh, indent=2)


__all__ = ["flatten_row", "write_csv_report", "write_json_report"]
