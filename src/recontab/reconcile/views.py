"""Presentation helpers for filtering and summarising reconciliation results."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from recontab.reconcile.models import (
    MatchStatus,
    ReconcileResult,
    ReconcileSummary,
    Row,
    RowResult,
)

STATUS_LABELS: Dict[MatchStatus, str] = {
    MatchStatus.MATCHED: "Matched",
    MatchStatus.MISMATCHED: "Mismatched",
    MatchStatus.MISSING_IN_LEFT: "Missing in Left",
    MatchStatus.MISSING_IN_RIGHT: "Missing in Right",
    MatchStatus.DUPLICATE_KEY: "Duplicate Key",
}

ALL_STATUSES = "all"
PREVIEW_FIELDS = 10


def compact_row(row: Optional[Row], *, limit: int = PREVIEW_FIELDS) -> str:
    """Return a one-line ``column:value`` preview of the non-empty fields."""

    if not row:
        return ""
    parts: List[str] = []
    for column, value in row.items():
        if not value:
            continue
        parts.append(f"{column}:{value}")
        if len(parts) >= limit:
            break
    return " | ".join(parts)


def _haystack(row: RowResult) -> str:
    return " | ".join(
        [
            row.key,
            STATUS_LABELS[row.status],
            " | ".join(row.reasons),
            compact_row(row.left_row),
            compact_row(row.right_row),
        ]
    ).lower()


def filter_rows(
    rows: Iterable[RowResult],
    *,
    status: MatchStatus | str | None = None,
    search: str = "",
) -> List[RowResult]:
    """Filter result rows by status and a case-insensitive search string.

    ``status`` of ``None`` or ``"all"`` keeps every status.  The search looks
    at the key, the status label, the reasons and a compact preview of both
    rows.
    """

    wanted = None if status in (None, ALL_STATUSES) else MatchStatus(status)
    query = search.strip().lower()
    selected: List[RowResult] = []
    for row in rows:
        if wanted is not None and row.status is not wanted:
            continue
        if query and query not in _haystack(row):
            continue
        selected.append(row)
    return selected


def status_chips(result: ReconcileResult) -> List[tuple[str, str, int]]:
    """Return ``(status, label, count)`` entries for a status filter bar."""

    summary = result.summary
    return [
        (ALL_STATUSES, "All", len(result.rows)),
        (MatchStatus.MATCHED.value, STATUS_LABELS[MatchStatus.MATCHED], summary.matched),
        (
            MatchStatus.MISMATCHED.value,
            STATUS_LABELS[MatchStatus.MISMATCHED],
            summary.mismatched,
        ),
        (
            MatchStatus.MISSING_IN_LEFT.value,
            STATUS_LABELS[MatchStatus.MISSING_IN_LEFT],
            summary.missing_in_left,
        ),
        (
            MatchStatus.MISSING_IN_RIGHT.value,
            STATUS_LABELS[MatchStatus.MISSING_IN_RIGHT],
            summary.missing_in_right,
        ),
        (
            MatchStatus.DUPLICATE_KEY.value,
            STATUS_LABELS[MatchStatus.DUPLICATE_KEY],
            summary.duplicate_key,
        ),
    ]


def summary_breakdown(summary: ReconcileSummary) -> Dict[str, List[Dict[str, Any]]]:
    """Return pie and bar series describing *summary* for chart renderers."""

    pie = [
        {"name": "Matched", "value": summary.matched},
        {"name": "Mismatched", "value": summary.mismatched},
        {
            "name": "Missing",
            "value": summary.missing_in_left + summary.missing_in_right,
        },
        {"name": "Duplicate", "value": summary.duplicate_key},
    ]
    bar = [
        {"name": "Matched", "count": summary.matched},
        {"name": "Mismatched", "count": summary.mismatched},
        {"name": "Missing L", "count": summary.missing_in_left},
        {"name": "Missing R", "count": summary.missing_in_right},
        {"name": "Duplicate", "count": summary.duplicate_key},
    ]
    return {"pie": [slice_ for slice_ in pie if slice_["value"] > 0], "bar": bar}


__all__ = [
    "ALL_STATUSES",
    "STATUS_LABELS",
    "compact_row",
    "filter_rows",
    "status_chips",
    "summary_breakdown",
]
