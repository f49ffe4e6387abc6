"""Key-based reconciliation of two tabular datasets."""

from __future__ import annotations

from typing import List, Sequence

import structlog

from recontab.errors import ConfigError
from recontab.reconcile.index import RightIndex
from recontab.reconcile.models import (
    DatasetConfig,
    MatchStatus,
    ReconcileConfig,
    ReconcileResult,
    ReconcileSummary,
    Row,
    RowResult,
)
from recontab.reconcile.normalise import (
    format_number,
    normalize_key,
    parse_amount,
    to_ymd,
)

log = structlog.get_logger(__name__)

REASON_MISSING_IN_RIGHT = "No matching key in right dataset"
REASON_MISSING_IN_LEFT = "No matching key in left dataset"
REASON_BUCKET_EXHAUSTED = "Multiple rows share this key in the right dataset"
REASON_DUPLICATE_KEY = "Duplicate key in right dataset (multiple rows)"
REASON_AMOUNT_UNPARSEABLE = "Amount missing or unparseable"
REASON_DATE_UNPARSEABLE = "Date missing or unparseable"

# Decimal places kept when comparing an amount difference with the tolerance.
AMOUNT_PRECISION = 9


def _validate_config(config: ReconcileConfig) -> None:
    if not config.left.key_columns or not config.right.key_columns:
        raise ConfigError("Select at least one key column for both datasets.")


def _compare_amounts(
    left_row: Row,
    right_row: Row,
    left: DatasetConfig,
    right: DatasetConfig,
    tolerance: float,
) -> List[str]:
    if not (left.amount_column and right.amount_column):
        return []
    left_amount = parse_amount(left_row.get(left.amount_column))
    right_amount = parse_amount(right_row.get(right.amount_column))
    if left_amount is None or right_amount is None:
        return [REASON_AMOUNT_UNPARSEABLE]
    diff = abs(left_amount - right_amount)
    # 100.01 - 100.00 is 0.010000000000005116 as a float.
    if round(diff, AMOUNT_PRECISION) > tolerance:
        return [f"Amount differs by {diff:.2f} (tolerance {format_number(tolerance)})"]
    return []


def _compare_dates(
    left_row: Row,
    right_row: Row,
    left: DatasetConfig,
    right: DatasetConfig,
) -> List[str]:
    if not (left.date_column and right.date_column):
        return []
    left_date = to_ymd(left_row.get(left.date_column))
    right_date = to_ymd(right_row.get(right.date_column))
    if left_date is None or right_date is None:
        return [REASON_DATE_UNPARSEABLE]
    if left_date != right_date:
        return [f"Date differs ({left_date} vs {right_date})"]
    return []


def compare_pair(
    left_row: Row,
    right_row: Row,
    config: ReconcileConfig,
) -> List[str]:
    """Return the field-level reasons why two keyed rows disagree."""

    reasons = _compare_amounts(
        left_row, right_row, config.left, config.right, config.amount_tolerance
    )
    reasons.extend(_compare_dates(left_row, right_row, config.left, config.right))
    return reasons


def reconcile(
    left_rows: Sequence[Row],
    right_rows: Sequence[Row],
    config: ReconcileConfig,
) -> ReconcileResult:
    """Classify every keyed row of both datasets.

    The right rows are indexed by composite key, the left rows are scanned in
    input order consuming the first unconsumed candidate of their bucket, and
    right rows left over afterwards are reported as ``missing_in_left`` or,
    for keys seen more than once on the right, ``duplicate_key``.

    Rows whose composite key is blank are skipped on both sides.

    Raises:
        ConfigError: if either side declares no key columns.
    """

    _validate_config(config)

    index = RightIndex.build(right_rows, config.right.key_columns)
    summary = ReconcileSummary(
        left_count=len(left_rows),
        right_count=len(right_rows),
        unkeyed_right=index.skipped,
    )
    results: List[RowResult] = []

    for left_row in left_rows:
        key = normalize_key(left_row, config.left.key_columns)
        if not key:
            summary.unkeyed_left += 1
            continue

        if key not in index:
            summary.missing_in_right += 1
            results.append(
                RowResult(
                    status=MatchStatus.MISSING_IN_RIGHT,
                    key=key,
                    left_row=left_row,
                    reasons=[REASON_MISSING_IN_RIGHT],
                )
            )
            continue

        right_row = index.claim(key)
        if right_row is None:
            summary.duplicate_key += 1
            results.append(
                RowResult(
                    status=MatchStatus.DUPLICATE_KEY,
                    key=key,
                    left_row=left_row,
                    right_row=index.first(key),
                    reasons=[REASON_BUCKET_EXHAUSTED],
                )
            )
            continue

        reasons: List[str] = []
        if index.is_duplicate(key):
            reasons.append(REASON_DUPLICATE_KEY)
        reasons.extend(compare_pair(left_row, right_row, config))

        if reasons:
            summary.mismatched += 1
            status = MatchStatus.MISMATCHED
        else:
            summary.matched += 1
            status = MatchStatus.MATCHED
        results.append(
            RowResult(
                status=status,
                key=key,
                left_row=left_row,
                right_row=right_row,
                reasons=reasons,
            )
        )

    for key, right_row in index.residuals():
        if index.is_duplicate(key):
            summary.duplicate_key += 1
            status = MatchStatus.DUPLICATE_KEY
            reason = REASON_DUPLICATE_KEY
        else:
            summary.missing_in_left += 1
            status = MatchStatus.MISSING_IN_LEFT
            reason = REASON_MISSING_IN_LEFT
        results.append(
            RowResult(status=status, key=key, right_row=right_row, reasons=[reason])
        )

    if summary.unkeyed_left or summary.unkeyed_right:
        log.debug(
            "reconcile.unkeyed_rows_skipped",
            left=summary.unkeyed_left,
            right=summary.unkeyed_right,
        )
    log.info(
        "reconcile.complete",
        left=summary.left_count,
        right=summary.right_count,
        matched=summary.matched,
        mismatched=summary.mismatched,
        missing_in_left=summary.missing_in_left,
        missing_in_right=summary.missing_in_right,
        duplicate_key=summary.duplicate_key,
    )
    return ReconcileResult(rows=results, summary=summary)


__all__ = [
    "REASON_AMOUNT_UNPARSEABLE",
    "REASON_BUCKET_EXHAUSTED",
    "REASON_DATE_UNPARSEABLE",
    "REASON_DUPLICATE_KEY",
    "REASON_MISSING_IN_LEFT",
    "REASON_MISSING_IN_RIGHT",
    "compare_pair",
    "reconcile",
]
