"""Reconciliation engine and helpers."""

from recontab.reconcile.engine import compare_pair, reconcile
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
    normalize_key,
    normalize_key_part,
    parse_amount,
    to_ymd,
)
from recontab.reconcile.settings import (
    build_reconcile_config,
    canonical_settings,
    load_reconcile_config,
    load_reconcile_settings,
)
from recontab.reconcile.views import (
    STATUS_LABELS,
    compact_row,
    filter_rows,
    status_chips,
    summary_breakdown,
)

__all__ = [
    "compare_pair",
    "reconcile",
    "RightIndex",
    "DatasetConfig",
    "MatchStatus",
    "ReconcileConfig",
    "ReconcileResult",
    "ReconcileSummary",
    "Row",
    "RowResult",
    "normalize_key",
    "normalize_key_part",
    "parse_amount",
    "to_ymd",
    "build_reconcile_config",
    "canonical_settings",
    "load_reconcile_config",
    "load_reconcile_settings",
    "STATUS_LABELS",
    "compact_row",
    "filter_rows",
    "status_chips",
    "summary_breakdown",
]
