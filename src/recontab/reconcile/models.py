"""Data model exchanged between the reconciliation engine and its callers."""

from __future__ import annotations

from enum import Enum
from typing import Any, Mapping, Sequence

from pydantic import BaseModel, ConfigDict, Field

Row = Mapping[str, Any]


class MatchStatus(str, Enum):
    """Outcome assigned to every keyed row of both datasets."""

    MATCHED = "matched"
    MISMATCHED = "mismatched"
    MISSING_IN_LEFT = "missing_in_left"
    MISSING_IN_RIGHT = "missing_in_right"
    DUPLICATE_KEY = "duplicate_key"


class DatasetConfig(BaseModel):
    """Columns used to key and compare one side of a reconciliation.

    ``key_columns`` is ordered: the composite key joins the normalised values
    in this order.  An empty tuple is accepted here and rejected by
    :func:`recontab.reconcile.engine.reconcile`.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    key_columns: tuple[str, ...] = Field(default=(), alias="keyColumns")
    amount_column: str | None = Field(default=None, alias="amountColumn")
    date_column: str | None = Field(default=None, alias="dateColumn")


class ReconcileConfig(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    left: DatasetConfig = Field(default_factory=DatasetConfig)
    right: DatasetConfig = Field(default_factory=DatasetConfig)
    amount_tolerance: float = Field(default=0.0, ge=0.0, alias="amountTolerance")


class RowResult(BaseModel):
    """Classification of a single row, or of a left/right pair."""

    status: MatchStatus
    key: str
    left_row: Row | None = None
    right_row: Row | None = None
    reasons: Sequence[str] = ()


class ReconcileSummary(BaseModel):
    left_count: int
    right_count: int
    matched: int = 0
    mismatched: int = 0
    missing_in_left: int = 0
    missing_in_right: int = 0
    duplicate_key: int = 0
    unkeyed_left: int = 0
    unkeyed_right: int = 0

    @property
    def discrepancies(self) -> int:
        """Number of result rows that are not a clean match."""

        return (
            self.mismatched
            + self.missing_in_left
            + self.missing_in_right
            + self.duplicate_key
        )


class ReconcileResult(BaseModel):
    rows: Sequence[RowResult]
    summary: ReconcileSummary

    def count(self, status: MatchStatus | str) -> int:
        """Return how many result rows carry *status*."""

        wanted = MatchStatus(status)
        return sum(1 for row in self.rows if row.status is wanted)


__all__ = [
    "DatasetConfig",
    "MatchStatus",
    "ReconcileConfig",
    "ReconcileResult",
    "ReconcileSummary",
    "Row",
    "RowResult",
]
