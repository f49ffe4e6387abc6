"""Heuristics that suggest key, amount and date columns from headers."""

from __future__ import annotations

from typing import Iterable, Optional, Sequence

from recontab.reconcile.models import DatasetConfig
from recontab.reconcile.normalise import normalize_key_part

KEY_CANDIDATES: tuple[str, ...] = (
    "invoice",
    "invoice no",
    "invoice_no",
    "inv",
    "reference",
    "ref",
    "id",
)
AMOUNT_CANDIDATES: tuple[str, ...] = ("amount", "total", "value", "net", "gross")
DATE_CANDIDATES: tuple[str, ...] = (
    "date",
    "invoice date",
    "txn date",
    "transaction date",
)


def guess_column(headers: Sequence[str], candidates: Iterable[str]) -> Optional[str]:
    """Return the first header resembling one of *candidates*.

    Candidates are tried in order; for each, an exact match on the normalised
    header wins over a header that merely contains the candidate.
    """

    normalised = [(header, normalize_key_part(header)) for header in headers]
    for candidate in candidates:
        wanted = normalize_key_part(candidate)
        for header, value in normalised:
            if value == wanted:
                return header
        for header, value in normalised:
            if wanted in value:
                return header
    return None


def guess_dataset_config(
    headers: Sequence[str],
    existing: Optional[DatasetConfig] = None,
) -> DatasetConfig:
    """Fill the unset fields of *existing* with guesses from *headers*."""

    current = existing or DatasetConfig()
    key_columns = current.key_columns
    if not key_columns:
        key_guess = guess_column(headers, KEY_CANDIDATES)
        key_columns = (key_guess,) if key_guess else ()
    return DatasetConfig(
        key_columns=key_columns,
        amount_column=current.amount_column or guess_column(headers, AMOUNT_CANDIDATES),
        date_column=current.date_column or guess_column(headers, DATE_CANDIDATES),
    )


__all__ = [
    "AMOUNT_CANDIDATES",
    "DATE_CANDIDATES",
    "KEY_CANDIDATES",
    "guess_column",
    "guess_dataset_config",
]
