"""Right-side index of rows grouped by composite key."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional, Sequence

from recontab.reconcile.models import Row
from recontab.reconcile.normalise import normalize_key


@dataclass(slots=True)
class RightIndex:
    """Arena of right rows with ordered key buckets and consumption flags.

    ``buckets`` maps each composite key, in first-seen order, to positions in
    ``rows``.  ``consumed`` runs parallel to ``rows`` and is the only state
    mutated while matching.
    """

    rows: List[Row] = field(default_factory=list)
    buckets: Dict[str, List[int]] = field(default_factory=dict)
    consumed: List[bool] = field(default_factory=list)
    duplicate_keys: frozenset[str] = frozenset()
    skipped: int = 0

    @classmethod
    def build(cls, rows: Iterable[Row], key_columns: Sequence[str]) -> "RightIndex":
        index = cls()
        for row in rows:
            key = normalize_key(row, key_columns)
            if not key:
                index.skipped += 1
                continue
            index.buckets.setdefault(key, []).append(len(index.rows))
            index.rows.append(row)
            index.consumed.append(False)
        index.duplicate_keys = frozenset(
            key for key, positions in index.buckets.items() if len(positions) > 1
        )
        return index

    def __contains__(self, key: object) -> bool:
        return key in self.buckets

    def __len__(self) -> int:
        return len(self.rows)

    def is_duplicate(self, key: str) -> bool:
        return key in self.duplicate_keys

    def first(self, key: str) -> Row:
        """Return the first row filed under *key* without consuming it."""

        return self.rows[self.buckets[key][0]]

    def claim(self, key: str) -> Optional[Row]:
        """Consume and return the first unconsumed row for *key*."""

        for position in self.buckets.get(key, ()):
            if not self.consumed[position]:
                self.consumed[position] = True
                return self.rows[position]
        return None

    def residuals(self) -> Iterator[tuple[str, Row]]:
        """Yield ``(key, row)`` for every entry left unconsumed."""

        for key, positions in self.buckets.items():
            for position in positions:
                if not self.consumed[position]:
                    yield key, self.rows[position]


__all__ = ["RightIndex"]
