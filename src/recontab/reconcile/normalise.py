"""Normalisation helpers for composite keys, amounts and dates."""

from __future__ import annotations

import math
import re
from datetime import date, datetime
from typing import Any, Optional, Sequence

import structlog

from recontab.reconcile.models import Row

log = structlog.get_logger(__name__)

KEY_SEPARATOR = " | "
CURRENCY_SYMBOLS = "₹$€£"

_WHITESPACE = re.compile(r"\s+")
_AMOUNT_NOISE = re.compile(r"[,\s" + re.escape(CURRENCY_SYMBOLS) + r"]")
_DAY_FIRST_PATTERN = re.compile(r"^\s*(\d{1,2})[/-](\d{1,2})[/-](\d{2,4})\s*$")

# Tried in order after ISO-8601.  Numeric month-first layouts are
# absent: ``01/12/2025`` must reach the day-first fallback.
DATE_FORMATS: tuple[str, ...] = (
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%d %b %Y",
    "%d %B %Y",
    "%b %d %Y",
    "%B %d %Y",
    "%b %d, %Y",
    "%B %d, %Y",
    "%d-%b-%Y",
    "%a, %d %b %Y",
    "%a %b %d %Y",
)


def normalize_key_part(value: Any) -> str:
    """Trim, lowercase and collapse internal whitespace of a key value."""

    text = "" if value is None else str(value)
    return _WHITESPACE.sub(" ", text.strip().lower())


def normalize_key(row: Row, key_columns: Sequence[str]) -> str:
    """Return the composite key of *row* for the given ordered columns.

    The empty string is returned when every key part is blank; such rows take
    no part in matching.
    """

    parts = [normalize_key_part(row.get(column, "")) for column in key_columns]
    if not any(parts):
        return ""
    return KEY_SEPARATOR.join(parts)


def parse_amount(value: Any) -> Optional[float]:
    """Parse a monetary amount such as ``"$1,234.50"`` into a float.

    Returns ``None`` for blank values and anything that is not a finite
    number once separators and currency symbols are stripped.
    """

    raw = "" if value is None else str(value).strip()
    if not raw:
        return None
    cleaned = _AMOUNT_NOISE.sub("", raw)
    if not cleaned:
        return None
    try:
        number = float(cleaned)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def _format_ymd(parsed: date) -> str:
    return f"{parsed.year:04d}-{parsed.month:02d}-{parsed.day:02d}"


def _parse_known_formats(raw: str) -> Optional[date]:
    try:
        return datetime.fromisoformat(raw).date()
    except ValueError:
        pass
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(raw, fmt).date()
        except ValueError:
            continue
    return None


def to_ymd(value: Any) -> Optional[str]:
    """Normalise a date value to ``YYYY-MM-DD`` or return ``None``.

    ISO-8601 and a fixed list of textual layouts are tried first.  Numeric
    ``D/M/Y`` and ``D-M-Y`` values fall through to a day-first pattern where a
    two digit year is read as ``20YY``.
    """

    raw = "" if value is None else str(value).strip()
    if not raw:
        return None

    parsed = _parse_known_formats(raw)
    if parsed is not None:
        return _format_ymd(parsed)

    match = _DAY_FIRST_PATTERN.match(raw)
    if match:
        day, month, year = match.groups()
        if len(year) == 2:
            year = f"20{year}"
        return f"{year}-{month.zfill(2)}-{day.zfill(2)}"

    log.debug("normalise.date_unparseable", value=raw)
    return None


def format_number(value: float) -> str:
    """Render *value* the way it would be typed: ``0``, ``0.01``, ``5``."""

    if math.isfinite(value) and value == int(value):
        return str(int(value))
    return repr(value)


__all__ = [
    "CURRENCY_SYMBOLS",
    "DATE_FORMATS",
    "KEY_SEPARATOR",
    "format_number",
    "normalize_key",
    "normalize_key_part",
    "parse_amount",
    "to_ymd",
]
