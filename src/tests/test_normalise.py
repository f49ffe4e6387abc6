from __future__ import annotations

import pytest
from hypothesis import given, strategies as st

from recontab.reconcile.normalise import (
    format_number,
    normalize_key,
    normalize_key_part,
    parse_amount,
    to_ymd,
)


def test_key_part_collapses_case_and_whitespace() -> None:
    assert normalize_key_part("  INV-1\t\n 2 ") == "inv-1 2"
    assert normalize_key_part(None) == ""


def test_keys_differing_in_case_and_padding_collapse() -> None:
    assert normalize_key({"InvoiceNo": "INV-1 "}, ["InvoiceNo"]) == normalize_key(
        {"InvoiceNo": "inv-1"}, ["InvoiceNo"]
    )


def test_composite_key_joins_in_column_order() -> None:
    row = {"Vendor": " Acme  Ltd", "Inv": "A1"}
    assert normalize_key(row, ["Inv", "Vendor"]) == "a1 | acme ltd"
    assert normalize_key(row, ["Vendor", "Inv"]) == "acme ltd | a1"


def test_missing_columns_read_as_blank() -> None:
    assert normalize_key({"Inv": "7"}, ["Inv", "Branch"]) == "7 | "


def test_all_blank_parts_give_empty_key() -> None:
    assert normalize_key({"Inv": "  ", "Vendor": ""}, ["Inv", "Vendor"]) == ""
    assert normalize_key({}, ["Inv"]) == ""


@given(st.text(max_size=20))
def test_key_part_normalisation_is_idempotent(value: str) -> None:
    once = normalize_key_part(value)
    assert normalize_key_part(once) == once


@pytest.mark.parametrize(
    "raw",
    ["1,234.50", "$1234.50", " 1234.50 ", "₹ 1,234.5", "€1234.50", "£1 234.50"],
)
def test_parse_amount_strips_separators_and_symbols(raw: str) -> None:
    assert parse_amount(raw) == pytest.approx(1234.5)


@pytest.mark.parametrize("raw", ["", "   ", None, "N/A", "$", "inf", "nan", "12abc"])
def test_parse_amount_rejects_non_numbers(raw: str | None) -> None:
    assert parse_amount(raw) is None


def test_parse_amount_keeps_sign() -> None:
    assert parse_amount("-42.10") == pytest.approx(-42.1)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("2025-12-01", "2025-12-01"),
        ("01/12/2025", "2025-12-01"),
        ("1-12-2025", "2025-12-01"),
        ("5/6/25", "2025-06-05"),
        ("2025/12/01", "2025-12-01"),
        ("2025-12-01T23:30:00", "2025-12-01"),
        ("2025-12-01T23:30:00+05:30", "2025-12-01"),
        ("1 Dec 2025", "2025-12-01"),
        ("Dec 1, 2025", "2025-12-01"),
        ("December 1 2025", "2025-12-01"),
        ("01-Dec-2025", "2025-12-01"),
        ("  2025-12-01  ", "2025-12-01"),
    ],
)
def test_to_ymd_normalises_known_layouts(raw: str, expected: str) -> None:
    assert to_ymd(raw) == expected


@pytest.mark.parametrize("raw", ["", "  ", None, "yesterday", "2025-13-45", "12.01.2025"])
def test_to_ymd_rejects_unknown_values(raw: str | None) -> None:
    assert to_ymd(raw) is None


def test_to_ymd_fallback_is_always_day_first() -> None:
    assert to_ymd("12/01/2025") == "2025-01-12"


@pytest.mark.parametrize(
    ("value", "expected"),
    [(0.0, "0"), (5.0, "5"), (0.01, "0.01"), (2.5, "2.5")],
)
def test_format_number(value: float, expected: str) -> None:
    assert format_number(value) == expected
