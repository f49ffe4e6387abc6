from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from recontab.errors import DatasetError
from recontab.reconcile.models import DatasetConfig
from recontab.tabular.columns import guess_column, guess_dataset_config
from recontab.tabular.parsing import load_csv, parse_csv_text


def test_parse_csv_text_trims_headers_and_skips_blank_lines() -> None:
    text = "\n Invoice No , Amount ,\n\nINV-1, 10 ,\n , ,\nINV-2,,x\n"

    dataset = parse_csv_text(text, "purchases")

    assert dataset.name == "purchases"
    assert dataset.headers == ("Invoice No", "Amount")
    assert dataset.rows == [
        {"Invoice No": "INV-1", "Amount": " 10 "},
        {"Invoice No": "INV-2", "Amount": ""},
    ]
    assert len(dataset) == 2


def test_parse_csv_text_handles_quotes_and_delimiters() -> None:
    text = 'Ref;Memo\n"A1";"semi; colon"\n'

    dataset = parse_csv_text(text, delimiter=";")

    assert dataset.rows == [{"Ref": "A1", "Memo": "semi; colon"}]


def test_duplicate_headers_are_listed_once() -> None:
    dataset = parse_csv_text("Ref,Ref\nfirst,second\n")

    assert dataset.headers == ("Ref",)
    assert dataset.rows == [{"Ref": "second"}]


@pytest.mark.parametrize("text", ["", "\n\n", " , \n"])
def test_parse_csv_text_requires_a_header(text: str) -> None:
    with pytest.raises(DatasetError):
        parse_csv_text(text)


def test_parse_csv_text_rejects_ragged_rows() -> None:
    with pytest.raises(DatasetError, match="line 3 has 3 fields, expected 2"):
        parse_csv_text("a,b\n1,2\n1,2,3\n")


def test_load_csv_strips_bom_and_names_dataset(
    write_csv: Callable[[str, str], Path],
) -> None:
    path = write_csv("sales.csv", "\ufeffInv,Amt\n1,100\n")

    dataset = load_csv(path)

    assert dataset.name == "sales.csv"
    assert dataset.headers == ("Inv", "Amt")
    assert dataset.rows == [{"Inv": "1", "Amt": "100"}]


def test_load_csv_missing_file(tmp_path: Path) -> None:
    with pytest.raises(DatasetError):
        load_csv(tmp_path / "nope.csv")


def test_guess_column_prefers_exact_then_substring() -> None:
    headers = ["Invoice Date", "Invoice", "Net Amount", "Total"]

    assert guess_column(headers, ["invoice"]) == "Invoice"
    assert guess_column(headers, ["amount", "total"]) == "Net Amount"
    assert guess_column(headers, ["date"]) == "Invoice Date"
    assert guess_column(headers, ["gst"]) is None


def test_guess_column_normalises_headers() -> None:
    assert guess_column(["  INVOICE   NO "], ["invoice no"]) == "  INVOICE   NO "


def test_guess_dataset_config_keeps_existing_choices() -> None:
    headers = ["Ref", "Amount", "Txn Date", "Value"]

    guessed = guess_dataset_config(headers)
    kept = guess_dataset_config(headers, DatasetConfig(amount_column="Value"))

    assert guessed == DatasetConfig(
        key_columns=["Ref"], amount_column="Amount", date_column="Txn Date"
    )
    assert kept.amount_column == "Value"
    assert kept.key_columns == ("Ref",)


def test_guess_dataset_config_without_hits() -> None:
    guessed = guess_dataset_config(["foo", "bar"])

    assert guessed.key_columns == ()
    assert guessed.amount_column is None
    assert guessed.date_column is None
