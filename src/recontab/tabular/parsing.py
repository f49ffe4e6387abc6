"""Parsing of delimited text into header-labelled string rows."""

from __future__ import annotations

import csv
import io
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import structlog

from recontab.errors import DatasetError

log = structlog.get_logger(__name__)

DEFAULT_DELIMITER = ","
DEFAULT_ENCODING = "utf-8-sig"


@dataclass(frozen=True)
class Dataset:
    """A parsed table: its name, distinct headers in order and string rows."""

    name: str
    headers: tuple[str, ...]
    rows: List[Dict[str, str]] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.rows)


def normalize_header(header: str) -> str:
    return header.strip()


def _to_string_row(header: Sequence[str], record: Sequence[str]) -> Dict[str, str]:
    row: Dict[str, str] = {}
    for column, value in zip(header, record):
        if not column:
            continue
        row[column] = "" if value is None else str(value)
    return row


def parse_csv_text(
    text: str,
    name: str = "Dataset",
    *,
    delimiter: str = DEFAULT_DELIMITER,
) -> Dataset:
    """Parse CSV *text* whose first non-blank line holds the headers.

    Lines made only of blank cells are skipped.  Every data line must carry
    as many cells as the header line.

    Raises:
        DatasetError: when there is no header line, a line has the wrong
            number of cells, or the text is not valid CSV.
    """

    reader = csv.reader(io.StringIO(text.lstrip("\ufeff")), delimiter=delimiter)
    header: Optional[List[str]] = None
    rows: List[Dict[str, str]] = []
    try:
        for record in reader:
            if not any(cell.strip() for cell in record):
                continue
            if header is None:
                header = [normalize_header(cell) for cell in record]
                continue
            if len(record) != len(header):
                raise DatasetError(
                    f"{name}: line {reader.line_num} has {len(record)} fields, "
                    f"expected {len(header)}"
                )
            rows.append(_to_string_row(header, record))
    except csv.Error as exc:
        raise DatasetError(f"{name}: failed to parse CSV: {exc}") from exc

    if header is None:
        raise DatasetError(f"{name}: no header row found")

    headers = tuple(dict.fromkeys(column for column in header if column))
    return Dataset(name=name, headers=headers, rows=rows)


def load_csv(
    path: Path,
    name: Optional[str] = None,
    *,
    delimiter: str = DEFAULT_DELIMITER,
    encoding: str = DEFAULT_ENCODING,
) -> Dataset:
    """Read and parse the CSV file at *path*."""

    try:
        text = path.read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError) as exc:
        raise DatasetError(f"Unable to read '{path}': {exc}") from exc

    dataset = parse_csv_text(text, name or path.name, delimiter=delimiter)
    log.info(
        "tabular.load.complete",
        path=str(path),
        headers=len(dataset.headers),
        rows=len(dataset.rows),
    )
    return dataset


__all__ = [
    "DEFAULT_DELIMITER",
    "DEFAULT_ENCODING",
    "Dataset",
    "load_csv",
    "normalize_header",
    "parse_csv_text",
]
