"""Tabular input helpers feeding the reconciliation engine."""

from recontab.tabular.columns import guess_column, guess_dataset_config
from recontab.tabular.parsing import Dataset, load_csv, parse_csv_text

__all__ = [
    "Dataset",
    "guess_column",
    "guess_dataset_config",
    "load_csv",
    "parse_csv_text",
]
