"""Typer application exposing the reconciliation engine on the command line."""

from __future__ import annotations

from importlib import metadata
from pathlib import Path
from typing import Any, Dict, List, Optional

import structlog
import typer
from rich.console import Console
from rich.table import Table

import recontab
from recontab.cli.config import deep_merge, load_profile
from recontab.cli.reports import write_csv_report, write_json_report
from recontab.errors import ConfigError, ExitCode, ReconcileError
from recontab.reconcile.engine import reconcile
from recontab.reconcile.models import (
    DatasetConfig,
    MatchStatus,
    ReconcileResult,
    RowResult,
)
from recontab.reconcile.settings import (
    build_reconcile_config,
    canonical_settings,
    load_reconcile_settings,
)
from recontab.reconcile.views import (
    ALL_STATUSES,
    STATUS_LABELS,
    compact_row,
    filter_rows,
    status_chips,
)
from recontab.tabular.columns import (
    AMOUNT_CANDIDATES,
    DATE_CANDIDATES,
    KEY_CANDIDATES,
    guess_column,
    guess_dataset_config,
)
from recontab.tabular.parsing import DEFAULT_DELIMITER, DEFAULT_ENCODING, Dataset, load_csv

log = structlog.get_logger(__name__)

app = typer.Typer(name="recontab", help="Reconcile two CSV datasets by composite key.")

STATUS_STYLES = {
    MatchStatus.MATCHED: "green",
    MatchStatus.MISMATCHED: "yellow",
    MatchStatus.MISSING_IN_LEFT: "red",
    MatchStatus.MISSING_IN_RIGHT: "red",
    MatchStatus.DUPLICATE_KEY: "magenta",
}


def _fail(exc: ReconcileError) -> typer.Exit:
    typer.secho(f"{exc.heading}: {exc}", fg=typer.colors.RED, err=True)
    return typer.Exit(code=int(exc.exit_code))


def _side_overrides(
    keys: Optional[List[str]],
    amount: Optional[str],
    date: Optional[str],
) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    if keys:
        overrides["key_columns"] = list(keys)
    if amount:
        overrides["amount_column"] = amount
    if date:
        overrides["date_column"] = date
    return overrides


def _build_settings(
    *,
    profile_settings: Dict[str, Any],
    config_file: Optional[Path],
    left: Dict[str, Any],
    right: Dict[str, Any],
    tolerance: Optional[float],
) -> Dict[str, Any]:
    """Merge profile, config file and CLI flags, lowest precedence first.

    Every layer is rewritten to field-name keys before merging so a camelCase
    setting in a lower layer cannot shadow a flag.
    """

    settings = canonical_settings(profile_settings)
    if config_file is not None:
        settings = deep_merge(settings, load_reconcile_settings(config_file))
    overrides: Dict[str, Any] = {}
    if left:
        overrides["left"] = left
    if right:
        overrides["right"] = right
    if tolerance is not None:
        overrides["amount_tolerance"] = tolerance
    return deep_merge(settings, overrides)


def _apply_guesses(config: DatasetConfig, dataset: Dataset) -> DatasetConfig:
    guessed = guess_dataset_config(dataset.headers, config)
    if guessed != config:
        log.info(
            "reconcile.columns_guessed",
            dataset=dataset.name,
            key_columns=list(guessed.key_columns),
            amount_column=guessed.amount_column,
            date_column=guessed.date_column,
        )
    return guessed


def _render_summary(console: Console, result: ReconcileResult) -> None:
    table = Table(title="Reconciliation summary")
    table.add_column("Status")
    table.add_column("Rows", justify="right")
    for status, label, count in status_chips(result):
        style = STATUS_STYLES.get(MatchStatus(status)) if status != ALL_STATUSES else None
        table.add_row(label, str(count), style=style)
    summary = result.summary
    table.caption = (
        f"left rows: {summary.left_count}, right rows: {summary.right_count}"
    )
    console.print(table)


def _render_rows(console: Console, rows: List[RowResult], *, limit: int) -> None:
    if not rows or limit == 0:
        return
    table = Table(title="Rows")
    table.add_column("Status")
    table.add_column("Key")
    table.add_column("Reasons")
    table.add_column("Left row (preview)")
    table.add_column("Right row (preview)")
    for row in rows[:limit]:
        table.add_row(
            STATUS_LABELS[row.status],
            row.key,
            "\n".join(row.reasons),
            compact_row(row.left_row),
            compact_row(row.right_row),
            style=STATUS_STYLES[row.status],
        )
    if len(rows) > limit:
        table.caption = f"showing {limit} of {len(rows)} rows"
    console.print(table)


@app.command("reconcile")
def reconcile_command(
    left_path: Path = typer.Argument(..., metavar="LEFT", help="Left CSV file"),
    right_path: Path = typer.Argument(..., metavar="RIGHT", help="Right CSV file"),
    key: Optional[List[str]] = typer.Option(
        None, "--key", "-k", help="Key column for both datasets (repeatable)"
    ),
    left_key: Optional[List[str]] = typer.Option(
        None, "--left-key", help="Key column for the left dataset (repeatable)"
    ),
    right_key: Optional[List[str]] = typer.Option(
        None, "--right-key", help="Key column for the right dataset (repeatable)"
    ),
    amount: Optional[str] = typer.Option(
        None, "--amount", help="Amount column for both datasets"
    ),
    left_amount: Optional[str] = typer.Option(None, "--left-amount"),
    right_amount: Optional[str] = typer.Option(None, "--right-amount"),
    date: Optional[str] = typer.Option(None, "--date", help="Date column for both datasets"),
    left_date: Optional[str] = typer.Option(None, "--left-date"),
    right_date: Optional[str] = typer.Option(None, "--right-date"),
    tolerance: Optional[float] = typer.Option(
        None, "--tolerance", min=0.0, help="Allowed absolute amount difference"
    ),
    config_file: Optional[Path] = typer.Option(
        None, "--config", help="YAML or JSON file with reconciliation settings"
    ),
    profile: Optional[str] = typer.Option(
        None, "--profile", help="Profile from recontab.toml to use"
    ),
    guess: bool = typer.Option(
        True, "--guess/--no-guess", help="Guess columns left unset from the headers"
    ),
    delimiter: Optional[str] = typer.Option(None, "--delimiter", help="CSV delimiter"),
    status: Optional[str] = typer.Option(
        None, "--status", help="Only show rows with this status"
    ),
    search: str = typer.Option("", "--search", help="Only show rows matching this text"),
    limit: int = typer.Option(50, "--limit", min=0, help="Maximum rows to display"),
    csv_report: Optional[Path] = typer.Option(
        None, "--csv", help="Path to write a CSV report of the shown rows"
    ),
    json_report: Optional[Path] = typer.Option(
        None, "--json", help="Path to write the full JSON result"
    ),
    fail_on_diff: bool = typer.Option(
        False, "--fail-on-diff", help="Exit with code 1 when any row is not matched"
    ),
) -> None:
    """Reconcile LEFT against RIGHT and report every row's outcome."""

    console = Console()
    try:
        if status is not None and status != ALL_STATUSES:
            try:
                MatchStatus(status)
            except ValueError as exc:
                choices = ", ".join([ALL_STATUSES, *(item.value for item in MatchStatus)])
                raise ConfigError(f"Unknown status '{status}'. Choose from: {choices}.") from exc

        context = load_profile(profile=profile, workspace=left_path.parent)
        csv_delimiter = delimiter or context.get("delimiter", DEFAULT_DELIMITER)
        encoding = context.get("encoding", DEFAULT_ENCODING)

        log.info(
            "reconcile.start",
            left=str(left_path),
            right=str(right_path),
            profile=context.name,
        )
        left_dataset = load_csv(left_path, delimiter=csv_delimiter, encoding=encoding)
        right_dataset = load_csv(right_path, delimiter=csv_delimiter, encoding=encoding)

        settings = _build_settings(
            profile_settings=context.reconcile_settings(),
            config_file=config_file,
            left=_side_overrides(left_key or key, left_amount or amount, left_date or date),
            right=_side_overrides(
                right_key or key, right_amount or amount, right_date or date
            ),
            tolerance=tolerance,
        )
        config = build_reconcile_config(settings)
        if guess:
            config = config.model_copy(
                update={
                    "left": _apply_guesses(config.left, left_dataset),
                    "right": _apply_guesses(config.right, right_dataset),
                }
            )

        result = reconcile(left_dataset.rows, right_dataset.rows, config)
    except ReconcileError as exc:
        log.error("reconcile.failed", error=str(exc))
        raise _fail(exc) from exc

    shown = filter_rows(result.rows, status=status, search=search)

    typer.secho(
        f"Reconciled {left_dataset.name} ({len(left_dataset)} rows) against "
        f"{right_dataset.name} ({len(right_dataset)} rows)",
        fg=typer.colors.CYAN,
    )
    _render_summary(console, result)
    _render_rows(console, shown, limit=limit)

    if result.summary.discrepancies:
        typer.secho("Discrepancies detected", fg=typer.colors.YELLOW)
    else:
        typer.secho("All keyed rows matched", fg=typer.colors.GREEN)

    if csv_report:
        write_csv_report(csv_report, shown)
        typer.secho(f"Wrote CSV report to {csv_report}", fg=typer.colors.BLUE)
    if json_report:
        write_json_report(json_report, result)
        typer.secho(f"Wrote JSON report to {json_report}", fg=typer.colors.BLUE)

    if fail_on_diff and result.summary.discrepancies:
        raise typer.Exit(code=int(ExitCode.DIFFERENCES))


@app.command("columns")
def columns_command(
    path: Path = typer.Argument(..., help="CSV file to inspect"),
    delimiter: str = typer.Option(DEFAULT_DELIMITER, "--delimiter", help="CSV delimiter"),
) -> None:
    """List the headers of a CSV file and the columns recontab would guess."""

    try:
        dataset = load_csv(path, delimiter=delimiter)
    except ReconcileError as exc:
        raise _fail(exc) from exc

    typer.echo(f"{dataset.name}: {len(dataset)} rows")
    for header in dataset.headers:
        typer.echo(f"  {header}")
    guesses = (
        ("key", guess_column(dataset.headers, KEY_CANDIDATES)),
        ("amount", guess_column(dataset.headers, AMOUNT_CANDIDATES)),
        ("date", guess_column(dataset.headers, DATE_CANDIDATES)),
    )
    for label, column in guesses:
        typer.echo(f"Guessed {label} column: {column or '-'}")


@app.command("info")
def info_command() -> None:
    """Print the installed recontab version."""

    try:
        version = metadata.version("recontab")
    except metadata.PackageNotFoundError:  # pragma: no cover - not installed
        version = recontab.__version__
    typer.echo(f"recontab {version}")


__all__ = ["app"]
