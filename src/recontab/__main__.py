"""Console entry point for the recontab CLI application."""

from __future__ import annotations

import sys
from typing import Sequence

import click
import typer

from recontab.cli.app import app
from recontab.errors import ExitCode, ReconcileError


def _handle_cli_error(exc: ReconcileError) -> ExitCode:
    """Render a user friendly error message and return the exit code."""

    typer.secho(f"{exc.heading}: {exc}", fg=typer.colors.RED, err=True)
    return exc.exit_code


def main(argv: Sequence[str] | None = None) -> int:
    """Invoke the root Typer application."""

    try:
        result = app(
            args=list(argv) if argv is not None else None,
            standalone_mode=False,
        )
    except ReconcileError as exc:
        return int(_handle_cli_error(exc))
    except click.ClickException as exc:
        exc.show()
        return int(exc.exit_code)
    if result is None:
        return int(ExitCode.SUCCESS)
    return int(result)


if __name__ == "__main__":
    sys.exit(main())
