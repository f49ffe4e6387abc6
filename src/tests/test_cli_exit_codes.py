"""Regression tests covering CLI exit code mapping."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from recontab import __main__ as cli_main
from recontab.errors import ConfigError, DatasetError, ExitCode, ReconcileError


def test_main_returns_success(write_csv: Callable[[str, str], Path]) -> None:
    left = write_csv("left.csv", "Inv\n1\n")
    right = write_csv("right.csv", "Inv\n1\n")

    assert cli_main.main(["reconcile", str(left), str(right)]) == ExitCode.SUCCESS


def test_main_maps_differences(write_csv: Callable[[str, str], Path]) -> None:
    left = write_csv("left.csv", "Inv\n1\n")
    right = write_csv("right.csv", "Inv\n2\n")

    code = cli_main.main(["reconcile", str(left), str(right), "--fail-on-diff"])

    assert code == ExitCode.DIFFERENCES


def test_main_maps_dataset_errors(tmp_path: Path) -> None:
    code = cli_main.main(
        ["reconcile", str(tmp_path / "a.csv"), str(tmp_path / "b.csv")]
    )

    assert code == ExitCode.IO


def test_main_reports_usage_errors(capsys: pytest.CaptureFixture[str]) -> None:
    assert cli_main.main(["reconcile"]) == 2
    assert "Missing argument" in capsys.readouterr().err


def test_main_renders_uncaught_reconcile_errors(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    def _boom(**_: object) -> None:
        raise ReconcileError("engine exploded")

    monkeypatch.setattr(cli_main, "app", _boom)

    assert cli_main.main([]) == ExitCode.RUNTIME
    assert "Error: engine exploded" in capsys.readouterr().err


@pytest.mark.parametrize(
    ("error", "code", "heading"),
    [
        (ConfigError("x"), ExitCode.CONFIG, "Configuration error"),
        (DatasetError("x"), ExitCode.IO, "Dataset error"),
        (ReconcileError("x", exit_code=ExitCode.IO), ExitCode.IO, "Error"),
    ],
)
def test_error_exit_codes(error: ReconcileError, code: int, heading: str) -> None:
    assert error.exit_code == code
    assert error.heading == heading
    assert str(error) == "x"


def test_config_error_is_a_value_error() -> None:
    assert isinstance(ConfigError("bad"), ValueError)
