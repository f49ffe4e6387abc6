"""Shared pytest fixtures for the recontab test-suite."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from recontab.reconcile.models import DatasetConfig, ReconcileConfig


@pytest.fixture(autouse=True)
def isolate_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep user and project ``recontab.toml`` files out of every test."""

    home = tmp_path / "home"
    home.mkdir()
    project = tmp_path / "project"
    project.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("RECONTAB_PROJECT_ROOT", str(project))
    monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
    monkeypatch.delenv("RECONTAB_PROFILE", raising=False)


@pytest.fixture
def make_config() -> Callable[..., ReconcileConfig]:
    """Build a config that uses the same columns on both sides."""

    def _make(
        keys: tuple[str, ...] = ("Inv",),
        *,
        amount: str | None = None,
        date: str | None = None,
        tolerance: float = 0.0,
    ) -> ReconcileConfig:
        side = DatasetConfig(key_columns=keys, amount_column=amount, date_column=date)
        return ReconcileConfig(left=side, right=side, amount_tolerance=tolerance)

    return _make


@pytest.fixture
def write_csv(tmp_path: Path) -> Callable[[str, str], Path]:
    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path

    return _write
