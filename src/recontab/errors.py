"""Error types shared by the reconciliation engine and the CLI."""

from __future__ import annotations

from enum import IntEnum


class ExitCode(IntEnum):
    """Standardised exit codes for the recontab CLI."""

    SUCCESS = 0
    DIFFERENCES = 1
    IO = 2
    CONFIG = 3
    RUNTIME = 5


class ReconcileError(Exception):
    """Base for predictable errors that surface to users."""

    exit_code: ExitCode = ExitCode.RUNTIME
    label = "Error"

    def __init__(
        self, message: str, *, exit_code: ExitCode | int | None = None
    ) -> None:
        super().__init__(message)
        self.message = message
        if exit_code is None:
            exit_code = type(self).exit_code
        self.exit_code = ExitCode(exit_code)

    def __str__(self) -> str:
        return self.message

    @property
    def heading(self) -> str:
        """Return a short label describing the error class."""

        return type(self).label


class ConfigError(ReconcileError, ValueError):
    """Raised when a reconciliation configuration cannot be used."""

    exit_code = ExitCode.CONFIG
    label = "Configuration error"


class DatasetError(ReconcileError):
    """Raised when a tabular dataset cannot be read or parsed."""

    exit_code = ExitCode.IO
    label = "Dataset error"


__all__ = [
    "ConfigError",
    "DatasetError",
    "ExitCode",
    "ReconcileError",
]
