"""Command line interface for recontab."""

from recontab.cli.app import app

__all__ = ["app"]
