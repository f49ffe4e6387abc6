"""Runtime package for the recontab reconciliation toolkit."""

from . import reconcile, tabular

__all__ = [
    "__version__",
    "reconcile",
    "tabular",
]

__version__ = "1.0.0"
