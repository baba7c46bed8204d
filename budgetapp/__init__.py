"""Mini README: Core package initializer for the budget tracker.

The tracker records income, expenses and budget categories in a single
ledger that is saved to local disk after every change. ``LedgerStore`` in
``budgetapp.finance`` is the public entry point; the interface package
wraps it in a FastAPI service and a Typer command line.
"""

from .logging_utils import get_logger

__version__ = "0.1.0"

__all__ = ["get_logger", "__version__"]
