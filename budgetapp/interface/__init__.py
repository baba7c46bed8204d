"""Mini README: Interfaces (web and CLI) for the budget tracker.

Exports the FastAPI application factory. The Typer command group lives in
``budgetapp.interface.cli`` and is imported lazily by the launcher script.
"""

from .web_app import create_application

__all__ = ["create_application"]
