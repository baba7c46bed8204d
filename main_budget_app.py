"""Mini README: Entry point script for the budget tracker.

Runs the Typer command group from ``budgetapp.interface.cli``. Use
``python main_budget_app.py run`` to start the web service or any of the
ledger commands (``summary``, ``add-income``, ``export`` ...) to work with
the saved data directly from a terminal.
"""

from __future__ import annotations

from budgetapp.interface.cli import cli

if __name__ == "__main__":
    cli()
