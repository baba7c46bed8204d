"""Mini README: Typer command group for the budget tracker.

Structure:
    * cli - Typer application with one command per ledger operation.
    * run - starts the FastAPI service with uvicorn.

Every command opens the file-backed ledger described by the settings (or
``--data-directory``), performs one operation and exits. Rejected input is
reported on stderr with exit code 1 and leaves the ledger untouched.
"""

from __future__ import annotations

import os
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

import typer
import uvicorn

from ..configuration import get_settings
from ..finance import LedgerError, LedgerStore, TransactionKind, export_filename
from ..logging_utils import configure_root_logger, get_logger

LOGGER = get_logger(__name__)

cli = typer.Typer(help="Track income, expenses and category budgets.")


@cli.callback()
def main(
    ctx: typer.Context,
    data_directory: Optional[Path] = typer.Option(
        None, help="Directory holding the ledger file (overrides BUDGETAPP_DATA_DIRECTORY)."
    ),
) -> None:
    """Budget tracker command line."""

    ctx.obj = {"data_directory": data_directory}


def _open_store(ctx: typer.Context) -> LedgerStore:
    settings = get_settings()
    override = (ctx.obj or {}).get("data_directory")
    if override:
        directory = Path(override).expanduser().resolve()
        directory.mkdir(parents=True, exist_ok=True)
        settings = settings.model_copy(update={"data_directory": directory})
    LOGGER.debug("Opening ledger at %s", settings.storage_path)
    return LedgerStore.from_settings(settings)


@contextmanager
def _reported_errors() -> Iterator[None]:
    """Turn ledger errors into a message and a non-zero exit code."""

    try:
        yield
    except LedgerError as error:
        typer.secho(str(error), err=True, fg=typer.colors.RED)
        raise typer.Exit(code=1) from error


@cli.command()
def run(
    ctx: typer.Context,
    host: str = typer.Option(None, help="Host interface to bind."),
    port: int = typer.Option(None, help="Port to listen on."),
    production: bool = typer.Option(
        False, help="Use production server settings (disable auto-reload)."
    ),
) -> None:
    """Start the web service using uvicorn."""

    settings = get_settings()
    effective_host = host or settings.interface_host
    effective_port = port or settings.interface_port
    override = (ctx.obj or {}).get("data_directory")
    if override:
        # Reloaded workers only read settings from the environment.
        os.environ["BUDGETAPP_DATA_DIRECTORY"] = str(override)
    configure_root_logger(settings.effective_log_level)

    browser_host = "127.0.0.1" if effective_host in {"0.0.0.0", "::"} else effective_host
    typer.echo(
        f"Starting budget tracker on {effective_host}:{effective_port}.\n"
        f"API available at http://{browser_host}:{effective_port}/api/summary"
    )
    uvicorn.run(
        "budgetapp.interface.web_app:create_application",
        host=effective_host,
        port=effective_port,
        factory=True,
        reload=not production,
    )


@cli.command()
def summary(
    ctx: typer.Context,
    entries: bool = typer.Option(False, "--entries", help="List every entry and category too."),
) -> None:
    """Print totals and the current balance."""

    store = _open_store(ctx)
    figures = store.summary()
    formatted = figures["formatted"]
    typer.echo(f"Income:   {formatted['total_income']}")
    typer.echo(f"Expenses: {formatted['total_expenses']}")
    typer.echo(f"Balance:  {formatted['balance']} ({figures['balance_status']})")
    if not entries:
        return
    for kind in TransactionKind:
        typer.echo(f"\n[{kind.value}]")
        for entry in store.transactions(kind):
            typer.echo(f"  {entry.id}  {entry.description}  {store.format_currency(entry.amount)}")
    typer.echo("\n[categories]")
    for category in store.categories:
        typer.echo(
            f"  {category.id}  {category.name}  budget {store.format_currency(category.budget)}"
            f"  spent {store.format_currency(category.spent)}"
        )


@cli.command("add-income")
def add_income(ctx: typer.Context, description: str, amount: str) -> None:
    """Record an income entry."""

    store = _open_store(ctx)
    with _reported_errors():
        entry = store.add_income(description, amount)
    typer.echo(f"Added income {entry.id}: {entry.description} {store.format_currency(entry.amount)}")


@cli.command("add-expense")
def add_expense(ctx: typer.Context, description: str, amount: str) -> None:
    """Record an expense entry."""

    store = _open_store(ctx)
    with _reported_errors():
        entry = store.add_expense(description, amount)
    typer.echo(f"Added expense {entry.id}: {entry.description} {store.format_currency(entry.amount)}")


@cli.command("add-category")
def add_category(ctx: typer.Context, name: str, budget: str) -> None:
    """Create a spending category with a budget."""

    store = _open_store(ctx)
    with _reported_errors():
        category = store.add_category(name, budget)
    typer.echo(f"Added category {category.id}: {category.name} {store.format_currency(category.budget)}")


@cli.command()
def remove(
    ctx: typer.Context,
    collection: str = typer.Argument(..., help="income, expenses or categories"),
    item_id: int = typer.Argument(..., help="Identifier shown by 'summary --entries'."),
) -> None:
    """Remove an entry or category by id."""

    store = _open_store(ctx)
    with _reported_errors():
        if collection.strip().lower() == "categories":
            removed = store.remove_category(item_id)
        else:
            removed = store.remove_transaction(item_id, collection)
    typer.echo(f"Removed {item_id}." if removed else f"Nothing with id {item_id} in {collection}.")


@cli.command("set-currency")
def set_currency(ctx: typer.Context, symbol: str) -> None:
    """Change the currency prefix used for display."""

    store = _open_store(ctx)
    with _reported_errors():
        store.update_currency(symbol)
    typer.echo(f"Currency set to {symbol}")


@cli.command("set-theme")
def set_theme(ctx: typer.Context, theme: str) -> None:
    """Switch between the light and dark theme."""

    store = _open_store(ctx)
    with _reported_errors():
        settings = store.update_theme(theme)
    typer.echo(f"Theme set to {settings.theme.value}")


@cli.command("export")
def export_data(
    ctx: typer.Context,
    directory: Path = typer.Argument(Path("."), help="Where to write the export file."),
) -> None:
    """Write the whole ledger to budget-data-YYYY-MM-DD.json."""

    store = _open_store(ctx)
    target = directory / export_filename()
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(store.export_state(), encoding="utf-8")
    LOGGER.info("Exported ledger to %s", target)
    typer.echo(f"Exported to {target}")


@cli.command("import")
def import_data(
    ctx: typer.Context,
    source: Path = typer.Argument(..., exists=True, dir_okay=False, help="Exported JSON file."),
) -> None:
    """Merge an exported file over the current ledger."""

    store = _open_store(ctx)
    with _reported_errors():
        store.import_state(source.read_bytes())
    typer.echo("Data imported successfully!")


@cli.command()
def clear(
    ctx: typer.Context,
    yes: bool = typer.Option(False, "--yes", help="Skip the confirmation prompt."),
) -> None:
    """Delete all entries and categories, keeping settings."""

    if not yes and not typer.confirm(
        "Are you sure you want to clear all data? This action cannot be undone."
    ):
        typer.echo("Nothing cleared.")
        raise typer.Exit()
    store = _open_store(ctx)
    with _reported_errors():
        store.clear_all_data()
    typer.echo("All data cleared.")
