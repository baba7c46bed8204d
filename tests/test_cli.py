"""Mini README: Tests for the Typer command line.

Each test drives the CLI against a temporary data directory and checks the
ledger file it leaves behind.
"""

from __future__ import annotations

import json
from datetime import date

from typer.testing import CliRunner

from budgetapp.finance import JsonFileSlot, LedgerStore
from budgetapp.interface.cli import cli

runner = CliRunner()


def _invoke(data_directory, *args: str):
    return runner.invoke(cli, ["--data-directory", str(data_directory), *args])


def _load(data_directory) -> LedgerStore:
    return LedgerStore(JsonFileSlot(data_directory / "budget_app.json"))


def test_add_commands_persist_entries(tmp_path) -> None:
    assert _invoke(tmp_path, "add-income", "Salary", "2500").exit_code == 0
    assert _invoke(tmp_path, "add-expense", "Rent", "900").exit_code == 0
    assert _invoke(tmp_path, "add-category", "Food", "300").exit_code == 0

    store = _load(tmp_path)
    assert store.balance() == 1600
    assert [category.name for category in store.categories] == ["Food"]

    result = _invoke(tmp_path, "summary", "--entries")
    assert "Balance:  $1600.00 (positive)" in result.output
    assert "Salary" in result.output


def test_invalid_amount_exits_with_error(tmp_path) -> None:
    result = _invoke(tmp_path, "add-expense", "Rent", "abc")

    assert result.exit_code == 1
    assert _load(tmp_path).expenses == []


def test_remove_command(tmp_path) -> None:
    _invoke(tmp_path, "add-income", "Salary", "100")
    entry_id = _load(tmp_path).income[0].id

    result = _invoke(tmp_path, "remove", "income", str(entry_id))

    assert result.exit_code == 0
    assert _load(tmp_path).income == []
    assert "Nothing with id" in _invoke(tmp_path, "remove", "income", str(entry_id)).output


def test_settings_commands(tmp_path) -> None:
    _invoke(tmp_path, "set-currency", "€")
    _invoke(tmp_path, "set-theme", "dark")

    settings = _load(tmp_path).settings
    assert settings.currency == "€"
    assert settings.theme.value == "dark"
    assert _invoke(tmp_path, "set-theme", "neon").exit_code == 1


def test_export_and_import_commands(tmp_path) -> None:
    source = tmp_path / "source"
    target = tmp_path / "target"
    _invoke(source, "add-income", "Salary", "100")

    result = _invoke(source, "export", str(tmp_path / "exports"))
    exported = tmp_path / "exports" / f"budget-data-{date.today().isoformat()}.json"

    assert result.exit_code == 0
    assert json.loads(exported.read_text(encoding="utf-8"))["income"][0]["description"] == "Salary"
    assert _invoke(target, "import", str(exported)).exit_code == 0
    assert _load(target).total_income() == 100


def test_import_rejects_bad_file(tmp_path) -> None:
    bad = tmp_path / "bad.json"
    bad.write_text("not json", encoding="utf-8")

    assert _invoke(tmp_path, "import", str(bad)).exit_code == 1


def test_clear_asks_for_confirmation(tmp_path) -> None:
    _invoke(tmp_path, "add-income", "Salary", "100")
    _invoke(tmp_path, "set-currency", "£")

    declined = runner.invoke(cli, ["--data-directory", str(tmp_path), "clear"], input="n\n")
    assert declined.exit_code == 0
    assert len(_load(tmp_path).income) == 1

    assert _invoke(tmp_path, "clear", "--yes").exit_code == 0
    store = _load(tmp_path)
    assert store.income == []
    assert store.settings.currency == "£"
