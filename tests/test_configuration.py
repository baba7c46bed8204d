"""Mini README: Tests for environment-driven settings.

Confirms environment overrides, path expansion and that a store built from
settings honours the configured defaults and limits.
"""

from __future__ import annotations

import logging

import pytest
from pydantic import ValidationError as SettingsValidationError

from budgetapp.configuration import BudgetAppSettings, get_settings
from budgetapp.finance import LedgerStore, Theme, ValidationError


def test_settings_read_environment_overrides(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("BUDGETAPP_DEFAULT_CURRENCY", "€")
    monkeypatch.setenv("BUDGETAPP_DEFAULT_THEME", "Dark")
    monkeypatch.setenv("BUDGETAPP_MAX_AMOUNT", "500")
    get_settings.cache_clear()

    settings = get_settings()

    assert settings.default_currency == "€"
    assert settings.default_theme == "dark"
    assert settings.storage_path == tmp_path / "data" / "budget_app.json"
    assert (tmp_path / "data").is_dir()
    assert get_settings() is settings


def test_settings_reject_unknown_theme(monkeypatch) -> None:
    monkeypatch.setenv("BUDGETAPP_DEFAULT_THEME", "neon")

    with pytest.raises(SettingsValidationError):
        BudgetAppSettings()


def test_store_from_settings_applies_defaults_and_limits(tmp_path) -> None:
    settings = BudgetAppSettings(
        data_directory=tmp_path / "ledger",
        default_currency="£",
        default_theme="dark",
        max_amount=100,
        max_description_length=5,
    )
    store = LedgerStore.from_settings(settings)

    assert store.settings.currency == "£"
    assert store.settings.theme is Theme.DARK
    with pytest.raises(ValidationError):
        store.add_income("Salary", 50)
    with pytest.raises(ValidationError):
        store.add_income("Pay", 150)
    store.add_income("Pay", 100)
    assert (tmp_path / "ledger" / "budget_app.json").exists()


def test_production_flag() -> None:
    assert BudgetAppSettings(environment="Production").is_production
    assert not BudgetAppSettings().is_production


def test_log_level_follows_environment_unless_set() -> None:
    assert BudgetAppSettings().effective_log_level == logging.INFO
    assert BudgetAppSettings(environment="production").effective_log_level == logging.WARNING
    assert BudgetAppSettings(environment="production", log_level="DEBUG").effective_log_level == "DEBUG"


def test_amount_cap_is_unset_by_default() -> None:
    assert BudgetAppSettings().max_amount is None
