"""Mini README: Tests for the ledger record types.

Covers enum coercion, timestamp formatting and the strict ``from_dict``
parsing that guards imports.
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from budgetapp.finance import (
    BalanceStatus,
    Category,
    LedgerSettings,
    LedgerState,
    Theme,
    Transaction,
    TransactionKind,
    ValidationError,
)


def test_transaction_kind_accepts_singular_and_plural() -> None:
    assert TransactionKind.from_str("Expense") is TransactionKind.EXPENSE
    assert TransactionKind.from_str("expenses") is TransactionKind.EXPENSE
    assert TransactionKind.from_str(" income ") is TransactionKind.INCOME
    with pytest.raises(ValidationError):
        TransactionKind.from_str("savings")


def test_theme_from_str_normalises_case() -> None:
    assert Theme.from_str("Dark") is Theme.DARK
    with pytest.raises(ValidationError):
        Theme.from_str("blue")


def test_balance_status_classify() -> None:
    assert BalanceStatus.classify(0.01) is BalanceStatus.POSITIVE
    assert BalanceStatus.classify(-0.01) is BalanceStatus.NEGATIVE
    assert BalanceStatus.classify(0) is BalanceStatus.ZERO


def test_transaction_dict_uses_utc_millisecond_timestamps() -> None:
    entry = Transaction(
        id=1,
        description="Salary",
        amount=2500.0,
        date=datetime(2024, 5, 1, 9, 30, 15, 123456, tzinfo=timezone.utc),
    )

    payload = entry.as_dict()
    assert payload == {
        "id": 1,
        "description": "Salary",
        "amount": 2500.0,
        "date": "2024-05-01T09:30:15.123Z",
    }
    parsed = Transaction.from_dict(payload)
    assert parsed.date == datetime(2024, 5, 1, 9, 30, 15, 123000, tzinfo=timezone.utc)


def test_transaction_from_dict_rejects_non_numeric_amounts() -> None:
    payload = {"id": 1, "description": "x", "amount": "12", "date": "2024-01-01T00:00:00Z"}
    with pytest.raises(ValueError):
        Transaction.from_dict(payload)
    with pytest.raises(ValueError):
        Transaction.from_dict({**payload, "amount": 12, "id": 1.5})


def test_category_spent_defaults_to_zero() -> None:
    category = Category.from_dict({"id": 3, "name": "Food", "budget": 200})
    assert category.spent == 0
    assert category.as_dict() == {"id": 3, "name": "Food", "budget": 200.0, "spent": 0.0}


def test_settings_fill_missing_keys_from_defaults() -> None:
    defaults = LedgerSettings(currency="£", theme=Theme.DARK)

    settings = LedgerSettings.from_dict({"theme": "light"}, defaults)

    assert settings.currency == "£"
    assert settings.theme is Theme.LIGHT


def test_ledger_state_snapshot_is_independent() -> None:
    state = LedgerState.default(currency="€")
    copy = state.snapshot()
    copy.income.append(
        Transaction(id=1, description="x", amount=1.0, date=datetime(2024, 1, 1, tzinfo=timezone.utc))
    )
    copy.settings.currency = "$"

    assert state.income == []
    assert state.settings.currency == "€"


def test_ledger_state_highest_id_spans_collections() -> None:
    state = LedgerState.from_dict(
        {
            "income": [{"id": 5, "description": "a", "amount": 1, "date": "2024-01-01T00:00:00Z"}],
            "expenses": [],
            "categories": [{"id": 9, "name": "b", "budget": 2, "spent": 0}],
            "settings": {"currency": "$", "theme": "light"},
        }
    )
    assert state.highest_id() == 9
    assert LedgerState().highest_id() == 0
