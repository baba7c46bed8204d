"""Mini README: Record types making up the budget ledger.

Structure:
    * TransactionKind - enum naming the income and expense collections.
    * Theme - enum of display modes the interface can render.
    * BalanceStatus - tri-state classification of the running balance.
    * Transaction - immutable income or expense entry.
    * Category - named spending bucket with a budget.
    * LedgerSettings - mutable currency/theme singleton.
    * LedgerState - aggregate root persisted as a single JSON document.

Every record converts to and from the JSON shape stored in the persistence
slot via ``as_dict``/``from_dict``. ``from_dict`` is strict about structure
so malformed documents are rejected before they reach the store.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from .errors import ValidationError


class TransactionKind(str, Enum):
    """Enumerate the two transaction collections."""

    INCOME = "income"
    EXPENSE = "expenses"

    @classmethod
    def from_str(cls, value: str) -> "TransactionKind":
        """Accept the collection name in either singular or plural form."""

        try:
            normalised = value.strip().lower()
        except AttributeError as error:
            raise ValidationError(f"Unsupported transaction kind: {value}") from error
        if normalised in {"expense", "expenses"}:
            return cls.EXPENSE
        if normalised == "income":
            return cls.INCOME
        raise ValidationError(f"Unsupported transaction kind: {value}")


class Theme(str, Enum):
    """Display modes understood by the presentation layer."""

    LIGHT = "light"
    DARK = "dark"

    @classmethod
    def from_str(cls, value: str) -> "Theme":
        """Coerce arbitrary casing into a valid theme."""

        try:
            return cls(value.strip().lower())
        except (ValueError, AttributeError) as error:
            raise ValidationError(f"Unsupported theme: {value}") from error


class BalanceStatus(str, Enum):
    """Sign of the running balance used for visual emphasis."""

    POSITIVE = "positive"
    NEGATIVE = "negative"
    ZERO = "zero"

    @classmethod
    def classify(cls, balance: float) -> "BalanceStatus":
        if balance > 0:
            return cls.POSITIVE
        if balance < 0:
            return cls.NEGATIVE
        return cls.ZERO


def format_timestamp(moment: datetime) -> str:
    """Render a timestamp as UTC ISO-8601 with millisecond precision."""

    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: object) -> datetime:
    """Parse ISO strings (including a trailing ``Z``) or datetime instances."""

    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        return datetime.fromisoformat(text)
    raise ValueError("Dates must be provided as ISO strings or datetime instances.")


def _number(value: object, label: str) -> float:
    """Coerce a stored JSON number, rejecting booleans and non-finite values."""

    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{label} must be a number, got {value!r}")
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"{label} must be finite")
    return number


def _identifier(value: object) -> int:
    if (
        isinstance(value, bool)
        or not isinstance(value, (int, float))
        or (isinstance(value, float) and not math.isfinite(value))
        or int(value) != value
    ):
        raise ValueError(f"Identifiers must be integers, got {value!r}")
    return int(value)


@dataclass(frozen=True, slots=True)
class Transaction:
    """Represent a single income or expense entry."""

    id: int
    description: str
    amount: float
    date: datetime

    def as_dict(self) -> Dict[str, object]:
        """Export the transaction with serialisable values."""

        return {
            "id": self.id,
            "description": self.description,
            "amount": self.amount,
            "date": format_timestamp(self.date),
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Transaction":
        return cls(
            id=_identifier(payload["id"]),
            description=str(payload["description"]),
            amount=_number(payload["amount"], "amount"),
            date=parse_timestamp(payload["date"]),
        )


@dataclass(frozen=True, slots=True)
class Category:
    """Spending bucket; ``spent`` is stored as entered and never recomputed."""

    id: int
    name: str
    budget: float
    spent: float = 0.0

    def as_dict(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "name": self.name,
            "budget": self.budget,
            "spent": self.spent,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Category":
        return cls(
            id=_identifier(payload["id"]),
            name=str(payload["name"]),
            budget=_number(payload["budget"], "budget"),
            spent=_number(payload.get("spent", 0), "spent"),
        )


@dataclass(slots=True)
class LedgerSettings:
    """Display preferences that survive clearing the ledger."""

    currency: str = "$"
    theme: Theme = Theme.LIGHT

    def as_dict(self) -> Dict[str, object]:
        return {"currency": self.currency, "theme": self.theme.value}

    @classmethod
    def from_dict(
        cls, payload: Mapping[str, Any], defaults: Optional["LedgerSettings"] = None
    ) -> "LedgerSettings":
        """Build settings, keeping defaults for keys the payload omits."""

        defaults = defaults or cls()
        currency = payload.get("currency", defaults.currency)
        if not isinstance(currency, str):
            raise ValueError(f"currency must be a string, got {currency!r}")
        return cls(
            currency=currency,
            theme=Theme.from_str(payload.get("theme", defaults.theme.value)),
        )


def _unique(records: List[Any], label: str) -> List[Any]:
    seen = set()
    for record in records:
        if record.id in seen:
            raise ValueError(f"Duplicate {label} id {record.id}")
        seen.add(record.id)
    return records


def _records(payload: object, label: str) -> List[Mapping[str, Any]]:
    if not isinstance(payload, list) or not all(isinstance(item, Mapping) for item in payload):
        raise ValueError(f"'{label}' must be a list of objects")
    return payload


@dataclass(slots=True)
class LedgerState:
    """Aggregate root holding every collection plus the settings record."""

    income: List[Transaction] = field(default_factory=list)
    expenses: List[Transaction] = field(default_factory=list)
    categories: List[Category] = field(default_factory=list)
    settings: LedgerSettings = field(default_factory=LedgerSettings)

    def transactions(self, kind: TransactionKind) -> List[Transaction]:
        """Return the live list backing the requested collection."""

        return self.income if kind is TransactionKind.INCOME else self.expenses

    def snapshot(self) -> "LedgerState":
        """Copy the aggregate; records are immutable so lists are copied shallowly."""

        return LedgerState(
            income=list(self.income),
            expenses=list(self.expenses),
            categories=list(self.categories),
            settings=LedgerSettings(self.settings.currency, self.settings.theme),
        )

    def highest_id(self) -> int:
        """Largest identifier in use across every collection, or zero."""

        ids = [record.id for record in (*self.income, *self.expenses, *self.categories)]
        return max(ids, default=0)

    def as_dict(self) -> Dict[str, object]:
        """Export the aggregate in the persisted JSON shape."""

        return {
            "income": [entry.as_dict() for entry in self.income],
            "expenses": [entry.as_dict() for entry in self.expenses],
            "categories": [category.as_dict() for category in self.categories],
            "settings": self.settings.as_dict(),
        }

    @classmethod
    def from_dict(
        cls,
        payload: Mapping[str, Any],
        *,
        default_settings: Optional[LedgerSettings] = None,
    ) -> "LedgerState":
        """Build an aggregate from a complete document.

        Raises ``ValueError`` (or ``KeyError``/``TypeError`` for malformed
        records) when the document does not describe a valid ledger.
        """

        settings = payload["settings"]
        if not isinstance(settings, Mapping):
            raise ValueError("'settings' must be an object")
        return cls(
            income=_unique(
                [Transaction.from_dict(item) for item in _records(payload["income"], "income")],
                "income",
            ),
            expenses=_unique(
                [Transaction.from_dict(item) for item in _records(payload["expenses"], "expenses")],
                "expense",
            ),
            categories=_unique(
                [Category.from_dict(item) for item in _records(payload["categories"], "categories")],
                "category",
            ),
            settings=LedgerSettings.from_dict(settings, default_settings),
        )

    @classmethod
    def default(cls, *, currency: str = "$", theme: Theme = Theme.LIGHT) -> "LedgerState":
        return cls(settings=LedgerSettings(currency=currency, theme=theme))
