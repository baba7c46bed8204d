"""Mini README: Ledger store owning the budget tracker's state.

Structure:
    * LedgerStore - validated mutations, derived totals, import/export.
    * export_filename - dated file name used for exported ledgers.

Every mutation follows the same cycle: validate the raw input, change the
in-memory ``LedgerState``, write the whole aggregate to the persistence slot
and return. When the write fails the previous state is restored before the
``PersistenceError`` propagates, so memory and disk never disagree. Loading
and importing use a shallow merge: top-level fields present in the incoming
document replace the current ones wholesale, absent fields are kept.
"""

from __future__ import annotations

import json
import math
from datetime import date, datetime, timezone
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Mapping, Optional, Union

from ..logging_utils import get_logger
from .errors import DataImportError, PersistenceError, ValidationError
from .models import (
    BalanceStatus,
    Category,
    LedgerSettings,
    LedgerState,
    Theme,
    Transaction,
    TransactionKind,
)
from .storage import JsonFileSlot, PersistenceSlot

if TYPE_CHECKING:
    from ..configuration import BudgetAppSettings

LOGGER = get_logger(__name__)

ThemeListener = Callable[[Theme], None]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def export_filename(on: Optional[date] = None) -> str:
    """Return the download name for an export made on the given day."""

    on = on or date.today()
    return f"budget-data-{on.isoformat()}.json"


class LedgerStore:
    """Own the ledger aggregate and guarantee each change is persisted."""

    def __init__(
        self,
        slot: PersistenceSlot,
        *,
        default_currency: str = "$",
        default_theme: Union[Theme, str] = Theme.LIGHT,
        max_amount: Optional[float] = None,
        max_description_length: int = 100,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._slot = slot
        self._default_currency = default_currency
        self._default_theme = Theme.from_str(default_theme) if isinstance(default_theme, str) else default_theme
        self._max_amount = max_amount
        self._max_description_length = max_description_length
        self._clock = clock
        self._theme_listeners: List[ThemeListener] = []
        self._state = self._load_initial_state()
        self._last_id = self._state.highest_id()
        LOGGER.debug(
            "Ledger store initialised with %s income, %s expenses, %s categories",
            len(self._state.income),
            len(self._state.expenses),
            len(self._state.categories),
        )

    @classmethod
    def from_settings(cls, settings: "BudgetAppSettings") -> "LedgerStore":
        """Build a file-backed store from application settings."""

        return cls(
            JsonFileSlot(settings.storage_path, settings.storage_key),
            default_currency=settings.default_currency,
            default_theme=settings.default_theme,
            max_amount=settings.max_amount,
            max_description_length=settings.max_description_length,
        )

    # ------------------------------------------------------------------
    # Loading and persistence
    # ------------------------------------------------------------------
    def _default_settings(self) -> LedgerSettings:
        return LedgerSettings(currency=self._default_currency, theme=self._default_theme)

    def _merge(self, base: LedgerState, overrides: Mapping[str, Any]) -> LedgerState:
        """Shallow-merge a document over ``base`` and rebuild the aggregate."""

        document: Dict[str, Any] = base.as_dict()
        document.update(overrides)
        return LedgerState.from_dict(document, default_settings=self._default_settings())

    def _load_initial_state(self) -> LedgerState:
        default = LedgerState.default(currency=self._default_currency, theme=self._default_theme)
        try:
            saved = self._slot.load()
        except PersistenceError as error:
            LOGGER.warning("Saved ledger could not be read, starting empty: %s", error)
            return default
        if saved is None:
            LOGGER.info("No saved ledger found, starting with an empty one")
            return default
        try:
            return self._merge(default, saved)
        except (KeyError, OverflowError, TypeError, ValueError) as error:
            LOGGER.warning("Saved ledger is malformed, starting empty: %s", error)
            return default

    def _commit(self, previous: LedgerState, action: str) -> None:
        """Persist the current state, restoring ``previous`` if the write fails."""

        try:
            self._slot.save(self._state.as_dict())
        except PersistenceError:
            LOGGER.error("Persisting ledger after %s failed; changes rolled back", action)
            self._state = previous
            raise

    def _next_id(self) -> int:
        """Return a timestamp-like identifier that never repeats within the store."""

        millis = int(self._clock().timestamp() * 1000)
        self._last_id = max(self._last_id + 1, millis)
        return self._last_id

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------
    def _clean_text(self, value: object, label: str) -> str:
        if not isinstance(value, str):
            raise ValidationError(f"Please enter a valid {label}.")
        text = value.strip()
        if not text:
            raise ValidationError(f"Please enter a valid {label}.")
        if len(text) > self._max_description_length:
            raise ValidationError(
                f"The {label} must be at most {self._max_description_length} characters."
            )
        return text

    def _positive_amount(self, value: object, label: str) -> float:
        if isinstance(value, bool):
            raise ValidationError(f"Please enter a valid {label}.")
        try:
            number = float(value.strip() if isinstance(value, str) else value)  # type: ignore[arg-type]
        except (TypeError, ValueError) as error:
            raise ValidationError(f"Please enter a valid {label}.") from error
        if not math.isfinite(number) or number <= 0:
            raise ValidationError(f"The {label} must be a number greater than zero.")
        if self._max_amount is not None and number > self._max_amount:
            raise ValidationError(f"The {label} must not exceed {self._max_amount:.2f}.")
        return number

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------
    @property
    def state(self) -> LedgerState:
        """Return a copy of the aggregate for rendering or inspection."""

        return self._state.snapshot()

    @property
    def income(self) -> List[Transaction]:
        return list(self._state.income)

    @property
    def expenses(self) -> List[Transaction]:
        return list(self._state.expenses)

    @property
    def categories(self) -> List[Category]:
        return list(self._state.categories)

    @property
    def settings(self) -> LedgerSettings:
        current = self._state.settings
        return LedgerSettings(currency=current.currency, theme=current.theme)

    def transactions(self, kind: Union[TransactionKind, str]) -> List[Transaction]:
        return list(self._state.transactions(_kind(kind)))

    def find_transaction(self, transaction_id: int, kind: Union[TransactionKind, str]) -> Optional[Transaction]:
        """Return the matching transaction or ``None`` when it does not exist."""

        for entry in self._state.transactions(_kind(kind)):
            if entry.id == transaction_id:
                return entry
        return None

    def find_category(self, category_id: int) -> Optional[Category]:
        for category in self._state.categories:
            if category.id == category_id:
                return category
        return None

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------
    def add_transaction(
        self,
        description: object,
        amount: object,
        kind: Union[TransactionKind, str] = TransactionKind.INCOME,
    ) -> Transaction:
        """Validate raw input and append a new income or expense entry."""

        kind = _kind(kind)
        cleaned = self._clean_text(description, "description")
        value = self._positive_amount(amount, "amount")
        transaction = Transaction(
            id=self._next_id(),
            description=cleaned,
            amount=value,
            date=self._clock(),
        )
        previous = self._state.snapshot()
        self._state.transactions(kind).append(transaction)
        self._commit(previous, f"adding {kind.value} entry")
        LOGGER.info("Recorded %s entry %s (%s)", kind.value, transaction.id, cleaned)
        return transaction

    def add_income(self, description: object, amount: object) -> Transaction:
        return self.add_transaction(description, amount, TransactionKind.INCOME)

    def add_expense(self, description: object, amount: object) -> Transaction:
        return self.add_transaction(description, amount, TransactionKind.EXPENSE)

    def remove_transaction(self, transaction_id: int, kind: Union[TransactionKind, str]) -> bool:
        """Remove an entry by id; unknown ids are ignored. Returns ``True`` if removed."""

        kind = _kind(kind)
        previous = self._state.snapshot()
        entries = self._state.transactions(kind)
        remaining = [entry for entry in entries if entry.id != transaction_id]
        removed = len(remaining) != len(entries)
        entries[:] = remaining
        self._commit(previous, f"removing {kind.value} entry")
        if removed:
            LOGGER.info("Removed %s entry %s", kind.value, transaction_id)
        else:
            LOGGER.debug("No %s entry %s to remove", kind.value, transaction_id)
        return removed

    def remove_income(self, transaction_id: int) -> bool:
        return self.remove_transaction(transaction_id, TransactionKind.INCOME)

    def remove_expense(self, transaction_id: int) -> bool:
        return self.remove_transaction(transaction_id, TransactionKind.EXPENSE)

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------
    def add_category(self, name: object, budget: object) -> Category:
        """Validate raw input and append a category with nothing spent."""

        cleaned = self._clean_text(name, "category name")
        value = self._positive_amount(budget, "budget")
        category = Category(id=self._next_id(), name=cleaned, budget=value, spent=0.0)
        previous = self._state.snapshot()
        self._state.categories.append(category)
        self._commit(previous, "adding category")
        LOGGER.info("Created category %s (%s)", category.id, cleaned)
        return category

    def remove_category(self, category_id: int) -> bool:
        previous = self._state.snapshot()
        categories = self._state.categories
        remaining = [category for category in categories if category.id != category_id]
        removed = len(remaining) != len(categories)
        categories[:] = remaining
        self._commit(previous, "removing category")
        if removed:
            LOGGER.info("Removed category %s", category_id)
        return removed

    # ------------------------------------------------------------------
    # Calculations
    # ------------------------------------------------------------------
    def total_income(self) -> float:
        return math.fsum(entry.amount for entry in self._state.income)

    def total_expenses(self) -> float:
        return math.fsum(entry.amount for entry in self._state.expenses)

    def balance(self) -> float:
        return self.total_income() - self.total_expenses()

    def balance_status(self) -> BalanceStatus:
        return BalanceStatus.classify(self.balance())

    def format_currency(self, amount: float) -> str:
        """Prefix the configured currency and render exactly two decimals."""

        if amount == 0:
            amount = 0.0
        return f"{self._state.settings.currency}{amount:.2f}"

    def summary(self) -> Dict[str, object]:
        """Bundle the figures the presentation layer shows after each change."""

        total_income = self.total_income()
        total_expenses = self.total_expenses()
        balance = total_income - total_expenses
        return {
            "total_income": total_income,
            "total_expenses": total_expenses,
            "balance": balance,
            "balance_status": BalanceStatus.classify(balance).value,
            "formatted": {
                "total_income": self.format_currency(total_income),
                "total_expenses": self.format_currency(total_expenses),
                "balance": self.format_currency(balance),
            },
            "counts": {
                "income": len(self._state.income),
                "expenses": len(self._state.expenses),
                "categories": len(self._state.categories),
            },
        }

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------
    def add_theme_listener(self, listener: ThemeListener) -> None:
        """Register a callback invoked with the new theme whenever it changes.

        Listeners run after the change is persisted; an error raised by a
        listener propagates to the caller but does not undo the change.
        """

        self._theme_listeners.append(listener)

    def _notify_theme(self) -> None:
        theme = self._state.settings.theme
        for listener in self._theme_listeners:
            listener(theme)

    def update_currency(self, currency: str) -> LedgerSettings:
        previous = self._state.snapshot()
        self._state.settings.currency = str(currency)
        self._commit(previous, "updating currency")
        LOGGER.info("Currency set to %r", self._state.settings.currency)
        return self.settings

    def update_theme(self, theme: Union[Theme, str]) -> LedgerSettings:
        """Switch the display theme and notify registered listeners."""

        selected = theme if isinstance(theme, Theme) else Theme.from_str(theme)
        previous = self._state.snapshot()
        self._state.settings.theme = selected
        self._commit(previous, "updating theme")
        LOGGER.info("Theme set to %s", selected.value)
        self._notify_theme()
        return self.settings

    # ------------------------------------------------------------------
    # Whole-state transfer
    # ------------------------------------------------------------------
    def export_state(self) -> str:
        """Return the pretty-printed JSON of the full ledger."""

        return json.dumps(self._state.as_dict(), indent=2)

    def import_state(self, text: Union[str, bytes]) -> LedgerState:
        """Merge an exported document over the current ledger.

        Top-level fields found in the document replace the current ones; the
        rest are left alone. Nothing changes when the text is not valid JSON
        or does not describe a ledger.
        """

        try:
            document = json.loads(text)
        except (json.JSONDecodeError, UnicodeDecodeError, TypeError) as error:
            raise DataImportError("Error importing data. Please check the file format.") from error
        if not isinstance(document, dict):
            raise DataImportError("Imported data must be a JSON object.")
        try:
            merged = self._merge(self._state, document)
        except (KeyError, OverflowError, TypeError, ValueError) as error:
            raise DataImportError(f"Imported data is not a valid ledger: {error}") from error

        previous = self._state.snapshot()
        self._state = merged
        self._commit(previous, "importing data")
        self._last_id = max(self._last_id, merged.highest_id())
        LOGGER.info("Imported ledger fields: %s", ", ".join(sorted(document)) or "none")
        if merged.settings.theme is not previous.settings.theme:
            self._notify_theme()
        return self.state

    def clear_all_data(self) -> LedgerState:
        """Empty every collection while keeping the current settings.

        Confirmation is the caller's job; this method clears unconditionally.
        """

        previous = self._state.snapshot()
        current = self._state.settings
        self._state = LedgerState.default(currency=current.currency, theme=current.theme)
        self._commit(previous, "clearing data")
        LOGGER.info("Cleared all ledger data")
        return self.state


def _kind(kind: Union[TransactionKind, str]) -> TransactionKind:
    return kind if isinstance(kind, TransactionKind) else TransactionKind.from_str(kind)
