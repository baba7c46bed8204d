"""Mini README: Finance core of the budget tracker.

This package owns the ledger of income, expenses and budget categories.
``LedgerStore`` is the single entry point callers use to change or query
the data; the record types and error classes are re-exported so the web
and CLI layers can import everything from one place.
"""

from .errors import DataImportError, LedgerError, PersistenceError, ValidationError
from .ledger import LedgerStore, export_filename
from .models import (
    BalanceStatus,
    Category,
    LedgerSettings,
    LedgerState,
    Theme,
    Transaction,
    TransactionKind,
)
from .storage import JsonFileSlot, MemorySlot, PersistenceSlot

__all__ = [
    "BalanceStatus",
    "Category",
    "DataImportError",
    "JsonFileSlot",
    "LedgerError",
    "LedgerSettings",
    "LedgerState",
    "LedgerStore",
    "MemorySlot",
    "PersistenceError",
    "PersistenceSlot",
    "Theme",
    "Transaction",
    "TransactionKind",
    "ValidationError",
    "export_filename",
]
