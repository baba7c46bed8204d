"""Mini README: Error types raised by the ledger store.

Structure:
    * LedgerError - common base so callers can catch every ledger failure.
    * ValidationError - rejected user input; nothing was changed.
    * DataImportError - an import document could not be used; nothing was changed.
    * PersistenceError - the persistence slot could not be read or written.
"""

from __future__ import annotations


class LedgerError(Exception):
    """Base class for failures reported by the ledger store."""


class ValidationError(LedgerError, ValueError):
    """Raised when a description, name, amount, budget or theme is invalid."""


class DataImportError(LedgerError, ValueError):
    """Raised when imported text is not a usable ledger document."""


class PersistenceError(LedgerError):
    """Raised when the persistence slot cannot be accessed."""
