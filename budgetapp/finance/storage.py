"""Mini README: Persistence slots holding the serialised ledger.

Structure:
    * PersistenceSlot - abstract single-key store used by the ledger.
    * JsonFileSlot - keeps the slot inside a JSON file on local disk.
    * MemorySlot - process-local slot for tests and embedding.

A slot stores exactly one JSON-compatible document under a named key.
``load`` returns ``None`` when nothing was saved yet. Failures to read or
write are reported as ``PersistenceError`` so the store can surface them
distinctly from validation problems.
"""

from __future__ import annotations

import json
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional

from ..logging_utils import get_logger
from .errors import PersistenceError

LOGGER = get_logger(__name__)

DEFAULT_STORAGE_KEY = "budgetAppData"


class PersistenceSlot(ABC):
    """Single named key in a local key-value store."""

    def __init__(self, key: str = DEFAULT_STORAGE_KEY) -> None:
        self.key = key

    @abstractmethod
    def load(self) -> Optional[Dict[str, Any]]:
        """Return the stored document or ``None`` when the key is empty."""

    @abstractmethod
    def save(self, document: Dict[str, Any]) -> None:
        """Replace the stored document."""


class MemorySlot(PersistenceSlot):
    """Keep the document in memory, serialised so aliasing bugs surface."""

    def __init__(self, key: str = DEFAULT_STORAGE_KEY, initial: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(key)
        self._values: Dict[str, str] = {}
        if initial is not None:
            self._values[key] = json.dumps(initial)

    def load(self) -> Optional[Dict[str, Any]]:
        raw = self._values.get(self.key)
        if raw is None:
            return None
        return json.loads(raw)

    def save(self, document: Dict[str, Any]) -> None:
        try:
            self._values[self.key] = json.dumps(document)
        except (TypeError, ValueError) as error:
            raise PersistenceError(f"Ledger document is not serialisable: {error}") from error


class JsonFileSlot(PersistenceSlot):
    """Store the document under ``key`` inside a JSON object on disk.

    Other keys present in the file are preserved, so several slots can share
    one file. Writes go to a sibling temporary file first and are moved into
    place so a failed write never truncates the previous document.
    """

    def __init__(self, path: Path, key: str = DEFAULT_STORAGE_KEY) -> None:
        super().__init__(key)
        self.path = Path(path)

    def _read_file(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as handle:
                contents = json.load(handle)
        except (json.JSONDecodeError, OSError, UnicodeDecodeError) as error:
            raise PersistenceError(f"Could not read {self.path}: {error}") from error
        if not isinstance(contents, dict):
            raise PersistenceError(f"{self.path} does not contain a JSON object")
        return contents

    def load(self) -> Optional[Dict[str, Any]]:
        document = self._read_file().get(self.key)
        if document is None:
            LOGGER.debug("Slot '%s' in %s is empty", self.key, self.path)
            return None
        if not isinstance(document, dict):
            raise PersistenceError(f"Slot '{self.key}' in {self.path} does not hold an object")
        return document

    def save(self, document: Dict[str, Any]) -> None:
        try:
            contents = self._read_file()
        except PersistenceError:
            LOGGER.warning("Overwriting unreadable storage file %s", self.path)
            contents = {}
        contents[self.key] = document
        temporary = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with temporary.open("w", encoding="utf-8") as handle:
                json.dump(contents, handle, indent=2)
            os.replace(temporary, self.path)
        except (OSError, TypeError, ValueError) as error:
            if temporary.exists():
                temporary.unlink()
            raise PersistenceError(f"Could not write {self.path}: {error}") from error
        LOGGER.debug("Persisted slot '%s' to %s", self.key, self.path)
