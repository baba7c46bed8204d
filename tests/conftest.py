"""Mini README: Shared pytest fixtures for the budget tracker tests.

Structure:
    * isolated_settings - points the cached settings at a temporary directory.
    * fixed_clock - deterministic clock so identifiers and dates are predictable.
    * store - in-memory ledger store using the fixed clock.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, Iterator

import pytest

from budgetapp.configuration import get_settings
from budgetapp.finance import LedgerStore, MemorySlot

FIXED_MOMENT = datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch) -> Iterator[None]:
    """Keep every test away from the real data directory."""

    monkeypatch.setenv("BUDGETAPP_DATA_DIRECTORY", str(tmp_path / "data"))
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def fixed_clock() -> Callable[[], datetime]:
    return lambda: FIXED_MOMENT


@pytest.fixture
def store(fixed_clock) -> LedgerStore:
    return LedgerStore(MemorySlot(), clock=fixed_clock)
