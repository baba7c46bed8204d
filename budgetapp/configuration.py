"""Mini README: Centralised configuration for the budget tracker.

Structure:
    * BudgetAppSettings - Pydantic settings model read from the environment.
    * get_settings - cached accessor so validation happens once per process.

Usage:
    Every field can be overridden with a ``BUDGETAPP_`` prefixed environment
    variable or a ``.env`` file, e.g. ``BUDGETAPP_DATA_DIRECTORY=~/budget``.
    The validation limits mirror the bounds the original browser app
    advertised for amounts and descriptions.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional, Union

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .finance.models import Theme
from .logging_utils import level_for_environment


class BudgetAppSettings(BaseSettings):
    """Runtime configuration for the budget tracker."""

    model_config = SettingsConfigDict(
        env_prefix="BUDGETAPP_",
        env_file=".env",
        case_sensitive=False,
    )

    environment: str = Field(
        "development",
        description="Environment label controlling logging verbosity.",
    )
    data_directory: Path = Field(
        Path("data"),
        description="Directory holding the persisted ledger file.",
    )
    storage_filename: str = Field(
        "budget_app.json",
        description="File inside the data directory that backs the persistence slot.",
    )
    storage_key: str = Field(
        "budgetAppData",
        description="Key under which the ledger is stored inside the slot file.",
    )
    default_currency: str = Field(
        "$",
        description="Currency prefix used by a freshly created ledger.",
    )
    default_theme: str = Field(
        "light",
        description="Display theme used by a freshly created ledger.",
    )
    max_amount: Optional[float] = Field(
        None,
        description="Optional cap on transaction amounts and category budgets; unset means no cap.",
        gt=0,
    )
    max_description_length: int = Field(
        100,
        description="Longest accepted description or category name.",
        ge=1,
    )
    log_level: Optional[str] = Field(
        None,
        description="Explicit root log level (e.g. DEBUG); defaults from the environment label.",
    )
    interface_host: str = Field(
        "0.0.0.0",
        description="Network interface for the web service to bind to.",
    )
    interface_port: int = Field(
        8000,
        description="Port the web service exposes.",
        ge=1,
        le=65535,
    )

    @field_validator("data_directory", mode="before")
    @classmethod
    def _expand_path(cls, value: str | Path) -> Path:
        """Ensure configured paths expand user directories and exist."""

        path = Path(value).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    @field_validator("default_theme")
    @classmethod
    def _check_theme(cls, value: str) -> str:
        """Only themes the interface knows how to render are accepted."""

        return Theme.from_str(value).value

    @property
    def storage_path(self) -> Path:
        """Location of the JSON file holding the persistence slot."""

        return self.data_directory / self.storage_filename

    @property
    def is_production(self) -> bool:
        return self.environment.strip().lower() == "production"

    @property
    def effective_log_level(self) -> Union[int, str]:
        """Level handed to ``configure_root_logger`` by the entry points."""

        return self.log_level or level_for_environment(self.environment)


@lru_cache()
def get_settings() -> BudgetAppSettings:
    """Return cached settings, ensuring consistent configuration across modules."""

    return BudgetAppSettings()
