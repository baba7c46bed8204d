"""Mini README: Application-wide logging helpers for the budget tracker.

Structure:
    * get_logger - factory returning module loggers with baseline config.
    * configure_root_logger - attaches the shared handler and sets the level.
    * level_for_environment - maps the configured environment to a level.

Usage:
    Modules create a module-level ``LOGGER = get_logger(__name__)``; entry
    points call ``configure_root_logger(settings.log_level)`` once settings
    are known. Ledger mutations log at INFO, so a ``production`` environment
    drops to WARNING to keep routine bookkeeping out of the output.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s - %(message)s"

_handler: Optional[logging.Handler] = None


def level_for_environment(environment: str) -> int:
    """Return WARNING for production and INFO for every other environment."""

    return logging.WARNING if environment.strip().lower() == "production" else logging.INFO


def _resolve_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level}")
    return resolved


def configure_root_logger(level: Union[int, str] = logging.INFO) -> None:
    """Attach the shared stream handler once and apply ``level`` to the root logger."""

    global _handler
    root_logger = logging.getLogger()
    if _handler is None:
        _handler = logging.StreamHandler()
        _handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        root_logger.addHandler(_handler)
    root_logger.setLevel(_resolve_level(level))


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a module logger, attaching the default handler on first use."""

    if _handler is None:
        configure_root_logger()
    return logging.getLogger(name)
