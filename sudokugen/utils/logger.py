"""Logging utilities for the solver and generator."""

from __future__ import annotations

import logging
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"
DATE_FORMAT = "%H:%M:%S"


def resolve_level(level: Union[int, str], default: int = logging.WARNING) -> int:
    """Map a level name such as ``"debug"`` to its numeric value."""

    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.strip().upper())
    return value if isinstance(value, int) else default


def configure_logging(level: Union[int, str] = logging.INFO) -> None:
    """Install a single stream handler on the root logger.

    Generation runs hundreds of trial solves, so per-solve details stay at
    DEBUG and only milestones are logged at INFO.
    """

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(resolve_level(level))


def get_logger(name: Optional[str] = None) -> logging.Logger:
    if not logging.getLogger().handlers:
        configure_logging()
    return logging.getLogger(name or "sudokugen")
