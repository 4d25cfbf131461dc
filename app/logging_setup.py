# app/logging_setup.py
# Role: Central logging configuration for the finance tracker.

"""
Logging helpers.

- configure_logging(...): attach one StreamHandler to the "budgetflow" logger.
  Called once by main.py at startup.
- get_logger(name): used by every module. Until configure_logging() runs,
  the package logger only has a NullHandler, so library use stays silent.

Modules never attach their own handlers.
"""

from __future__ import annotations

import logging
import sys
from typing import IO

import config

_PKG_LOGGER_NAME = "budgetflow"
_CONFIGURED = False


def _parse_level(level: int | str | None) -> int:
    if isinstance(level, int):
        return level
    if level is None:
        level = config.LOG_LEVEL
    level = str(level).strip().upper()
    if level.isdigit():
        return int(level)
    numeric = getattr(logging, level, None)
    if isinstance(numeric, int):
        return numeric
    return logging.INFO


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] = sys.stderr,
) -> None:
    """Configure the package logger exactly once."""
    global _CONFIGURED
    if _CONFIGURED:
        return

    logger = logging.getLogger(_PKG_LOGGER_NAME)

    for h in list(logger.handlers):
        if isinstance(h, logging.NullHandler):
            logger.removeHandler(h)

    handler = logging.StreamHandler(stream)
    handler.setFormatter(
        logging.Formatter(fmt or "%(asctime)s %(name)s %(levelname)s %(message)s")
    )

    logger.setLevel(_parse_level(level))
    logger.addHandler(handler)
    # Avoid double emission via the root logger.
    logger.propagate = False

    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """Return `budgetflow.<name>`, making sure the package logger has a handler."""
    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if not _CONFIGURED and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(f"{_PKG_LOGGER_NAME}.{name}")
