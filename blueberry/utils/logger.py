"""Logging utilities tailored for puzzle generation."""

from __future__ import annotations

import logging
from typing import Optional

ROOT_LOGGER_NAME = "blueberry"


def configure_logging(level: int = logging.INFO) -> None:
    """Configure root logging with a sensible formatter.

    Minimization performs dozens of bounded searches per puzzle, so the
    engine logs search details at DEBUG and only milestones at INFO. Callers
    may reconfigure logging before invoking :func:`make_puzzle`.
    """

    handler = logging.StreamHandler()
    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-7s | %(name)s | %(message)s",
        datefmt="%H:%M:%S",
    )
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger under the ``blueberry`` namespace.

    Module names from inside the package pass through unchanged; any other
    name (``"cli"``) is nested under the package logger so one level setting
    covers the engine and its scripts.
    """

    if not logging.getLogger().handlers:
        configure_logging()
    if not name or name == ROOT_LOGGER_NAME:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)
