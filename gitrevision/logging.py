"""Logging setup for gitrevision."""

from __future__ import annotations

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER = "gitrevision"


def configure_logging(level: str = "INFO", *, console: Optional[Console] = None) -> logging.Handler:
    """Send gitrevision records to stderr through rich.

    Only the package logger is touched; a build tool that imports the
    collector keeps its own root configuration.
    """
    handler = RichHandler(console=console or Console(stderr=True), markup=False, show_path=False)
    logger = logging.getLogger(PACKAGE_LOGGER)
    for existing in list(logger.handlers):
        logger.removeHandler(existing)
    logger.addHandler(handler)
    logger.setLevel(level.upper())
    logger.propagate = False
    return handler


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the ``gitrevision`` namespace."""
    if name == PACKAGE_LOGGER or name.startswith(f"{PACKAGE_LOGGER}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{PACKAGE_LOGGER}.{name}")


__all__ = ["PACKAGE_LOGGER", "configure_logging", "get_logger"]
