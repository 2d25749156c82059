"""Logging setup for scripts that drive the layout engine.

The library itself only creates module loggers; handlers are attached here,
by whoever runs the program.
"""

from __future__ import annotations

import logging
import sys

LOGGER_NAME = "topology_layout"


def setup_logging(level: int = logging.INFO, log_file: str | None = None) -> logging.Logger:
    """Attach console (and optionally file) handlers to the package logger.

    Calling it again replaces the previous handlers instead of stacking
    duplicates.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)
    console.setFormatter(formatter)
    logger.addHandler(console)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
