"""Logging helpers."""

from __future__ import annotations

import logging
import os
import sys
from logging.handlers import RotatingFileHandler

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
CONSOLE_FORMAT = "%(levelname)s: %(message)s"


def _has_file_handler(logger: logging.Logger, log_path: str) -> bool:
    return any(
        isinstance(h, RotatingFileHandler) and h.baseFilename == os.path.abspath(log_path)
        for h in logger.handlers
    )


def _console_handler(logger: logging.Logger) -> logging.Handler | None:
    for handler in logger.handlers:
        if type(handler) is logging.StreamHandler:
            return handler
    return None


def setup_logging(
    log_dir: str = "logs",
    level: int = logging.INFO,
    console_level: int | None = None,
) -> tuple[logging.Logger, str]:
    """Configure the ``contactnotes`` logger.

    Everything at ``level`` goes to a rotating file in ``log_dir``. When
    ``console_level`` is given, records at or above it are also echoed to
    stderr, which is how the CLI surfaces migration warnings.
    """
    os.makedirs(log_dir, exist_ok=True)
    log_path = os.path.join(log_dir, "contactnotes.log")

    logger = logging.getLogger("contactnotes")
    logger.setLevel(level)

    if not _has_file_handler(logger, log_path):
        handler = RotatingFileHandler(log_path, maxBytes=2_000_000, backupCount=3)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(handler)

    if console_level is not None:
        console = _console_handler(logger)
        if console is None:
            console = logging.StreamHandler(sys.stderr)
            console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
            logger.addHandler(console)
        console.setLevel(console_level)

    return logger, log_path
