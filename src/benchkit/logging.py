"""Logging setup for benchkit.

Run reports (headers, cycle progress, result tables) and errors all go
through the ``benchkit`` logger.  The console handler prints bare
messages so tables stay aligned; the optional file handler records
everything at DEBUG with timestamps.
"""

from __future__ import annotations

import logging
from pathlib import Path

ROOT_LOGGER = "benchkit"
FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class _ConsoleFormatter(logging.Formatter):
    """Bare messages for INFO and below, ``level: message`` above."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        if record.levelno < logging.WARNING:
            return message
        return f"{record.levelname.lower()}: {message}"


def _console_level(verbose: bool, quiet: bool) -> int:
    if verbose:
        return logging.DEBUG
    return logging.WARNING if quiet else logging.INFO


def setup_logging(
    *,
    verbose: bool = False,
    quiet: bool = False,
    log_file: Path | None = None,
) -> logging.Logger:
    """Install benchkit's handlers and return its root logger.

    Calling this again replaces the handlers of a previous call.
    *verbose* wins over *quiet*.  The run command passes
    ``quiet=True`` at verbosity 0 so that only warnings and errors
    reach the terminal.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(logging.DEBUG)
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()

    console = logging.StreamHandler()
    console.setLevel(_console_level(verbose, quiet))
    console.setFormatter(_ConsoleFormatter("%(message)s"))
    logger.addHandler(console)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Child logger ``benchkit.<name>``."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
