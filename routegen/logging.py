"""Logging setup for the routegen command line."""

from __future__ import annotations

import logging
from pathlib import Path

LOGGER_NAME = "routegen"
CONSOLE_FORMAT = "[routegen] %(levelname)s %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return ``routegen`` or the ``routegen.<name>`` child logger."""
    return logging.getLogger(f"{LOGGER_NAME}.{name}" if name else LOGGER_NAME)


def configure_logging(*, verbose: bool = False, log_file: Path | None = None) -> logging.Logger:
    """Send routegen records to stderr and, when ``log_file`` is given, to that file.

    The console shows debug records only with ``verbose``; the file sink always
    records them.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    _reset_handlers(logger)

    console_level = logging.DEBUG if verbose else logging.INFO
    logger.addHandler(_with_format(logging.StreamHandler(), console_level, CONSOLE_FORMAT))

    if log_file is not None:
        log_file = log_file.expanduser()
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        logger.addHandler(_with_format(file_handler, logging.DEBUG, FILE_FORMAT))

    return logger


def _with_format(handler: logging.Handler, level: int, fmt: str) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt))
    return handler


def _reset_handlers(logger: logging.Logger) -> None:
    # Handlers from an earlier run are closed, not stacked.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


__all__ = ["configure_logging", "get_logger"]
