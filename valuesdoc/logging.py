"""Logging setup shared by the valuesdoc scanner, flattener and CLI."""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "valuesdoc"
_CONSOLE_FORMAT = "[valuesdoc] %(levelname)s %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return ``valuesdoc.<name>``, or the package logger when no name is given."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def _attach(logger: logging.Logger, handler: logging.Handler, fmt: str) -> None:
    handler.setLevel(logger.level)
    handler.setFormatter(logging.Formatter(fmt))
    logger.addHandler(handler)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Route valuesdoc records to stderr and, when given, to ``log_file``.

    Without ``verbose`` only warnings (unknown modifiers, for instance) reach
    the console, so ``valuesdoc inspect`` output on stdout stays valid JSON.
    Calling this again replaces the handlers installed by the previous call.
    """
    logger = get_logger()
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    _attach(logger, logging.StreamHandler(), _CONSOLE_FORMAT)
    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        _attach(logger, logging.FileHandler(log_file, encoding="utf-8"), _FILE_FORMAT)

    return logger


__all__ = ["configure_logging", "get_logger"]
