"""Logging utilities for gdbridge commands."""

from __future__ import annotations

import logging
from pathlib import Path

from .models import Diagnostic, Severity

_LOGGER_NAME = "gdbridge"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the gdbridge hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Configure the gdbridge logger with console output and an optional file sink."""
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Reset handlers so repeated CLI invocations do not duplicate output.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(logging.Formatter("[gdbridge] %(levelname)s %(message)s"))
    logger.addHandler(stream_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(file_handler)

    return logger


_SEVERITY_LEVELS = {
    Severity.INFO: logging.INFO,
    Severity.WARNING: logging.WARNING,
    Severity.ERROR: logging.ERROR,
}


def log_diagnostic(logger: logging.Logger, diagnostic: Diagnostic) -> None:
    """Emit a run diagnostic at the log level matching its severity."""
    level = _SEVERITY_LEVELS.get(diagnostic.severity, logging.WARNING)
    if diagnostic.subject:
        logger.log(level, "%s %s: %s", diagnostic.code, diagnostic.subject, diagnostic.message)
    else:
        logger.log(level, "%s %s", diagnostic.code, diagnostic.message)


__all__ = ["configure_logging", "get_logger", "log_diagnostic"]
