"""Diagnostic output for srcdocs runs."""

from __future__ import annotations

import logging

_LOGGER_NAME = "srcdocs"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return ``srcdocs.<name>``, or the package logger when no name is given."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(*, verbose: bool = False) -> logging.Logger:
    """Send srcdocs diagnostics to stderr; ``verbose`` adds per-file debug lines."""
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # One handler per process, however many times main() runs.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("[srcdocs] %(levelname)s %(message)s"))
    logger.addHandler(handler)

    return logger


__all__ = ["configure_logging", "get_logger"]
