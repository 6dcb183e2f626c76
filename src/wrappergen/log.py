"""Logging utilities for wrappergen."""

from __future__ import annotations

import logging

_LOGGER_NAME = "wrappergen"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the wrappergen hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(*, verbose: bool = False) -> logging.Logger:
    """Configure the wrappergen logger with console output on stderr."""
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Reset handlers to avoid duplicate output when the CLI runs more than once per process.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("[wrappergen] %(levelname)s %(message)s"))
    logger.addHandler(handler)
    return logger


__all__ = ["configure_logging", "get_logger"]
