"""Logger configuration and convenience helpers."""

from __future__ import annotations

import logging
import sys

_DEFAULT_LOGGER_NAME = "pgnvault"
_DEFAULT_LOG_LEVEL = logging.INFO
_DEFAULT_FORMATTER = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
_DEFAULT_HANDLER = logging.StreamHandler(sys.stdout)
_DEFAULT_HANDLER.setFormatter(_DEFAULT_FORMATTER)


def _configure_logger(logger: logging.Logger, level: int) -> None:
    """
    Configure a logger with the package handler and a fallback level.

    Only the package root logger gets the stdout handler; child loggers such as
    ``pgnvault.sync_archives`` propagate to it, so every record is emitted once.

    Parameters
    ----------
    logger : logging.Logger
        The logger instance to configure.
    level : int
        The logging level to set if the logger's level is not already set.

    Examples
    --------
    >>> import logging
    >>> from pgnvault.utils.logger import _configure_logger
    >>> logger = logging.getLogger("pgnvault")
    >>> _configure_logger(logger, logging.INFO)
    >>> logger.info("This is an info message.")
    """
    if logger.level == logging.NOTSET:
        logger.setLevel(level)
    if logger.name != _DEFAULT_LOGGER_NAME:
        return
    if not logger.handlers:
        logger.addHandler(_DEFAULT_HANDLER)
    logger.propagate = False


def get_logger(name: str | None = None, level: int = _DEFAULT_LOG_LEVEL) -> logging.Logger:
    """Return a configured logger for the given name."""
    root = logging.getLogger(_DEFAULT_LOGGER_NAME)
    _configure_logger(root, level)
    if not name or name == _DEFAULT_LOGGER_NAME:
        return root
    return logging.getLogger(name)


def set_level(level: int, logger_names: list[str] | None = None) -> None:
    """Set the log level for one or more logger names."""
    names = logger_names or [_DEFAULT_LOGGER_NAME, "urllib3"]
    for name in names:
        logging.getLogger(name).setLevel(level)
