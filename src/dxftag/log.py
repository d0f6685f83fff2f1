"""Logging setup for dxftag.

Every module logs through ``logging.getLogger(__name__)``; nothing is printed
unless the application (or the CLI) calls :func:`setup_logging`.
"""

from __future__ import annotations

import logging
import os
import sys

LOG_FORMAT = "[%(levelname)s] %(message)s"
DEBUG_LOG_FORMAT = "[%(levelname)s] [%(filename)s:%(lineno)d] [%(funcName)s] %(message)s"
ENV_LOG_LEVEL = "DXFTAG_LOG_LEVEL"

_NAME_TO_LEVEL = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
    "NOTSET": logging.NOTSET,
}


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def resolve_env_log_level() -> int | None:
    """Return a logging level from ``DXFTAG_LOG_LEVEL`` or None if unset.

    Accepts level names ("DEBUG", "warning") and numeric strings ("10").
    """
    value = os.environ.get(ENV_LOG_LEVEL)
    if not value:
        return None
    value = value.strip().upper()
    if value.isdigit():
        return int(value)
    return _NAME_TO_LEVEL.get(value)


def setup_logging(level: int | None = None) -> None:
    """Attach a stderr handler to the ``dxftag`` logger.

    If ``level`` is None the environment is consulted; the fallback is WARNING.
    Calling this twice replaces the handler installed by the first call.
    """
    if level is None:
        level = resolve_env_log_level() or logging.WARNING

    logger = logging.getLogger("dxftag")
    for handler in list(logger.handlers):
        if getattr(handler, "_dxftag_handler", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler._dxftag_handler = True  # type: ignore[attr-defined]
    handler.setFormatter(
        logging.Formatter(DEBUG_LOG_FORMAT if level <= logging.DEBUG else LOG_FORMAT)
    )
    logger.addHandler(handler)
    logger.setLevel(level)
