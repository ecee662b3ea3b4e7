# log.py
# SPDX-License-Identifier: MIT
"""Package-wide logging setup for tribute.

The ``tribute`` logger gets a NullHandler at import time so library callers
see nothing until the CLI (or the embedding application) opts in through
:func:`configure_logging`. Command results go to stdout; log records always
go to a separate stream (stderr by default).
"""

from __future__ import annotations

import logging
import sys

__all__ = [
    "PACKAGE_LOGGER_NAME",
    "DEFAULT_LOG_LEVEL",
    "get_logger",
    "configure_logging",
]

PACKAGE_LOGGER_NAME = "tribute"
DEFAULT_LOG_LEVEL = "WARNING"

logging.getLogger(PACKAGE_LOGGER_NAME).addHandler(logging.NullHandler())


def _coerce_level(level: int | str) -> int:
    if isinstance(level, str):
        return getattr(logging, level.upper(), logging.WARNING)
    return level


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger scoped to tribute.

    Args:
        name (str | None): Fully qualified logger name. Defaults to the
            package logger when omitted.

    Returns:
        logging.Logger: Logger instance for the requested name.
    """
    return logging.getLogger(name or PACKAGE_LOGGER_NAME)


def configure_logging(
    *,
    level: int | str = DEFAULT_LOG_LEVEL,
    stream=None,
    fmt: str | None = None,
    propagate: bool | None = None,
    logger_name: str = PACKAGE_LOGGER_NAME,
) -> logging.Logger:
    """Attach a single stream handler to a tribute logger.

    Args:
        level (int | str): Logging level or level name. Unknown names fall
            back to WARNING.
        stream (IO[str] | None): Target stream; defaults to sys.stderr.
        fmt (str | None): Log format string.
        propagate (bool | None): Whether records bubble up to ancestor
            loggers. None keeps propagation on so pytest's caplog sees them.
        logger_name (str): Logger to configure.

    Returns:
        logging.Logger: The configured logger.
    """
    logger = get_logger(logger_name or PACKAGE_LOGGER_NAME)
    logger.setLevel(_coerce_level(level))
    logger.propagate = True if propagate is None else bool(propagate)

    if stream is None:
        stream = sys.stderr
    if fmt is None:
        fmt = "%(levelname)s %(name)s: %(message)s"

    # One StreamHandler per logger; repoint handlers whose stream was closed
    # (pytest swaps stderr between tests).
    has_stream = False
    for handler in logger.handlers:
        if not isinstance(handler, logging.StreamHandler):
            continue
        has_stream = True
        if getattr(getattr(handler, "stream", None), "closed", False):
            handler.stream = stream
    if not has_stream:
        handler = logging.StreamHandler(stream)
        handler.setFormatter(logging.Formatter(fmt=fmt))
        logger.addHandler(handler)

    return logger

