"""numeric_quadrature logging

A logger object ``logging.getLogger("numeric_quadrature")`` is created
here and shared by the whole package.

Set ``NUMERIC_QUADRATURE_LOG_LEVEL`` to any of ``DEBUG``, ``INFO``,
``WARNING``, ``ERROR`` or ``CRITICAL`` to change how much is written to
the console (``stderr``). The default is ``WARNING``. At ``DEBUG`` every
refinement pass of every quadrature rule is logged.
"""

import logging
import os
import sys

from logging import NOTSET, DEBUG, INFO, WARNING, ERROR, CRITICAL  # noqa: F401

__all__ = [
    "logger", "set_log_level", "LoggingError", "NOTSET", "DEBUG",
    "INFO", "WARNING", "ERROR", "CRITICAL"
]

LOG_LEVEL_VARIABLE = "NUMERIC_QUADRATURE_LOG_LEVEL"
LOG_FORMAT = "%(name)s:%(levelname)s %(message)s"


class LoggingError(Exception):
    pass


logger = logging.getLogger("numeric_quadrature")


def _parse_level(level):
    """Turn a level name or number into a logging level number."""
    if isinstance(level, int):
        return level
    if str(level).strip().isdigit():
        return int(level)
    value = logging.getLevelName(str(level).upper())
    if not isinstance(value, int):
        raise LoggingError(f"Unknown log level: {level!r}")
    return value


def set_log_level(level):
    """Set the package logger level from a name ("DEBUG") or a number."""
    logger.setLevel(_parse_level(level))


def _console_handler():
    handler = logging.StreamHandler(stream=sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.set_name("numeric_quadrature_console")
    return handler


set_log_level(os.environ.get(LOG_LEVEL_VARIABLE, WARNING))
if not any(h.get_name() == "numeric_quadrature_console" for h in logger.handlers):
    logger.addHandler(_console_handler())
