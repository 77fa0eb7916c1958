# topmark:header:start
#
#   project      : LogMark
#   file         : logging.py
#   file_relpath : src/logmark/config/logging.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Custom LogMark logging with TRACE logging.

This module extends the standard logging module with LogMark-specific features,
including a custom TRACE level, a specialized logger class, and colored output formatting.

The registry reports its arm/consume transitions at TRACE level, so they only show
up when the level is lowered explicitly (``LOGMARK_LOG_LEVEL=TRACE``).
"""

from __future__ import annotations

import logging
import os
import sys
from typing import TYPE_CHECKING, Final, cast

from yachalk import chalk

if TYPE_CHECKING:
    from collections.abc import Mapping

# Define TRACE_LEVEL as a module-level constant
TRACE_LEVEL: Final[int] = logging.DEBUG - 5

LOG_LEVEL_ENV: Final[str] = "LOGMARK_LOG_LEVEL"


class LogmarkLogger(logging.Logger):
    """Custom logger class for LogMark with support for a TRACE log level below DEBUG."""

    def trace(
        self,
        msg: object,
        *args: object,
        extra: Mapping[str, object] | None = None,
    ) -> None:
        """Log 'msg % args' with severity 'TRACE'.

        Args:
            msg (object): The message to be logged.
            *args (object): Variable length argument list for the message.
            extra (Mapping[str, object] | None): Optional dictionary of extra information to pass
                to the logger.
        """
        if self.isEnabledFor(TRACE_LEVEL):
            self._log(
                TRACE_LEVEL,
                msg=msg,
                args=args,
                extra=extra,
                stacklevel=2,
            )


if not hasattr(logging, "TRACE"):
    logging.addLevelName(TRACE_LEVEL, "TRACE")
    # Expose TRACE_LEVEL as logging.TRACE
    logging.TRACE = TRACE_LEVEL  # type: ignore


LOG_FORMAT = "[%(levelname)s] %(message)s"
DEBUG_LOG_FORMAT = "[%(levelname)s] [%(filename)s:%(lineno)d] [%(funcName)s] %(message)s"


class ChalkFormatter(logging.Formatter):
    """Formatter that outputs log records with chalk-colored formatting based on severity level."""

    def format(self, record: logging.LogRecord) -> str:
        """Format the specified record with colors based on log level.

        Args:
            record (logging.LogRecord): The LogRecord to be formatted.

        Returns:
            str: The colorized formatted log message as a string.
        """
        level = record.levelno
        message = super().format(record)

        if level >= logging.CRITICAL:
            return chalk.red_bright(message)
        if level >= logging.ERROR:
            return chalk.red(message)
        if level >= logging.WARNING:
            return chalk.yellow(message)
        if level >= logging.INFO:
            return chalk.green(message)
        if level >= logging.DEBUG:
            return chalk.gray(message)
        if level >= TRACE_LEVEL:
            return chalk.blue(message)
        # Fallback color for unknown or lower-than-TRACE levels
        return chalk.dim.red(message)


_NAME_TO_LEVEL: Final[dict[str, int]] = {
    "TRACE": TRACE_LEVEL,
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
    "FATAL": logging.CRITICAL,
    "NOTSET": logging.NOTSET,
}


def resolve_env_log_level() -> int | None:
    """Return a logging level from environment or None if unset.

    Honors LOGMARK_LOG_LEVEL (e.g., "TRACE", "DEBUG", "INFO", numeric "10").
    Unknown names resolve to None.
    """
    val = os.environ.get(LOG_LEVEL_ENV)
    if not val:
        return None
    v = val.strip().upper()
    if v.isdigit():
        return int(v)
    return _NAME_TO_LEVEL.get(v)


def setup_logging(level: int | None = None, *, mark: bool = False) -> logging.Handler:
    """Configure the root logger with a specified log level and colored output.

    If ``level`` is None, environment variables are consulted via
    [`resolve_env_log_level`][logmark.config.logging.resolve_env_log_level].
    Default is CRITICAL when unspecified.

    Args:
        level (int | None): Root log level, or None to resolve it from the environment.
        mark (bool): When True, the console handler is wrapped in a
            [`MarkHandler`][logmark.core.handler.MarkHandler] so that messages logged
            through the root logger can satisfy armed marks.

    Returns:
        logging.Handler: The handler installed on the root logger.
    """
    if level is None:
        level = resolve_env_log_level() or logging.CRITICAL

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove all existing handlers to prevent duplicate log messages
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)

    console = logging.StreamHandler(sys.stdout)
    # Use detailed logging format below INFO, simpler otherwise
    console.setFormatter(ChalkFormatter(LOG_FORMAT if level >= logging.INFO else DEBUG_LOG_FORMAT))

    handler: logging.Handler = console
    if mark:
        # Imported lazily: the handler module depends on this one for its logger.
        from logmark.core.handler import MarkHandler

        handler = MarkHandler(console)

    root_logger.addHandler(handler)
    return handler


def get_logger(name: str) -> LogmarkLogger:
    """Retrieve a LogmarkLogger instance with the specified name.

    The logger class is only swapped in for the duration of the lookup, so loggers
    created by the host application keep whatever class it configured.

    Args:
        name (str): The name of the logger.

    Returns:
        LogmarkLogger: A LogmarkLogger instance.
    """
    existing = logging.Logger.manager.loggerDict.get(name)
    if isinstance(existing, LogmarkLogger):
        return existing

    previous = logging.getLoggerClass()
    logging.setLoggerClass(LogmarkLogger)
    try:
        logger = logging.getLogger(name)
    finally:
        logging.setLoggerClass(previous)
    return cast("LogmarkLogger", logger)
