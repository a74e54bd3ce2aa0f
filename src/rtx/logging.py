"""
Console Logging
===============

Logging setup for rtx commands.

Modules log through ``logging.getLogger(__name__)``. ``configure_logging``
attaches a click-backed handler to the ``rtx`` logger so records render as
``[WARN] message`` lines on stderr. Commands that report through a logger
collaborator (doctor) receive a ``StdLogger`` wrapping that logger, which
exposes the short ``warn``/``error`` interface.
"""

import logging
import os
from enum import Enum
from typing import Optional, Protocol

import click


ROOT_LOGGER_NAME = "rtx"


class LogLevel(str, Enum):
    """Log levels accepted by RTX_LOG_LEVEL and settings.log_level."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


STDLIB_LEVELS: dict[LogLevel, int] = {
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.INFO: logging.INFO,
    LogLevel.WARNING: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
}

LEVEL_PREFIXES: dict[int, tuple[str, Optional[str]]] = {
    logging.DEBUG: ("[DEBUG]", "blue"),
    logging.INFO: ("[INFO]", "cyan"),
    logging.WARNING: ("[WARN]", "yellow"),
    logging.ERROR: ("[ERROR]", "red"),
    logging.CRITICAL: ("[ERROR]", "red"),
}


def parse_log_level(value: Optional[str], default: LogLevel = LogLevel.INFO) -> LogLevel:
    """Parse a log level name, falling back to ``default`` for unknown values.

    ``warn`` is accepted as an alias for ``warning``.
    """
    if not value:
        return default
    value = value.strip().lower()
    if value == "warn":
        return LogLevel.WARNING
    try:
        return LogLevel(value)
    except ValueError:
        return default


class ClickHandler(logging.Handler):
    """Logging handler that writes prefixed lines to stderr via click."""

    def __init__(self, use_color: Optional[bool] = None):
        super().__init__()
        if use_color is None:
            use_color = os.environ.get("NO_COLOR") is None
        self.use_color = use_color

    def format_record(self, record: logging.LogRecord) -> str:
        prefix, color = LEVEL_PREFIXES.get(record.levelno, ("[INFO]", None))
        if self.use_color and color:
            prefix = click.style(prefix, fg=color)
        return f"{prefix} {record.getMessage()}"

    def emit(self, record: logging.LogRecord) -> None:
        try:
            click.echo(self.format_record(record), err=True)
        except Exception:
            self.handleError(record)


def configure_logging(
    level: LogLevel = LogLevel.INFO,
    use_color: Optional[bool] = None,
) -> logging.Logger:
    """Attach a ClickHandler to the rtx logger and set its level.

    Safe to call repeatedly; any previous ClickHandler is replaced.

    Returns:
        The configured ``rtx`` logger.
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        if isinstance(handler, ClickHandler):
            logger.removeHandler(handler)
    logger.addHandler(ClickHandler(use_color=use_color))
    logger.setLevel(STDLIB_LEVELS[level])
    logger.propagate = False
    return logger


class DoctorLogger(Protocol):
    """Logger collaborator used by the doctor command."""

    def warn(self, msg: str) -> None:
        ...

    def error(self, msg: str) -> None:
        ...


class StdLogger:
    """Adapt a ``logging.Logger`` to the DoctorLogger interface."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(ROOT_LOGGER_NAME)

    def warn(self, msg: str) -> None:
        self.logger.warning(msg)

    def error(self, msg: str) -> None:
        self.logger.error(msg)
