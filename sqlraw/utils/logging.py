"""Logging helpers for sqlraw.

All library loggers live under the ``sqlraw`` namespace and stay silent
until an application (or the ``sqlraw`` CLI) calls :func:`configure_logging`.
Each CLI command runs inside :func:`correlation_context`, so every record
it emits, from connect to shutdown, carries the same ``correlation_id``.
"""

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from typing import TYPE_CHECKING, Any
from uuid import uuid4

from sqlraw.utils.serializers import to_json

if TYPE_CHECKING:
    from collections.abc import Generator, Iterable
    from logging import LogRecord

__all__ = (
    "CorrelationIDFilter",
    "StructuredFormatter",
    "configure_logging",
    "correlation_context",
    "correlation_id_var",
    "get_correlation_id",
    "get_logger",
    "log_with_context",
    "set_correlation_id",
)

ROOT_LOGGER_NAME = "sqlraw"
SIMPLE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s [%(correlation_id)s] %(message)s"
_RECORD_FIELDS = ("module", "funcName", "lineno")

correlation_id_var: ContextVar[str | None] = ContextVar("sqlraw_correlation_id", default=None)


def set_correlation_id(correlation_id: str | None) -> None:
    correlation_id_var.set(correlation_id)


def get_correlation_id() -> str | None:
    return correlation_id_var.get()


@contextmanager
def correlation_context(correlation_id: str | None = None) -> Generator[str, None, None]:
    """Scope a correlation ID to the enclosed block.

    Args:
        correlation_id: ID to use. A random hex ID is generated when omitted.

    Yields:
        The active correlation ID.
    """
    active = correlation_id or uuid4().hex
    token = correlation_id_var.set(active)
    try:
        yield active
    finally:
        correlation_id_var.reset(token)


class CorrelationIDFilter(logging.Filter):
    """Stamp each record with the active correlation ID, or ``-`` outside a context."""

    def filter(self, record: LogRecord) -> bool:
        record.correlation_id = get_correlation_id() or "-"  # type: ignore[attr-defined]
        return True


class StructuredFormatter(logging.Formatter):
    """Render records as one JSON object per line.

    Fields passed through :func:`log_with_context` are merged into the
    top level of the object.
    """

    def format(self, record: LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update((field, getattr(record, field)) for field in _RECORD_FIELDS)
        correlation_id = getattr(record, "correlation_id", None) or get_correlation_id()
        if correlation_id and correlation_id != "-":
            entry["correlation_id"] = correlation_id
        entry.update(getattr(record, "extra_fields", None) or {})
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return to_json(entry)


def get_logger(name: str | None = None) -> logging.Logger:
    """Return ``sqlraw`` or a child logger such as ``sqlraw.executor``."""
    if name is None:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if name != ROOT_LOGGER_NAME and not name.startswith(f"{ROOT_LOGGER_NAME}."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    logger = logging.getLogger(name)
    if not any(isinstance(f, CorrelationIDFilter) for f in logger.filters):
        logger.addFilter(CorrelationIDFilter())
    return logger


def configure_logging(
    level: str = "INFO",
    format_style: str = "structured",
    extra_handlers: Iterable[logging.Handler] | None = None,
) -> None:
    """Send ``sqlraw`` records to stderr.

    Replaces any handlers installed by an earlier call. Records do not
    propagate to the root logger afterwards.

    Args:
        level: Level name such as ``DEBUG`` or ``WARNING``.
        format_style: ``structured`` for JSON lines, ``simple`` for plain text.
        extra_handlers: Further handlers to attach next to the stderr one.
    """
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(level.upper())
    root_logger.handlers.clear()

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.addFilter(CorrelationIDFilter())
    stderr_handler.setFormatter(
        StructuredFormatter() if format_style == "structured" else logging.Formatter(SIMPLE_FORMAT)
    )
    root_logger.addHandler(stderr_handler)
    for handler in extra_handlers or ():
        root_logger.addHandler(handler)
    root_logger.propagate = False


def log_with_context(logger: logging.Logger, level: int, message: str, **extra_fields: Any) -> None:
    """Log ``message`` with ``extra_fields`` attached for :class:`StructuredFormatter`.

    The caller's frame is reported as the record's origin.
    """
    if logger.isEnabledFor(level):
        logger.log(level, message, extra={"extra_fields": extra_fields}, stacklevel=2)
