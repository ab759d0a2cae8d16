"""Loggers for sqlstub.

Every module logs through :func:`get_logger`. Loggers live under the
``sqlstub`` namespace, and their records carry the correlation ID of the
active test case as ``record.correlation_id``, so a log line about a
registration or a resolved statement can be traced back to the test that
caused it.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from logging import LogRecord

__all__ = (
    "CorrelationIDFilter",
    "correlation_id_var",
    "get_correlation_id",
    "get_logger",
    "set_correlation_id",
)

ROOT_LOGGER_NAME = "sqlstub"

correlation_id_var: ContextVar[str | None] = ContextVar("sqlstub_correlation_id", default=None)


def set_correlation_id(correlation_id: str | None) -> None:
    """Tag log records of the current context, typically with a test node ID."""
    correlation_id_var.set(correlation_id)


def get_correlation_id() -> str | None:
    return correlation_id_var.get()


class CorrelationIDFilter(logging.Filter):
    """Attach the active correlation ID to every record passing through."""

    def filter(self, record: LogRecord) -> bool:
        record.correlation_id = get_correlation_id()  # type: ignore[attr-defined]
        return True


def get_logger(name: str | None = None) -> logging.Logger:
    """Get a logger under the ``sqlstub`` namespace.

    Args:
        name: Logger name, prefixed with ``sqlstub.`` when it lacks the prefix.
            If not provided, returns the root sqlstub logger.

    Returns:
        Logger with a single CorrelationIDFilter attached
    """
    if name is None:
        name = ROOT_LOGGER_NAME
    elif not name.startswith(ROOT_LOGGER_NAME):
        name = f"{ROOT_LOGGER_NAME}.{name}"

    logger = logging.getLogger(name)
    if not any(isinstance(f, CorrelationIDFilter) for f in logger.filters):
        logger.addFilter(CorrelationIDFilter())
    return logger
