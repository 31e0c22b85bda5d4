"""Structured logging for the assertion pipeline.

Every lifecycle event (registry mutations, flush failures, fired assertions)
is emitted on the ``lib_fatal_assert`` logger as a short event name plus a
``context`` mapping attached to the record. The package logger carries a
``NullHandler`` so nothing is printed unless the host configures logging.

The failure report itself never goes through logging; it is written to the
configured sink.

Event names are positional-only in the ``log_*`` helpers, so any keyword,
``message`` and ``event`` included, is treated as a context field.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar
from typing import Any, Final, Mapping

TRACE_ID: ContextVar[str | None] = ContextVar("lib_fatal_assert_trace_id", default=None)
"""Trace identifier copied into the context of every event while bound."""

_LOGGER: Final[logging.Logger] = logging.getLogger("lib_fatal_assert")
_LOGGER.addHandler(logging.NullHandler())


def get_logger() -> logging.Logger:
    """Return the package logger so applications may attach handlers."""

    return _LOGGER


def debug_enabled() -> bool:
    """Whether debug events would reach any handler.

    Callers use it to skip building expensive event payloads.
    """

    return _LOGGER.isEnabledFor(logging.DEBUG)


def bind_trace_id(trace_id: str | None) -> None:
    """Bind or clear the trace identifier attached to subsequent events.

    >>> bind_trace_id('req-42')
    >>> TRACE_ID.get()
    'req-42'
    >>> bind_trace_id(None)
    >>> TRACE_ID.get() is None
    True
    """

    TRACE_ID.set(trace_id)


def log_debug(event: str, /, **fields: Any) -> None:
    _log(logging.DEBUG, event, fields)


def log_info(event: str, /, **fields: Any) -> None:
    _log(logging.INFO, event, fields)


def log_error(event: str, /, **fields: Any) -> None:
    _log(logging.ERROR, event, fields)


def make_event(operation: str, key: str | None, payload: Mapping[str, Any] | None = None) -> dict[str, Any]:
    """Return the standard ``operation``/``key`` fields merged with *payload*.

    >>> make_event('flush', None, {'handlers': 2})
    {'operation': 'flush', 'key': None, 'handlers': 2}
    """

    return {"operation": operation, "key": key, **(payload or {})}


def _log(level: int, event: str, fields: Mapping[str, Any]) -> None:
    if not _LOGGER.isEnabledFor(level):
        return
    _LOGGER.log(level, event, extra={"context": {"trace_id": TRACE_ID.get(), **fields}})
