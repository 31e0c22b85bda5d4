"""Diagnostic and flush registries.

Purpose
-------
Hold the two pieces of shared mutable state the reporter reads at failure
time: debug-state dumpers keyed by name, and flush handlers kept in
registration order.

Contents
    - ``DiagnosticRegistry``: key to :class:`Dumpable` mapping with snapshots.
    - ``FlushRegistry``: ordered list of :class:`Flushable` handlers.
    - ``FlushFailure``: one handler exception collected by ``run_all``.

Concurrency
-----------
Each registry guards its container with a re-entrant lock. Dumps and flushes
run on a copy taken under the lock, so handlers may add or remove entries
while they run.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any, Iterator

from ..observability import log_debug, log_error, make_event
from .ports import Dumpable, Flushable


class DiagnosticRegistry:
    """Mapping of string keys to objects that can dump their state."""

    def __init__(self) -> None:
        self._entries: dict[str, Dumpable] = {}
        self._lock = threading.RLock()

    def add(self, key: str, entry: Dumpable) -> None:
        """Insert *entry* under *key*, replacing any previous entry.

        >>> class State:
        ...     def dump(self) -> str:
        ...         return "ok"
        >>> registry = DiagnosticRegistry()
        >>> registry.add("state", State())
        >>> registry.snapshot()
        {'state': 'ok'}
        """

        with self._lock:
            replaced = key in self._entries
            self._entries[key] = entry
        log_debug("diagnostic_added", **make_event("add", key, {"replaced": replaced}))

    def remove(self, key: str) -> None:
        """Drop the entry under *key*; missing keys are ignored."""

        with self._lock:
            removed = self._entries.pop(key, None) is not None
        log_debug("diagnostic_removed", **make_event("remove", key, {"present": removed}))

    def snapshot(self) -> dict[str, str]:
        """Return ``key -> dump()`` for every registered entry.

        Ordering is not part of the contract. A dump that raises is rendered
        as ``<dump failed: ...>`` so one broken entry cannot hide the others.
        """

        with self._lock:
            entries = list(self._entries.items())
        return {key: _safe_dump(key, entry) for key, entry in entries}

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


@dataclass(frozen=True, slots=True)
class FlushFailure:
    """A flush handler together with the exception it raised."""

    handler: Any
    error: Exception


class FlushRegistry:
    """Ordered handlers flushed before every failure report."""

    def __init__(self) -> None:
        self._handlers: list[Flushable] = []
        self._lock = threading.RLock()

    def register(self, handler: Flushable) -> None:
        """Append *handler*; registration order is execution order."""

        with self._lock:
            self._handlers.append(handler)
            total = len(self._handlers)
        log_debug("flush_handler_added", **make_event("register", None, {"handlers": total}))

    def remove(self, handler: Flushable) -> None:
        """Remove the first registration of *handler*; unknown handlers are ignored."""

        with self._lock:
            for index, existing in enumerate(self._handlers):
                if existing is handler:
                    del self._handlers[index]
                    break
            total = len(self._handlers)
        log_debug("flush_handler_removed", **make_event("remove", None, {"handlers": total}))

    def run_all(self) -> list[FlushFailure]:
        """Flush every handler in registration order.

        A handler that raises is logged and skipped; the remaining handlers
        still run. The collected failures are returned to the caller.
        """

        failures: list[FlushFailure] = []
        for position, handler in enumerate(self.handlers()):
            try:
                handler.flush()
            except Exception as exc:  # noqa: BLE001 - keep flushing the remaining handlers
                log_error(
                    "flush_handler_failed",
                    **make_event("flush", None, {"position": position, "error": f"{type(exc).__name__}: {exc}"}),
                )
                failures.append(FlushFailure(handler=handler, error=exc))
        return failures

    def handlers(self) -> list[Flushable]:
        with self._lock:
            return list(self._handlers)

    def __iter__(self) -> Iterator[Flushable]:
        return iter(self.handlers())

    def __len__(self) -> int:
        with self._lock:
            return len(self._handlers)


def _safe_dump(key: str, entry: Dumpable) -> str:
    """Return ``entry.dump()`` or a marker describing why it failed."""

    try:
        return str(entry.dump())
    except Exception as exc:  # noqa: BLE001 - a broken dumper must not abort the report
        description = f"{type(exc).__name__}: {exc}"
        log_error("dump_failed", **make_event("snapshot", key, {"error": description}))
        return f"<dump failed: {description}>"
