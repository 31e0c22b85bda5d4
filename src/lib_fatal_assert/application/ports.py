"""Application-layer ports describing collaborator capabilities.

Purpose
-------
Define the structural contracts the assertion pipeline consumes. Each port has
one required operation; no inheritance is needed to satisfy them, so ordinary
Python objects (file handles, loggers' handlers, buffered writers) qualify as
long as they expose the method.

Contents
--------
* :class:`Dumpable` – produces a human-readable summary of debug state.
* :class:`Flushable` – performs a side effect that must happen before a report.
* :class:`Sink` – destination for the formatted report.
* :class:`Terminator` – ends the process with an exit status.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Dumpable(Protocol):
    """Debug-state holder registered in the diagnostic registry."""

    def dump(self) -> str:
        """Return a summary of the current state for the failure report."""


@runtime_checkable
class Flushable(Protocol):
    """Side-effect handler run before the failure report is written.

    Any object with a ``flush()`` method fits, including ``sys.stdout`` and
    :class:`logging.Handler` instances.
    """

    def flush(self) -> Any:
        """Push out pending side effects."""


@runtime_checkable
class Sink(Protocol):
    """Writable destination for the failure report."""

    def write(self, text: str) -> Any:
        """Write *text* to the destination."""


class Terminator(Protocol):
    """Strategy that ends the process.

    Production terminators never return. Test substitutes may record the call
    and return, in which case the reporter raises
    :class:`~lib_fatal_assert.domain.errors.AssertionViolation`.
    """

    def __call__(self, exit_code: int) -> None:
        """Terminate with *exit_code*."""
