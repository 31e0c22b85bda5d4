"""Domain-level exception hierarchy.

Purpose
-------
Name the few ways the assertion machinery itself can surface an error. None of
these describe a recoverable condition inside a running program: a violated
assertion terminates the process. They exist for caller-contract violations
and for test builds that replace the terminator.

Contents
--------
* :class:`FatalAssertError` – umbrella base class for the package.
* :class:`AssertionViolation` – raised when an injected terminator returns
  instead of ending the process.
* :class:`MalformedContextError` – the variadic context data could not be
  paired into ``key, value`` entries.
* :class:`InvalidSetting` – an environment override could not be interpreted.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .record import FailureRecord


class FatalAssertError(Exception):
    """Base type for all exceptions emitted by ``lib_fatal_assert``."""


class AssertionViolation(FatalAssertError):
    """Signal that an assertion fired but the configured terminator returned.

    Why
    ----
    A violated predicate must never resume its caller. The default terminator
    ends the process; substitutes used by test suites may return, in which case
    the reporter raises this exception so control still leaves the call site.

    Attributes
    ----------
    record:
        The :class:`~lib_fatal_assert.domain.record.FailureRecord` that was
        written to the sink.
    """

    def __init__(self, record: "FailureRecord") -> None:
        super().__init__(record.message)
        self.record = record


class MalformedContextError(FatalAssertError):
    """Raised when context data has an odd number of items.

    Context data is read as alternating keys and values. A dangling key is a
    caller bug and is reported as such instead of being paired with a guessed
    placeholder.
    """


class InvalidSetting(FatalAssertError, ValueError):
    """Raised when an environment override holds an unusable value."""
