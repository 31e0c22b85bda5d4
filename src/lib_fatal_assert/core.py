"""Composition root for ``lib_fatal_assert``.

Purpose
-------
Wire the registries, the reentrancy latch, the sink, the terminator and the
reporter into one owned :class:`AssertionContext`. A process-wide default
context backs the module-level helpers so call sites can assert without
threading a context through every function; tests and embedded runtimes build
their own contexts instead.

Contents
--------
* :class:`AssertionContext` – owns all assertion state for one scope.
* :func:`get_default_context` / :func:`set_default_context` /
  :func:`use_context` – manage the process-wide default.
* :func:`default_context_from_env` – builds a context configured from
  environment variables.
* :func:`add_diagnostic_data`, :func:`remove_diagnostic_data`,
  :func:`add_flush_handler`, :func:`remove_flush_handler`, :func:`set_sink`,
  :func:`set_terminator` – module-level helpers bound to the default context.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Any, Iterator, Mapping, NoReturn

from .adapters.env.default import DEFAULT_PREFIX, EnvSettingsLoader
from .adapters.sinks.stream import StderrSink, Stream, as_sink
from .adapters.terminators.default import exit_process
from .application.latch import ReentrancyLatch
from .application.ports import Dumpable, Flushable, Sink, Terminator
from .application.registries import DiagnosticRegistry, FlushRegistry
from .application.reporter import FailureReporter
from .domain.settings import AssertSettings


class AssertionContext:
    """All state consulted when an assertion fires.

    Why
    ----
    Keeping the registries, sink and terminator on an explicit object gives
    tests isolation and lets a host run independent assertion scopes.

    Parameters
    ----------
    settings:
        Initial settings; defaults to :class:`AssertSettings`.
    sink:
        Report destination; defaults to the current ``sys.stderr``. Raw
        streams are wrapped via :func:`~lib_fatal_assert.adapters.sinks.stream.as_sink`.
    terminator:
        Termination strategy; defaults to
        :func:`~lib_fatal_assert.adapters.terminators.default.exit_process`.

    Examples
    --------
    >>> import io
    >>> from lib_fatal_assert.testing import RecordingTerminator
    >>> from lib_fatal_assert.domain.errors import AssertionViolation
    >>> out = io.StringIO()
    >>> ctx = AssertionContext(sink=out, terminator=RecordingTerminator())
    >>> try:
    ...     ctx.report("broken", "user", 7)
    ... except AssertionViolation as exc:
    ...     exc.record.pairs
    (('user', 7),)
    """

    def __init__(
        self,
        *,
        settings: AssertSettings | None = None,
        sink: Sink | Stream | None = None,
        terminator: Terminator | None = None,
    ) -> None:
        self.diagnostics = DiagnosticRegistry()
        self.flushes = FlushRegistry()
        self.latch = ReentrancyLatch()
        self.reporter = FailureReporter(self.diagnostics, self.flushes, self.latch)
        self._lock = threading.Lock()
        self._settings = settings or AssertSettings()
        self._sink: Sink = as_sink(sink) if sink is not None else StderrSink()
        self._terminator: Terminator = terminator or exit_process

    @property
    def settings(self) -> AssertSettings:
        with self._lock:
            return self._settings

    @property
    def sink(self) -> Sink:
        with self._lock:
            return self._sink

    @property
    def terminator(self) -> Terminator:
        with self._lock:
            return self._terminator

    def configure(self, settings: AssertSettings) -> None:
        """Replace the active settings."""

        with self._lock:
            self._settings = settings

    def set_sink(self, destination: Sink | Stream) -> None:
        """Route future reports to *destination*; the last call wins."""

        sink = as_sink(destination)
        with self._lock:
            self._sink = sink

    def set_terminator(self, terminator: Terminator) -> None:
        with self._lock:
            self._terminator = terminator

    def add_diagnostic_data(self, key: str, entry: Dumpable) -> None:
        self.diagnostics.add(key, entry)

    def remove_diagnostic_data(self, key: str) -> None:
        self.diagnostics.remove(key)

    def add_flush_handler(self, handler: Flushable) -> None:
        self.flushes.register(handler)

    def remove_flush_handler(self, handler: Flushable) -> None:
        self.flushes.remove(handler)

    def report(self, message: str, *data: Any) -> NoReturn:
        """Write the failure report for *message* and terminate."""

        with self._lock:
            sink, terminator, settings = self._sink, self._terminator, self._settings
        self.reporter.report(message, data, sink=sink, terminator=terminator, settings=settings)


_DEFAULT_LOCK = threading.Lock()
_DEFAULT_CONTEXT: AssertionContext | None = None


def get_default_context() -> AssertionContext:
    """Return the process-wide context, creating it on first use."""

    global _DEFAULT_CONTEXT
    with _DEFAULT_LOCK:
        if _DEFAULT_CONTEXT is None:
            _DEFAULT_CONTEXT = AssertionContext()
        return _DEFAULT_CONTEXT


def set_default_context(context: AssertionContext) -> AssertionContext | None:
    """Install *context* as the process-wide default and return the previous one."""

    global _DEFAULT_CONTEXT
    with _DEFAULT_LOCK:
        previous = _DEFAULT_CONTEXT
        _DEFAULT_CONTEXT = context
        return previous


@contextmanager
def use_context(context: AssertionContext) -> Iterator[AssertionContext]:
    """Temporarily install *context* as the default.

    The previous default is restored on exit, even when the block raises.
    """

    global _DEFAULT_CONTEXT
    previous = set_default_context(context)
    try:
        yield context
    finally:
        with _DEFAULT_LOCK:
            _DEFAULT_CONTEXT = previous


def default_context_from_env(
    environ: Mapping[str, str] | None = None,
    *,
    prefix: str = DEFAULT_PREFIX,
    sink: Sink | Stream | None = None,
    terminator: Terminator | None = None,
) -> AssertionContext:
    """Build a context whose settings come from prefixed environment variables."""

    settings = EnvSettingsLoader(environ=environ).load(prefix)
    return AssertionContext(settings=settings, sink=sink, terminator=terminator)


def add_diagnostic_data(key: str, entry: Dumpable) -> None:
    """Include ``entry.dump()`` under *key* in every future failure report."""

    get_default_context().add_diagnostic_data(key, entry)


def remove_diagnostic_data(key: str) -> None:
    """Stop reporting *key*; unknown keys are ignored."""

    get_default_context().remove_diagnostic_data(key)


def add_flush_handler(handler: Flushable) -> None:
    """Flush *handler* before every future failure report."""

    get_default_context().add_flush_handler(handler)


def remove_flush_handler(handler: Flushable) -> None:
    get_default_context().remove_flush_handler(handler)


def set_sink(destination: Sink | Stream) -> None:
    """Send future failure reports to *destination*."""

    get_default_context().set_sink(destination)


def set_terminator(terminator: Terminator) -> None:
    get_default_context().set_terminator(terminator)


__all__ = [
    "AssertionContext",
    "get_default_context",
    "set_default_context",
    "use_context",
    "default_context_from_env",
    "add_diagnostic_data",
    "remove_diagnostic_data",
    "add_flush_handler",
    "remove_flush_handler",
    "set_sink",
    "set_terminator",
]
