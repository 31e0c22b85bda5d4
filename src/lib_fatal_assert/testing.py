"""Test doubles that keep failure scenarios observable without ending the process.

Purpose
    The default terminator ends the interpreter, which would also end a test
    run. These helpers record what the pipeline did instead.

Contents
    - ``RecordingTerminator``: remembers every exit code it was handed.
    - ``RecordingSink``: keeps every report written to it.
    - ``isolated_context``: installs a fresh default context wired to both.
    - ``trigger_demo_failure``: fires a deterministic ``never()`` assertion.

System Integration
    Used by the test suite and the CLI ``fail`` command.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Final, Iterator

from .core import AssertionContext, use_context
from .domain.settings import AssertSettings
from .predicates import never

DEMO_MESSAGE: Final[str] = "i should fail"
"""Stable message used by :func:`trigger_demo_failure`."""


class RecordingTerminator:
    """Terminator that records exit codes and returns."""

    def __init__(self) -> None:
        self.exit_codes: list[int] = []

    @property
    def calls(self) -> int:
        return len(self.exit_codes)

    def __call__(self, exit_code: int) -> None:
        self.exit_codes.append(exit_code)


class RecordingSink:
    """Sink that keeps each written report as a separate string."""

    def __init__(self) -> None:
        self.reports: list[str] = []
        self.flushes = 0

    def write(self, text: str) -> None:
        self.reports.append(text)

    def flush(self) -> None:
        self.flushes += 1

    @property
    def last(self) -> str:
        return self.reports[-1]


@contextmanager
def isolated_context(settings: AssertSettings | None = None) -> Iterator[AssertionContext]:
    """Install a fresh default context wired to recording doubles.

    Examples
    --------
    >>> from lib_fatal_assert.domain.errors import AssertionViolation
    >>> with isolated_context() as ctx:
    ...     try:
    ...         never("unreachable")
    ...     except AssertionViolation:
    ...         pass
    ...     ctx.terminator.exit_codes
    [1]
    """

    context = AssertionContext(settings=settings, sink=RecordingSink(), terminator=RecordingTerminator())
    with use_context(context):
        yield context


def trigger_demo_failure(context: AssertionContext | None = None) -> None:
    """Fire :func:`never` with :data:`DEMO_MESSAGE` and a fixed context pair."""

    never(DEMO_MESSAGE, "source", "lib_fatal_assert.testing", context=context)
