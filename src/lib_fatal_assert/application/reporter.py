"""Failure reporter: the flush, format, write and terminate pipeline.

Purpose
-------
Turn a violated assertion into exactly one written report followed by process
termination. The reporter owns the ordering guarantees:

1. flush handlers run (first report only, see :mod:`.latch`);
2. the record is built with caller pairs before registry pairs;
3. the report is written to the sink once;
4. the terminator is called with the configured exit status.

Contents
    - ``FailureReporter``: orchestrates the steps above.
    - ``capture_stack``: formats the caller's stack without this package's frames.
"""

from __future__ import annotations

import os
import traceback
from pathlib import Path
from typing import Any, NoReturn, Sequence

from ..domain.errors import AssertionViolation
from ..domain.record import FailureRecord, build_record, format_report, pair_arguments, render_value
from ..domain.settings import AssertSettings
from ..observability import log_debug, log_error, make_event
from .latch import ReentrancyLatch
from .ports import Sink, Terminator
from .registries import DiagnosticRegistry, FlushRegistry

_PACKAGE_PREFIX = str(Path(__file__).resolve().parent.parent) + os.sep
STACK_HEADER = "STACK (most recent call last):"


class FailureReporter:
    """Run the report-and-terminate sequence for one context."""

    def __init__(
        self,
        diagnostics: DiagnosticRegistry,
        flushes: FlushRegistry,
        latch: ReentrancyLatch,
    ) -> None:
        self.diagnostics = diagnostics
        self.flushes = flushes
        self.latch = latch

    def report(
        self,
        message: str,
        arguments: Sequence[Any],
        *,
        sink: Sink,
        terminator: Terminator,
        settings: AssertSettings,
    ) -> NoReturn:
        """Emit the failure report for *message* and terminate.

        The terminator is called even when the sink fails to accept the
        report; the write failure is logged as ``report_write_failed``.

        Raises
        ------
        MalformedContextError
            When *arguments* cannot be paired. Raised before any flush handler
            runs, so the latch stays untouched.
        AssertionViolation
            When *terminator* returns instead of ending the process.
        """

        pair_arguments(arguments)

        if self.latch.enter():
            self.flushes.run_all()
        else:
            log_debug("flush_skipped_reentrant", **make_event("flush", None))

        stack = capture_stack() if settings.capture_stack else ""
        record = build_record(
            message,
            arguments,
            self.diagnostics.snapshot(),
            stack=stack,
            exit_code=settings.exit_code,
        )
        log_error(
            "assertion_failed",
            **make_event("report", None, {"assert_message": render_value(message), "pairs": len(record.pairs)}),
        )
        try:
            self._write(sink, record)
        except Exception as exc:  # noqa: BLE001 - termination must still happen
            log_error(
                "report_write_failed",
                **make_event("report", None, {"error": render_value(exc), "error_type": type(exc).__name__}),
            )
        terminator(record.exit_code)
        raise AssertionViolation(record)

    @staticmethod
    def _write(sink: Sink, record: FailureRecord) -> None:
        sink.write(format_report(record))
        flush = getattr(sink, "flush", None)
        if callable(flush):
            flush()


def capture_stack() -> str:
    """Return the current call stack, outermost frame first, minus package frames."""

    frames = [frame for frame in traceback.extract_stack() if not frame.filename.startswith(_PACKAGE_PREFIX)]
    return STACK_HEADER + "\n" + "".join(traceback.format_list(frames))
