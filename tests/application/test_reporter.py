"""Failure reporter pipeline: flush, build, write, terminate."""

from __future__ import annotations

import logging
import os

import pytest

from lib_fatal_assert.core import AssertionContext
from lib_fatal_assert.domain.errors import AssertionViolation, MalformedContextError
from lib_fatal_assert.predicates import never
from lib_fatal_assert.testing import RecordingSink, RecordingTerminator
from tests.support import CallLog, Dump


def test_report_writes_once_and_terminates_once(
    context: AssertionContext, sink: RecordingSink, terminator: RecordingTerminator
) -> None:
    with pytest.raises(AssertionViolation) as info:
        context.report("broken invariant", "a", 1)
    assert len(sink.reports) == 1
    assert terminator.exit_codes == [1]
    assert info.value.record.message == "broken invariant"
    assert str(info.value) == "broken invariant"


def test_report_layout(context: AssertionContext, sink: RecordingSink) -> None:
    context.add_diagnostic_data("d", Dump("dumped"))
    with pytest.raises(AssertionViolation):
        context.report("m", "a", 1)
    lines = sink.last.splitlines()
    assert lines[0] == "ARGS: ('a', 1)"
    assert lines[1] == "ASSERT"
    assert lines[2:6] == ["   msg=m", "   area=Assert", "   a=1", "   d=dumped"]
    assert lines[6] == "STACK (most recent call last):"
    assert "test_report_layout" in sink.last


def test_caller_pairs_precede_registry_pairs(context: AssertionContext, sink: RecordingSink) -> None:
    context.add_diagnostic_data("d", Dump("state"))
    with pytest.raises(AssertionViolation) as info:
        context.report("m", "a", 1)
    assert info.value.record.pair_keys() == ["a", "d"]
    assert sink.last.index("a=1") < sink.last.index("d=state")


def test_duplicate_caller_keys_are_all_emitted(context: AssertionContext, sink: RecordingSink) -> None:
    with pytest.raises(AssertionViolation):
        context.report("m", "k", 1, "k", 2)
    assert "   k=1\n   k=2\n" in sink.last


def test_stack_capture_omits_package_frames(context: AssertionContext, sink: RecordingSink) -> None:
    with pytest.raises(AssertionViolation):
        never("unreachable")
    stack = sink.last.split("STACK (most recent call last):\n", 1)[1]
    assert "lib_fatal_assert/application" not in stack
    assert "test_stack_capture_omits_package_frames" in stack


def test_stack_capture_can_be_disabled(context: AssertionContext, sink: RecordingSink) -> None:
    context.configure(context.settings.with_overrides(capture_stack=False))
    with pytest.raises(AssertionViolation) as info:
        context.report("m")
    assert info.value.record.stack == ""
    assert "STACK" not in sink.last


def test_configured_exit_code_reaches_terminator(
    context: AssertionContext, terminator: RecordingTerminator
) -> None:
    context.configure(context.settings.with_overrides(exit_code=70))
    with pytest.raises(AssertionViolation):
        context.report("m")
    assert terminator.exit_codes == [70]


def test_flush_handlers_run_before_write(context: AssertionContext, sink: RecordingSink) -> None:
    observed: list[int] = []

    class WriteOrder:
        def flush(self) -> None:
            observed.append(len(sink.reports))

    context.add_flush_handler(WriteOrder())
    with pytest.raises(AssertionViolation):
        context.report("m")
    assert observed == [0]
    assert sink.flushes == 1


def test_flush_handlers_run_in_order_once(context: AssertionContext) -> None:
    calls: list[str] = []
    for name in ("H1", "H2", "H3"):
        context.add_flush_handler(CallLog(name, calls))
    with pytest.raises(AssertionViolation):
        context.report("m")
    assert calls == ["H1", "H2", "H3"]


def test_second_report_skips_flush(context: AssertionContext, sink: RecordingSink) -> None:
    calls: list[str] = []
    context.add_flush_handler(CallLog("h", calls))
    for _ in range(2):
        with pytest.raises(AssertionViolation):
            context.report("m")
    assert calls == ["h"]
    assert len(sink.reports) == 2


def test_reentrant_failure_from_flush_handler_does_not_recurse(
    context: AssertionContext,
    sink: RecordingSink,
    terminator: RecordingTerminator,
    caplog: pytest.LogCaptureFixture,
) -> None:
    caplog.set_level(logging.DEBUG, logger="lib_fatal_assert")
    flushed: list[str] = []

    class Reentrant:
        def flush(self) -> None:
            flushed.append("reentrant")
            never("nested failure", "depth", 2)

    context.add_flush_handler(Reentrant())
    context.add_flush_handler(CallLog("after", flushed))

    with pytest.raises(AssertionViolation) as info:
        never("outer failure")

    assert flushed == ["reentrant", "after"]
    assert info.value.record.message == "outer failure"
    assert "msg=nested failure" in sink.reports[0]
    assert "msg=outer failure" in sink.reports[1]
    assert terminator.calls == 2
    messages = [record.getMessage() for record in caplog.records]
    assert "flush_skipped_reentrant" in messages
    assert "flush_handler_failed" in messages


def test_odd_context_list_raises_before_writing(
    context: AssertionContext, sink: RecordingSink, terminator: RecordingTerminator
) -> None:
    with pytest.raises(MalformedContextError):
        context.report("m", "dangling")
    assert sink.reports == []
    assert terminator.calls == 0


def test_odd_context_list_leaves_flush_step_to_next_failure(
    context: AssertionContext, sink: RecordingSink, terminator: RecordingTerminator
) -> None:
    calls: list[str] = []
    context.add_flush_handler(CallLog("h", calls))
    with pytest.raises(MalformedContextError):
        never("m", "dangling")
    assert calls == []
    assert not context.latch.is_set

    with pytest.raises(AssertionViolation):
        never("real failure")
    assert calls == ["h"]
    assert "   msg=real failure\n" in sink.last
    assert terminator.calls == 1


def test_assertion_failed_is_logged(context: AssertionContext, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.ERROR, logger="lib_fatal_assert")
    with pytest.raises(AssertionViolation):
        context.report("logged failure", "a", 1)
    record = next(r for r in caplog.records if r.getMessage() == "assertion_failed")
    assert getattr(record, "context")["assert_message"] == "logged failure"
    assert getattr(record, "context")["pairs"] == 1


def test_sink_replacement_last_writer_wins() -> None:
    first, second = RecordingSink(), RecordingSink()
    ctx = AssertionContext(sink=first, terminator=RecordingTerminator())
    ctx.set_sink(second)
    with pytest.raises(AssertionViolation):
        ctx.report("m")
    assert first.reports == []
    assert len(second.reports) == 1


class BrokenSink:
    def __init__(self) -> None:
        self.attempts = 0

    def write(self, text: str) -> None:
        self.attempts += 1
        raise OSError("broken pipe")


class Unprintable:
    def __str__(self) -> str:
        raise RuntimeError("no text")

    def __repr__(self) -> str:
        raise RuntimeError("no repr")


def test_failing_sink_still_terminates(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.ERROR, logger="lib_fatal_assert")
    sink = BrokenSink()
    terminator = RecordingTerminator()
    ctx = AssertionContext(sink=sink, terminator=terminator)
    with pytest.raises(AssertionViolation):
        never("m", context=ctx)
    assert sink.attempts == 1
    assert terminator.exit_codes == [1]
    record = next(r for r in caplog.records if r.getMessage() == "report_write_failed")
    assert getattr(record, "context")["error_type"] == "OSError"


def test_value_with_raising_str_is_rendered_and_terminates(
    context: AssertionContext, sink: RecordingSink, terminator: RecordingTerminator
) -> None:
    with pytest.raises(AssertionViolation):
        never("m", "k", Unprintable())
    assert "   k=<unprintable Unprintable: RuntimeError: no text>\n" in sink.last
    assert sink.last.startswith("ARGS: <unprintable tuple: RuntimeError: no repr>\n")
    assert terminator.calls == 1


def test_message_field_does_not_collide_with_log_event(
    context: AssertionContext, caplog: pytest.LogCaptureFixture
) -> None:
    caplog.set_level(logging.ERROR, logger="lib_fatal_assert")
    with pytest.raises(AssertionViolation):
        never("plain failure")
    assert [r.getMessage() for r in caplog.records].count("assertion_failed") == 1


def test_package_frame_filter_matches_whole_directory_names() -> None:
    from lib_fatal_assert.application import reporter

    assert reporter._PACKAGE_PREFIX.endswith(os.sep)
    sibling = reporter._PACKAGE_PREFIX.rstrip(os.sep) + "_ext" + os.sep + "mod.py"
    assert not sibling.startswith(reporter._PACKAGE_PREFIX)
