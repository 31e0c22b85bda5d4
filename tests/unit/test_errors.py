from __future__ import annotations

from lib_fatal_assert.domain.errors import (
    AssertionViolation,
    FatalAssertError,
    InvalidSetting,
    MalformedContextError,
)
from lib_fatal_assert.domain.record import build_record


def test_error_hierarchy() -> None:
    assert issubclass(AssertionViolation, FatalAssertError)
    assert issubclass(MalformedContextError, FatalAssertError)
    assert issubclass(InvalidSetting, FatalAssertError)
    assert not issubclass(MalformedContextError, ValueError)
    assert issubclass(InvalidSetting, ValueError)


def test_assertion_violation_carries_record() -> None:
    record = build_record("invariant broken", ["a", 1], {})
    error = AssertionViolation(record)
    assert error.record is record
    assert str(error) == "invariant broken"
