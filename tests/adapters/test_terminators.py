from __future__ import annotations

import os

import pytest

from lib_fatal_assert.adapters.terminators import default as terminators


def test_raise_system_exit_carries_code() -> None:
    with pytest.raises(SystemExit) as info:
        terminators.raise_system_exit(3)
    assert info.value.code == 3


def test_exit_process_flushes_and_calls_os_exit(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[int] = []
    monkeypatch.setattr(os, "_exit", calls.append)
    terminators.exit_process(1)
    assert calls == [1]


def test_exit_process_tolerates_closed_stdout(monkeypatch: pytest.MonkeyPatch) -> None:
    class Closed:
        def flush(self) -> None:
            raise ValueError("I/O operation on closed file.")

    calls: list[int] = []
    monkeypatch.setattr(terminators.sys, "stdout", Closed())
    monkeypatch.setattr(os, "_exit", calls.append)
    terminators.exit_process(2)
    assert calls == [2]
