"""Reentrancy latch guarding the flush step of the failure reporter.

A flush handler may itself trip an assertion. The latch lets only the first
report run the flush handlers; any report started after it skips the flush
step and goes straight to formatting and termination.
"""

from __future__ import annotations

import threading
from enum import Enum


class LatchState(Enum):
    CLEAR = "clear"
    SET = "set"


class ReentrancyLatch:
    """Two-state machine: ``CLEAR -> SET``, with ``SET`` terminal.

    >>> latch = ReentrancyLatch()
    >>> latch.enter(), latch.enter()
    (True, False)
    >>> latch.state
    <LatchState.SET: 'set'>
    """

    def __init__(self) -> None:
        self._state = LatchState.CLEAR
        self._lock = threading.Lock()

    @property
    def state(self) -> LatchState:
        return self._state

    @property
    def is_set(self) -> bool:
        return self._state is LatchState.SET

    def enter(self) -> bool:
        """Move to ``SET``; return ``True`` only for the call that made the transition."""

        with self._lock:
            if self._state is LatchState.SET:
                return False
            self._state = LatchState.SET
            return True
