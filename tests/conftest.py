"""Shared fixtures: every test gets its own assertion context wired to recording doubles."""

from __future__ import annotations

from typing import Iterator

import pytest

from lib_fatal_assert.core import AssertionContext
from lib_fatal_assert.testing import RecordingSink, RecordingTerminator, isolated_context


@pytest.fixture()
def context() -> Iterator[AssertionContext]:
    """Install a fresh default context so module-level helpers stay isolated."""

    with isolated_context() as ctx:
        yield ctx


@pytest.fixture()
def sink(context: AssertionContext) -> RecordingSink:
    assert isinstance(context.sink, RecordingSink)
    return context.sink


@pytest.fixture()
def terminator(context: AssertionContext) -> RecordingTerminator:
    assert isinstance(context.terminator, RecordingTerminator)
    return context.terminator
