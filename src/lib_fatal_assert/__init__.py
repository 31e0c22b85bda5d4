"""Public package surface for fatal runtime assertions.

Importing the package exposes the predicates, the registry helpers bound to
the process-wide default context, and the types needed to build isolated
contexts. Logging stays silent until the host attaches handlers to
:func:`get_logger`.
"""

from __future__ import annotations

from .application.ports import Dumpable, Flushable, Sink, Terminator
from .core import (
    AssertionContext,
    add_diagnostic_data,
    add_flush_handler,
    default_context_from_env,
    get_default_context,
    remove_diagnostic_data,
    remove_flush_handler,
    set_default_context,
    set_sink,
    set_terminator,
    use_context,
)
from .domain.errors import AssertionViolation, FatalAssertError, InvalidSetting, MalformedContextError
from .domain.record import FailureRecord
from .domain.settings import AssertSettings
from .observability import bind_trace_id, get_logger
from .predicates import assert_true, is_absent, is_nil, never, no_error, not_nil

__all__ = [
    "assert_true",
    "no_error",
    "is_nil",
    "not_nil",
    "never",
    "is_absent",
    "add_diagnostic_data",
    "remove_diagnostic_data",
    "add_flush_handler",
    "remove_flush_handler",
    "set_sink",
    "set_terminator",
    "AssertionContext",
    "get_default_context",
    "set_default_context",
    "use_context",
    "default_context_from_env",
    "AssertSettings",
    "FailureRecord",
    "Dumpable",
    "Flushable",
    "Sink",
    "Terminator",
    "FatalAssertError",
    "AssertionViolation",
    "MalformedContextError",
    "InvalidSetting",
    "bind_trace_id",
    "get_logger",
]
