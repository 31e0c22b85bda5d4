"""Public assertion predicates.

Each predicate evaluates one condition. When the condition holds it returns
``None`` with no side effects. When it is violated it hands the message and the
context data to the active :class:`~lib_fatal_assert.core.AssertionContext`,
which writes a report and terminates; the predicate never returns normally.

Context data is variadic and read as alternating keys and values::

    assert_true(balance >= 0, "balance went negative", "account", account_id, "balance", balance)

Pass ``context=`` to target an explicit context instead of the process-wide
default.
"""

from __future__ import annotations

import ctypes
import weakref
from typing import Any

from .core import AssertionContext, get_default_context
from .domain.record import render_value
from .observability import debug_enabled, log_debug, log_error, make_event

_SIMPLE_POINTERS = (ctypes.c_void_p, ctypes.c_char_p, ctypes.c_wchar_p)
_PROXY_TYPES = (weakref.ProxyType, weakref.CallableProxyType)


def is_absent(item: Any) -> bool:
    """Return ``True`` when *item* is ``None`` or a wrapper around nothing.

    Wrappers recognised as absent: dead :func:`weakref.ref` objects, dead
    :func:`weakref.proxy` objects, NULL :mod:`ctypes` pointers and ``ctypes``
    simple pointers whose value is ``None``.

    Examples
    --------
    >>> is_absent(None), is_absent(0), is_absent("")
    (True, False, False)
    >>> is_absent(ctypes.POINTER(ctypes.c_int)())
    True
    >>> is_absent(ctypes.c_void_p())
    True
    """

    if item is None:
        return True
    # isinstance() reads __class__, which raises on a dead proxy
    if type(item) in _PROXY_TYPES:
        try:
            item.__class__
        except ReferenceError:
            return True
        return False
    if isinstance(item, weakref.ReferenceType):
        return item() is None
    if isinstance(item, ctypes._Pointer):
        return not bool(item)
    if isinstance(item, _SIMPLE_POINTERS):
        return item.value is None
    return False


def assert_true(condition: Any, message: str, *data: Any, context: AssertionContext | None = None) -> None:
    """Fail unless *condition* is truthy."""

    ctx = _resolve(context)
    if not ctx.settings.enabled or condition:
        return
    ctx.report(message, *data)


def no_error(
    err: BaseException | None,
    message: str,
    *data: Any,
    context: AssertionContext | None = None,
) -> None:
    """Fail when *err* is not ``None``; the error is appended as ``error=<err>``.

    Typical use with APIs that return an error instead of raising::

        result, err = client.fetch()
        no_error(err, "fetch failed", "endpoint", client.endpoint)
    """

    ctx = _resolve(context)
    if not ctx.settings.enabled or err is None:
        return
    ctx.report(message, *data, "error", err)


def is_nil(item: Any, message: str, *data: Any, context: AssertionContext | None = None) -> None:
    """Fail when *item* is present (see :func:`is_absent`)."""

    ctx = _resolve(context)
    if not ctx.settings.enabled:
        return
    if debug_enabled():
        log_debug("nil_check", **make_event("is_nil", None, {"item": render_value(item, as_repr=True)}))
    if is_absent(item):
        return
    log_error("nil_violation", **make_event("is_nil", None, {"expected": "absent"}))
    ctx.report(message, *data)


def not_nil(item: Any, message: str, *data: Any, context: AssertionContext | None = None) -> None:
    """Fail when *item* is absent, including wrappers holding nothing."""

    ctx = _resolve(context)
    if not ctx.settings.enabled or not is_absent(item):
        return
    log_error("nil_violation", **make_event("not_nil", None, {"expected": "present"}))
    ctx.report(message, *data)


def never(message: str, *data: Any, context: AssertionContext | None = None) -> None:
    """Mark code that must be unreachable; always fails when enabled."""

    ctx = _resolve(context)
    if not ctx.settings.enabled:
        return
    ctx.report(message, *data)


def _resolve(context: AssertionContext | None) -> AssertionContext:
    return context if context is not None else get_default_context()


__all__ = ["assert_true", "no_error", "is_nil", "not_nil", "never", "is_absent"]
