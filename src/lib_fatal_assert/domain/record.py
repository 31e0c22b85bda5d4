"""Failure record value object and report formatting.

Purpose
-------
Hold everything known about one violated assertion and render it as the
human-readable text written to the sink. The module performs no I/O.

Contents
--------
* :class:`FailureRecord` – frozen snapshot built once per failure.
* :func:`pair_arguments` – reads variadic context data as ``key, value`` pairs.
* :func:`build_record` – merges caller pairs with a registry snapshot.
* :func:`render_value` – converts one value to text without raising.
* :func:`format_report` – renders the textual report.

Report layout
-------------
::

    ARGS: ('user', 42)
    ASSERT
       msg=user must exist
       area=Assert
       user=42
       session=<dump>
    <stack capture>

The layout is a convention for humans, not a parseable format.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

from .errors import MalformedContextError

HEADER = "ASSERT"
AREA = "Assert"


@dataclass(frozen=True, slots=True)
class FailureRecord:
    """Everything captured for a single violated assertion.

    Attributes
    ----------
    message:
        Caller-supplied description of the violated invariant.
    arguments:
        Raw variadic context data exactly as passed by the caller.
    pairs:
        Caller pairs in call order followed by one pair per diagnostic entry.
        Keys may repeat; every occurrence is kept.
    diagnostics:
        Registry snapshot (key to dump text) taken at failure time.
    stack:
        Formatted call stack, empty when stack capture is disabled.
    exit_code:
        Status handed to the terminator.
    """

    message: str
    arguments: tuple[Any, ...]
    pairs: tuple[tuple[Any, Any], ...]
    diagnostics: Mapping[str, str] = field(default_factory=dict)
    stack: str = ""
    exit_code: int = 1

    def pair_keys(self) -> list[Any]:
        """Return the keys of :attr:`pairs` in report order."""

        return [key for key, _ in self.pairs]


def pair_arguments(arguments: Sequence[Any]) -> list[tuple[Any, Any]]:
    """Read *arguments* as alternating keys and values.

    Raises
    ------
    MalformedContextError
        When the sequence has an odd length.

    Examples
    --------
    >>> pair_arguments(["user", 42, "retry", True])
    [('user', 42), ('retry', True)]
    >>> pair_arguments(["dangling"])
    Traceback (most recent call last):
    ...
    lib_fatal_assert.domain.errors.MalformedContextError: context data needs key/value pairs, got 1 item(s)
    """

    if len(arguments) % 2:
        raise MalformedContextError(f"context data needs key/value pairs, got {len(arguments)} item(s)")
    return [(arguments[index], arguments[index + 1]) for index in range(0, len(arguments), 2)]


def build_record(
    message: str,
    arguments: Sequence[Any],
    diagnostics: Mapping[str, str],
    *,
    stack: str = "",
    exit_code: int = 1,
) -> FailureRecord:
    """Create the :class:`FailureRecord` for one failure.

    Caller pairs always come before registry pairs.

    >>> record = build_record("m", ["a", 1], {"d": "state"})
    >>> record.pairs
    (('a', 1), ('d', 'state'))
    """

    pairs = pair_arguments(arguments)
    pairs.extend(diagnostics.items())
    return FailureRecord(
        message=message,
        arguments=tuple(arguments),
        pairs=tuple(pairs),
        diagnostics=dict(diagnostics),
        stack=stack,
        exit_code=exit_code,
    )


def render_value(value: Any, *, as_repr: bool = False) -> str:
    """Return ``str(value)`` (or ``repr``), or a marker when that conversion raises.

    >>> class Broken:
    ...     def __str__(self) -> str:
    ...         raise RuntimeError("no text")
    >>> render_value(Broken())
    '<unprintable Broken: RuntimeError: no text>'
    """

    try:
        return repr(value) if as_repr else str(value)
    except Exception as exc:  # noqa: BLE001 - a broken value must not abort the report
        return f"<unprintable {type(value).__name__}: {type(exc).__name__}: {exc}>"


def format_report(record: FailureRecord) -> str:
    """Render *record* as report text ending with a newline.

    Values whose ``str``/``repr`` raise are rendered as ``<unprintable ...>``.

    >>> print(format_report(build_record("boom", ["a", 1], {})), end="")
    ARGS: ('a', 1)
    ASSERT
       msg=boom
       area=Assert
       a=1
    """

    lines = [f"ARGS: {render_value(record.arguments, as_repr=True)}", HEADER]
    lines.append(f"   msg={render_value(record.message)}")
    lines.append(f"   area={AREA}")
    lines.extend(f"   {render_value(key)}={render_value(value)}" for key, value in record.pairs)
    if record.stack:
        lines.append(record.stack.rstrip("\n"))
    return "\n".join(lines) + "\n"
