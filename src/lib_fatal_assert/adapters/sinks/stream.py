"""Stream sinks for the failure report.

Purpose
-------
Adapt writable streams to the :class:`~lib_fatal_assert.application.ports.Sink`
port. Text streams receive the report unchanged; binary streams receive it
encoded as UTF-8.

Contents
--------
* :class:`StreamSink` – wraps one concrete stream.
* :class:`StderrSink` – resolves :data:`sys.stderr` at write time so stream
  replacement (pytest's ``capsys``, daemonisation) is honoured.
* :func:`as_sink` – wraps arbitrary writable objects.
"""

from __future__ import annotations

import io
import sys
from typing import Any, BinaryIO, TextIO, Union

from ...application.ports import Sink

Stream = Union[TextIO, BinaryIO, Any]


class StreamSink:
    """Write reports to a single text or binary stream."""

    def __init__(self, stream: Stream, *, encoding: str = "utf-8") -> None:
        self._stream = stream
        self._encoding = encoding

    @property
    def stream(self) -> Stream:
        return self._stream

    def write(self, text: str) -> None:
        """Write *text*, encoding it when the stream only accepts bytes.

        >>> buffer = io.BytesIO()
        >>> StreamSink(buffer).write("ASSERT\\n")
        >>> buffer.getvalue()
        b'ASSERT\\n'
        """

        _write(self._stream, text, self._encoding)

    def flush(self) -> None:
        flush = getattr(self._stream, "flush", None)
        if callable(flush):
            flush()


class StderrSink:
    """Write reports to whatever :data:`sys.stderr` is at write time."""

    def write(self, text: str) -> None:
        _write(sys.stderr, text, "utf-8")

    def flush(self) -> None:
        sys.stderr.flush()


def as_sink(destination: Stream) -> Sink:
    """Return *destination* as a :class:`Sink`.

    Binary streams are wrapped in a :class:`StreamSink` so they receive encoded
    output; text streams and custom sinks are returned unchanged.

    >>> buffer = io.StringIO()
    >>> as_sink(buffer) is buffer
    True
    >>> isinstance(as_sink(io.BytesIO()), StreamSink)
    True
    """

    if _is_binary(destination):
        return StreamSink(destination)
    return destination


def _write(stream: Stream, text: str, encoding: str) -> None:
    if _is_binary(stream):
        stream.write(text.encode(encoding))
        return
    stream.write(text)


def _is_binary(stream: Stream) -> bool:
    if isinstance(stream, io.TextIOBase):
        return False
    if isinstance(stream, (io.RawIOBase, io.BufferedIOBase)):
        return True
    mode = getattr(stream, "mode", "")
    return isinstance(mode, str) and "b" in mode
