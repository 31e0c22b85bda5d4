"""Report sinks."""

from .stream import StderrSink, StreamSink, as_sink

__all__ = ["StderrSink", "StreamSink", "as_sink"]
