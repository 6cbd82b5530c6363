"""Binary stream sink.

Purpose
-------
Adapt a binary file object (``sys.stdout.buffer``, an open log file, a pipe)
to :class:`~lib_event_buffer.application.ports.SinkPort` so each emitted line
reaches the underlying descriptor immediately.

Contents
--------
* :class:`StreamSink` - writes then flushes the wrapped stream.
"""

from __future__ import annotations

from typing import BinaryIO

from lib_event_buffer.application.ports.sink import SinkPort


class StreamSink(SinkPort):
    """Write each line to ``stream`` and flush it.

    The stream is never closed here; its owner decides when that happens.

    Examples
    --------
    >>> import io
    >>> stream = io.BytesIO()
    >>> StreamSink(stream).write(b"line\\n")
    5
    >>> stream.getvalue()
    b'line\\n'
    """

    def __init__(self, stream: BinaryIO, *, flush: bool = True) -> None:
        self._stream = stream
        self._flush = flush

    def write(self, data: bytes, /) -> int:
        written = self._stream.write(data)
        if self._flush:
            self._stream.flush()
        return len(data) if written is None else written


__all__ = ["StreamSink"]
