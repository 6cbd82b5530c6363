"""Bounded, escaping, periodically flushed line buffer.

Purpose
-------
Turn a stream of raw output bytes (captured process or container output) into
discrete, size-limited, optionally JSON-wrapped lines written to a sink.

Contents
--------
* :class:`EventBuffer` - accumulate with :meth:`~EventBuffer.write`, emit with
  :meth:`~EventBuffer.flush`, and optionally let a background worker flush on a
  timer via :meth:`~EventBuffer.auto_flush`.

System Role
-----------
Composition point joining the escaping and framing rules from
:mod:`lib_event_buffer.domain` with the :class:`AutoFlusher` adapter. One lock
guards the buffered content and the sink write so foreground and background
flushes never interleave.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from types import TracebackType
from typing import Any

from .adapters.autoflush import AutoFlusher
from .application.ports import SinkPort, TimerFactory
from .domain import LineFormat, escape_into

LOGGER = logging.getLogger(__name__)


class EventBuffer:
    """Accumulate escaped bytes and emit them as single lines.

    Parameters
    ----------
    sink:
        Destination receiving one ``write`` call per emitted line. Never closed
        by the buffer.
    max_len:
        ``0`` for no limit; otherwise the hard byte ceiling for buffered
        content and for every emitted line, wrapper and terminator included.
    eol:
        Terminator appended to every emitted line; empty for none.
    json_field:
        Empty for raw lines; otherwise lines are emitted as
        ``{"<json_field>":"<content>"}``.
    timer_factory:
        Tick source used by :meth:`auto_flush`.
    on_autoflush:
        Hook invoked after every background flush cycle.
    stop_timeout:
        Seconds :meth:`close` waits for the background worker.
    diagnostic:
        ``(name, payload)`` callback for background failures.

    Examples
    --------
    >>> import io
    >>> out = io.BytesIO()
    >>> buffer = EventBuffer(out, 0, b"\\n", "message")
    >>> buffer.write(b"line1\\n")
    7
    >>> buffer.write(b"line2")
    5
    >>> buffer.flush()
    >>> out.getvalue()
    b'{"message":"line1\\\\nline2"}\\n'
    >>> buffer.empty()
    True
    >>> buffer.close()
    """

    def __init__(
        self,
        sink: SinkPort,
        max_len: int = 0,
        eol: bytes | str = b"",
        json_field: str = "",
        *,
        timer_factory: TimerFactory | None = None,
        on_autoflush: Callable[[], None] | None = None,
        stop_timeout: float | None = 5.0,
        diagnostic: Callable[[str, dict[str, Any]], None] | None = None,
    ) -> None:
        if isinstance(max_len, bool) or not isinstance(max_len, int):
            raise ValueError("max_len must be an integer")
        if max_len < 0:
            raise ValueError("max_len must be zero or positive")
        self._sink = sink
        self._max_len = max_len
        self._format = LineFormat(eol=eol, json_field=json_field)
        self._content = bytearray()
        self._lock = threading.Lock()
        self._autoflush = AutoFlusher(
            flush=self.flush,
            timer_factory=timer_factory,
            on_flushed=on_autoflush,
            stop_timeout=stop_timeout,
            diagnostic=diagnostic,
        )

    @property
    def max_len(self) -> int:
        """Return the configured byte ceiling (``0`` means unbounded)."""

        return self._max_len

    @property
    def line_format(self) -> LineFormat:
        """Return the framing applied on flush."""

        return self._format

    @property
    def closed(self) -> bool:
        """Return ``True`` once :meth:`close` has been called."""

        return self._autoflush.closed

    def write(self, data: bytes) -> int:
        """Escape ``data`` and append it to the buffer.

        Returns the number of escaped bytes appended, which is smaller than the
        escaped length of ``data`` once the ``max_len`` ceiling is reached.
        Truncation is silent: this method never raises because of it.
        """
        with self._lock:
            return escape_into(self._content, data, limit=self._max_len)

    def flush(self) -> None:
        """Emit buffered content as one line and clear the buffer.

        Does nothing when the buffer is empty. The buffer is cleared before the
        sink is written to, so a sink error propagates to the caller without
        leaving the content queued.
        """
        with self._lock:
            if not self._content:
                return
            line = self._format.render(self._content, self._max_len)
            if self._max_len and len(self._content) + self._format.overhead > self._max_len:
                LOGGER.debug("Truncated %d buffered bytes to a %d byte line", len(self._content), len(line))
            self._content.clear()
            self._sink.write(line)

    def empty(self) -> bool:
        """Return ``True`` when nothing is buffered."""
        with self._lock:
            return not self._content

    def snapshot(self) -> bytes:
        """Return a copy of the buffered, escaped content."""
        with self._lock:
            return bytes(self._content)

    def __len__(self) -> int:
        with self._lock:
            return len(self._content)

    def auto_flush(self, interval: float) -> None:
        """Flush in the background every ``interval`` seconds.

        Calling again replaces the running schedule. Raises ``RuntimeError``
        after :meth:`close`.
        """
        self._autoflush.schedule(interval)

    def close(self) -> None:
        """Stop background flushing; buffered content is left untouched.

        Safe to call repeatedly and when :meth:`auto_flush` was never used.
        """
        self._autoflush.close()

    def __enter__(self) -> EventBuffer:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
        self.flush()

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(max_len={self._max_len}, eol={self._format.eol!r}, "
            f"json_field={self._format.json_field!r}, closed={self.closed})"
        )


__all__ = ["EventBuffer"]
