"""Public package surface of the event buffer.

:class:`EventBuffer` is the entry point; the escaping and framing helpers are
exported for callers that want the same wire format without buffering.
"""

from __future__ import annotations

from .adapters import AutoFlusher, IntervalTimer, StreamSink
from .domain import ESCAPES, LineFormat, escape
from .event_buffer import EventBuffer

__all__ = [
    "ESCAPES",
    "AutoFlusher",
    "EventBuffer",
    "IntervalTimer",
    "LineFormat",
    "StreamSink",
    "escape",
]
