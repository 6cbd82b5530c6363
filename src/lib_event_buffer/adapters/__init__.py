"""Adapters implementing the event buffer's ports."""

from __future__ import annotations

from .autoflush import AutoFlusher
from .sink import StreamSink
from .timer import IntervalTimer

__all__ = ["AutoFlusher", "IntervalTimer", "StreamSink"]
