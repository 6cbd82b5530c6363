"""Protocols the event buffer depends on."""

from __future__ import annotations

from .sink import SinkPort
from .timer import AutoFlushPort, TimerFactory, TimerPort

__all__ = ["AutoFlushPort", "SinkPort", "TimerFactory", "TimerPort"]
