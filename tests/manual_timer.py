"""Deterministic timer doubles for background flush tests."""

from __future__ import annotations

from collections.abc import Callable

from lib_event_buffer.application.ports.timer import TimerPort


class ManualTimer(TimerPort):
    """Timer that ticks only when a test calls :meth:`fire`."""

    def __init__(self, interval: float, callback: Callable[[], None]) -> None:
        self.interval = interval
        self.callback = callback
        self.started = False
        self.cancelled = False

    def start(self) -> None:
        self.started = True

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> None:
        self.callback()


class ManualTimerFactory:
    """Collect every :class:`ManualTimer` built by the scheduler."""

    def __init__(self) -> None:
        self.timers: list[ManualTimer] = []

    def __call__(self, interval: float, callback: Callable[[], None]) -> ManualTimer:
        timer = ManualTimer(interval, callback)
        self.timers.append(timer)
        return timer

    @property
    def last(self) -> ManualTimer:
        return self.timers[-1]


__all__ = ["ManualTimer", "ManualTimerFactory"]
