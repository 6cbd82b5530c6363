"""Ports for timer sources and the background autoflush scheduler."""

from __future__ import annotations

from typing import Callable, Protocol, runtime_checkable


@runtime_checkable
class TimerPort(Protocol):
    """Periodic tick source invoking a callback until cancelled."""

    def start(self) -> None:
        """Begin delivering ticks."""

    def cancel(self) -> None:
        """Stop delivering ticks and release the underlying resources."""


TimerFactory = Callable[[float, Callable[[], None]], TimerPort]
"""Build a timer ticking every ``interval`` seconds into ``callback``."""


@runtime_checkable
class AutoFlushPort(Protocol):
    """Background scheduler driving periodic flushes."""

    def schedule(self, interval: float) -> None:
        """Start or restart periodic flushing every ``interval`` seconds."""

    def close(self) -> None:
        """Stop periodic flushing; safe to call more than once."""

    @property
    def closed(self) -> bool:
        """Return ``True`` once :meth:`close` has been called."""
        ...


__all__ = ["AutoFlushPort", "TimerFactory", "TimerPort"]
