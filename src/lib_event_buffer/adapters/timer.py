"""Thread-backed periodic timer.

Purpose
-------
Provide the default :class:`~lib_event_buffer.application.ports.TimerPort`
used by the autoflush scheduler.

Contents
--------
* :class:`IntervalTimer` - invokes a callback every ``interval`` seconds on a
  daemon thread until cancelled.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from lib_event_buffer.application.ports.timer import TimerPort

LOGGER = logging.getLogger(__name__)


class IntervalTimer(TimerPort):
    """Tick ``callback`` every ``interval`` seconds.

    Examples
    --------
    >>> ticks = threading.Event()
    >>> timer = IntervalTimer(0.01, ticks.set)
    >>> timer.start()
    >>> ticks.wait(1.0)
    True
    >>> timer.cancel()
    >>> timer.cancelled
    True
    """

    def __init__(self, interval: float, callback: Callable[[], None], *, join_timeout: float | None = 1.0) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._interval = interval
        self._callback = callback
        self._join_timeout = join_timeout
        self._cancelled = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def interval(self) -> float:
        """Return the tick period in seconds."""

        return self._interval

    @property
    def cancelled(self) -> bool:
        """Return ``True`` once :meth:`cancel` has been called."""

        return self._cancelled.is_set()

    def start(self) -> None:
        """Start the ticking thread; subsequent calls are ignored."""
        if self._thread is not None or self._cancelled.is_set():
            return
        self._thread = threading.Thread(target=self._run, name="event-buffer-timer", daemon=True)
        self._thread.start()

    def cancel(self) -> None:
        """Stop ticking and wait briefly for the thread to exit."""
        self._cancelled.set()
        thread = self._thread
        if thread is None or thread is threading.current_thread():
            return
        thread.join(self._join_timeout)
        if thread.is_alive():
            LOGGER.warning("Timer thread did not exit within %s seconds", self._join_timeout)

    def _run(self) -> None:
        while not self._cancelled.wait(self._interval):
            self._callback()


__all__ = ["IntervalTimer"]
