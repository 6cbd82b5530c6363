"""Background worker that flushes an event buffer on a timer.

Purpose
-------
Run periodic flushes off the caller's thread while keeping exactly one timer
active at a time.

Contents
--------
* :class:`AutoFlusher` - worker implementation of :class:`AutoFlushPort`.

System Role
-----------
Owned by :class:`lib_event_buffer.EventBuffer`. All scheduling requests and
timer ticks travel through a single inbox consumed by one worker thread, so
the flush callable is never invoked from two background contexts at once.
Each :meth:`AutoFlusher.schedule` call bumps a generation counter; the worker
only honours the registration and the ticks of the latest generation, which
makes restarting replace the previous timer instead of stacking a second one.
Ticks are coalesced: while one tick is waiting in the inbox further ticks are
dropped, so a slow sink never builds a backlog ahead of the stop signal.
"""

from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Callable
from dataclasses import dataclass
from functools import partial
from typing import Any, Union

from lib_event_buffer.application.ports.timer import AutoFlushPort, TimerFactory, TimerPort

from .timer import IntervalTimer

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class _Register:
    generation: int
    timer: TimerPort


@dataclass(frozen=True, slots=True)
class _Tick:
    generation: int


_Message = Union[_Register, _Tick, None]


def _noop() -> None:
    return None


class AutoFlusher(AutoFlushPort):
    """Invoke ``flush`` on every tick of the most recently scheduled timer.

    Parameters
    ----------
    flush:
        Callable performing one flush; exceptions are logged and reported to
        ``diagnostic``, never propagated out of the worker.
    timer_factory:
        Builds the tick source for :meth:`schedule`; defaults to
        :class:`IntervalTimer`.
    on_flushed:
        Hook invoked after every autoflush cycle, successful or not. Tests use
        it to wait for a specific cycle without polling.
    stop_timeout:
        Seconds :meth:`close` waits for the worker; ``None`` waits forever.
    diagnostic:
        Optional ``(name, payload)`` callback for background failures.

    Examples
    --------
    >>> flushed = threading.Event()
    >>> flusher = AutoFlusher(flush=lambda: None, on_flushed=flushed.set)
    >>> flusher.schedule(0.01)
    >>> flushed.wait(1.0)
    True
    >>> flusher.close()
    >>> flusher.closed
    True
    """

    def __init__(
        self,
        *,
        flush: Callable[[], None],
        timer_factory: TimerFactory | None = None,
        on_flushed: Callable[[], None] | None = None,
        stop_timeout: float | None = 5.0,
        diagnostic: Callable[[str, dict[str, Any]], None] | None = None,
    ) -> None:
        self._flush = flush
        self._timer_factory: TimerFactory = timer_factory or IntervalTimer
        self._on_flushed = on_flushed or _noop
        self._stop_timeout = stop_timeout
        self._diagnostic = diagnostic
        self._inbox: queue.Queue[_Message] = queue.Queue()
        self._lock = threading.Lock()
        self._generation = 0
        self._tick_pending = False
        self._thread: threading.Thread | None = None
        self._closed = False
        self._timer: TimerPort | None = None

    @property
    def closed(self) -> bool:
        """Return ``True`` once :meth:`close` has been called."""

        return self._closed

    @property
    def running(self) -> bool:
        """Return ``True`` while the worker thread is alive."""

        thread = self._thread
        return thread is not None and thread.is_alive()

    def schedule(self, interval: float) -> None:
        """Flush every ``interval`` seconds, replacing any earlier schedule."""
        if interval <= 0:
            raise ValueError("interval must be positive")
        with self._lock:
            if self._closed:
                raise RuntimeError("autoflush has been closed")
            self._generation += 1
            generation = self._generation
            timer = self._timer_factory(interval, partial(self._on_tick, generation))
            self._inbox.put(_Register(generation, timer))
            if self._thread is None:
                self._thread = threading.Thread(target=self._run, name="event-buffer-autoflush", daemon=True)
                self._thread.start()
        LOGGER.debug("Autoflush scheduled every %ss (generation %d)", interval, generation)

    def close(self) -> None:
        """Stop the worker and cancel its timer.

        Safe to call when nothing was ever scheduled and safe to call twice.
        Waits at most ``stop_timeout`` seconds for the worker to exit.
        """
        with self._lock:
            if self._closed:
                return
            self._closed = True
            thread = self._thread
        if thread is None:
            return
        self._inbox.put(None)
        if thread is threading.current_thread():
            return
        thread.join(self._stop_timeout)
        if thread.is_alive():
            LOGGER.warning("Autoflush worker did not stop within %s seconds", self._stop_timeout)
            self._emit_diagnostic("autoflush_shutdown_timeout", {"timeout": self._stop_timeout})

    def _on_tick(self, generation: int) -> None:
        """Queue a tick unless one is already pending or the timer is stale."""
        with self._lock:
            if self._closed or self._tick_pending or generation != self._generation:
                return
            self._tick_pending = True
        self._inbox.put(_Tick(generation))

    def _take_tick(self) -> bool:
        """Clear the pending flag; return ``True`` while cycles may still run."""
        with self._lock:
            self._tick_pending = False
            return not self._closed

    def _current_generation(self) -> int:
        with self._lock:
            return self._generation

    def _run(self) -> None:
        """Worker loop consuming registrations and ticks until stopped."""
        active = 0
        try:
            while True:
                message = self._inbox.get()
                if message is None:
                    break
                if isinstance(message, _Register):
                    if message.generation != self._current_generation():
                        message.timer.cancel()
                        continue
                    if self._timer is not None:
                        self._timer.cancel()
                    self._timer = message.timer
                    active = message.generation
                    self._timer.start()
                elif self._take_tick() and message.generation == active:
                    self._run_cycle()
        finally:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            LOGGER.debug("Autoflush worker stopped")

    def _run_cycle(self) -> None:
        try:
            self._flush()
        except Exception as exc:  # noqa: BLE001
            LOGGER.error("Autoflush raised an exception; continuing", exc_info=exc)
            self._emit_diagnostic("autoflush_error", {"exception": repr(exc)})
        finally:
            self._on_flushed()

    def _emit_diagnostic(self, name: str, payload: dict[str, Any]) -> None:
        """Invoke the diagnostic hook while guarding against callback failures."""

        if self._diagnostic is None:
            return
        try:
            self._diagnostic(name, payload)
        except Exception as diagnostic_exc:  # noqa: BLE001
            LOGGER.error("Autoflush diagnostic hook raised while reporting %s", name, exc_info=diagnostic_exc)


__all__ = ["AutoFlusher"]
