"""Sink port describing where flushed lines go.

Purpose
-------
Define the append-only byte destination an :class:`~lib_event_buffer.EventBuffer`
writes formatted lines to. Any binary file object satisfies it.

Contents
--------
* :class:`SinkPort` - runtime-checkable protocol with a single ``write`` method.

System Role
-----------
The sink's lifecycle (opening, flushing, closing) belongs to the caller; the
buffer only ever calls ``write`` once per emitted line.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class SinkPort(Protocol):
    """Accept one formatted line per call."""

    def write(self, data: bytes, /) -> Any:
        """Append ``data`` to the destination."""


__all__ = ["SinkPort"]
