"""Pure escaping and framing rules used by the event buffer."""

from __future__ import annotations

from .escaping import ESCAPES, escape, escape_into, needs_escaping
from .framing import LineFormat

__all__ = [
    "ESCAPES",
    "LineFormat",
    "escape",
    "escape_into",
    "needs_escaping",
]
