"""Byte-level escaping of captured output.

Purpose
-------
Neutralise control characters, backslashes, and double quotes so buffered
content can be emitted on a single line and embedded verbatim inside a JSON
string.

Contents
--------
* :data:`ESCAPES` - substitution table for the seven special bytes.
* :func:`escape` - escape a whole byte sequence without a length limit.
* :func:`escape_into` - append escaped bytes to a buffer under a byte ceiling.

System Role
-----------
Implements the accumulation half of :class:`lib_event_buffer.EventBuffer`.
Escaping operates on raw bytes; multi-byte UTF-8 sequences pass through
untouched because none of their bytes appear in the table.
"""

from __future__ import annotations

from typing import Mapping

ESCAPES: Mapping[int, bytes] = {
    0x08: b"\\b",
    0x0C: b"\\f",
    0x0D: b"\\r",
    0x0A: b"\\n",
    0x09: b"\\t",
    0x5C: b"\\\\",
    0x22: b'\\"',
}
"""Escaped form of every byte that needs one; all other bytes map to themselves."""

_TABLE: tuple[bytes, ...] = tuple(ESCAPES.get(value, bytes((value,))) for value in range(256))


def escape(data: bytes) -> bytes:
    """Return ``data`` with every special byte replaced by its escape pair.

    Examples
    --------
    >>> escape(b'say "hi"\\n')
    b'say \\\\"hi\\\\"\\\\n'
    >>> escape(b"plain")
    b'plain'
    """

    return b"".join(_TABLE[value] for value in data)


def escape_into(target: bytearray, data: bytes, *, limit: int = 0) -> int:
    """Append the escaped form of ``data`` to ``target``.

    Parameters
    ----------
    target:
        Buffer receiving escaped bytes.
    data:
        Raw input bytes.
    limit:
        ``0`` for no ceiling; otherwise ``len(target)`` never exceeds it.
        Processing stops at the first escaped unit that would not fit, so an
        escape pair is never split.

    Returns
    -------
    int
        Number of bytes appended to ``target`` (escaped count, not input count).

    Examples
    --------
    >>> buf = bytearray()
    >>> escape_into(buf, b"\\n\\n\\n\\n", limit=5)
    4
    >>> bytes(buf)
    b'\\\\n\\\\n'
    >>> escape_into(buf, b"x", limit=5)
    1
    >>> escape_into(buf, b"y", limit=5)
    0
    """

    if limit <= 0:
        escaped = escape(data)
        target += escaped
        return len(escaped)

    appended = 0
    for value in data:
        unit = _TABLE[value]
        if len(target) + len(unit) > limit:
            break
        target += unit
        appended += len(unit)
    return appended


def needs_escaping(data: bytes) -> bool:
    """Return ``True`` when any byte of ``data`` appears in :data:`ESCAPES`."""

    return any(value in ESCAPES for value in data)


__all__ = ["ESCAPES", "escape", "escape_into", "needs_escaping"]
