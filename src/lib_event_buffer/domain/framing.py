"""Line framing for flushed events.

Purpose
-------
Turn escaped buffer content into the exact bytes written to a sink: either the
raw content or a single-field JSON object, followed by the configured line
terminator, all within a byte ceiling.

Contents
--------
* :class:`LineFormat` - immutable framing configuration with ``render``.

System Role
-----------
Implements the emission half of :class:`lib_event_buffer.EventBuffer`. The
accumulation ceiling cannot account for wrapper bytes, so :meth:`LineFormat.render`
recomputes the fit once the overhead is known.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .escaping import needs_escaping


@dataclass(frozen=True, slots=True)
class LineFormat:
    """Framing applied to each flushed line.

    Examples
    --------
    >>> LineFormat(eol=b"\\n").render(b"hello")
    b'hello\\n'
    >>> fmt = LineFormat(eol=b"\\n", json_field="message")
    >>> fmt.overhead
    15
    >>> fmt.render(b"line1\\\\nline2", max_len=25)
    b'{"message":"line1\\\\nlin"}\\n'
    """

    eol: bytes = b""
    json_field: str = ""
    _prefix: bytes = field(init=False, repr=False, compare=False)
    _suffix: bytes = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if isinstance(self.eol, str):
            object.__setattr__(self, "eol", self.eol.encode("utf-8"))
        else:
            object.__setattr__(self, "eol", bytes(self.eol))
        if self.json_field:
            name = self.json_field.encode("utf-8")
            if needs_escaping(name):
                raise ValueError(f"json_field {self.json_field!r} contains characters that require escaping")
            prefix = b'{"' + name + b'":"'
            suffix = b'"}'
        else:
            prefix = suffix = b""
        object.__setattr__(self, "_prefix", prefix)
        object.__setattr__(self, "_suffix", suffix + self.eol)

    @property
    def json_mode(self) -> bool:
        """Return ``True`` when content is wrapped in a JSON object."""

        return bool(self.json_field)

    @property
    def overhead(self) -> int:
        """Number of fixed bytes added around the content."""

        return len(self._prefix) + len(self._suffix)

    def render(self, content: bytes, max_len: int = 0) -> bytes:
        """Return the framed line for ``content`` capped at ``max_len`` bytes.

        Content is cut from the end when content plus overhead exceeds
        ``max_len``; the cut is byte-based and may split an escape pair. When
        the wrapper alone is longer than ``max_len`` the content is dropped and
        the wrapper is cut to ``max_len`` bytes.
        """

        if max_len > 0:
            room = max_len - self.overhead
            if room < 0:
                return (self._prefix + self._suffix)[:max_len]
            if len(content) > room:
                content = content[:room]
        return self._prefix + bytes(content) + self._suffix


__all__ = ["LineFormat"]
