"""Distribution metadata shared by the CLI and the summary banner."""

from __future__ import annotations

name = "lib_event_buffer"
title = "Bounded, escaping, periodically flushed line buffer for captured output"
version = "0.1.0"
author = "bitranox"
shell_command = "lib_event_buffer"


def summary_info() -> str:
    """Return the metadata banner printed by ``lib_event_buffer info``.

    Examples
    --------
    >>> summary_info().splitlines()[0]
    'Info for lib_event_buffer:'
    >>> summary_info().endswith("\\n")
    True
    """

    fields = (
        ("name", name),
        ("title", title),
        ("version", version),
        ("author", author),
        ("shell_command", shell_command),
    )
    pad = max(len(label) for label, _ in fields)
    lines = [f"Info for {name}:", ""]
    lines.extend(f"    {label.ljust(pad)} = {value}" for label, value in fields)
    return "\n".join(lines) + "\n"
