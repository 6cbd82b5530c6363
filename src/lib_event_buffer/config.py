"""Configuration helpers: ``.env`` loading and environment-driven settings.

Purpose
-------
Resolve :class:`EventBufferSettings` from explicit arguments, environment
variables, and an optional ``.env`` file so the CLI and host applications share
one set of knobs.

Contents
--------
* :func:`enable_dotenv` / :func:`should_use_dotenv` - opt-in ``.env`` loading.
* :class:`EventBufferSettings` - validated buffer configuration.
* :func:`load_settings` - precedence: arguments, then environment, then defaults.

System Role
-----------
Environment variables never override values already present in the process
environment, and explicit arguments always win over both.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Mapping

from dotenv import find_dotenv, load_dotenv

DOTENV_ENV_VAR = "EVENT_BUFFER_USE_DOTENV"
MAX_LEN_ENV_VAR = "EVENT_BUFFER_MAX_LEN"
EOL_ENV_VAR = "EVENT_BUFFER_EOL"
JSON_FIELD_ENV_VAR = "EVENT_BUFFER_JSON_FIELD"
FLUSH_INTERVAL_ENV_VAR = "EVENT_BUFFER_FLUSH_INTERVAL"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off", ""}

_DOTENV_LOADED: Path | None = None


def should_use_dotenv(*, explicit: bool | None, env_value: str | None) -> bool:
    """Decide whether ``.env`` should be loaded.

    An explicit CLI choice wins; otherwise the toggle environment variable
    decides.

    Examples
    --------
    >>> should_use_dotenv(explicit=None, env_value="yes")
    True
    >>> should_use_dotenv(explicit=False, env_value="1")
    False
    >>> should_use_dotenv(explicit=None, env_value=None)
    False
    """

    if explicit is not None:
        return explicit
    if env_value is None:
        return False
    return env_value.strip().lower() in _TRUTHY


def enable_dotenv(*, search_from: Path | None = None) -> Path | None:
    """Load the nearest ``.env`` walking upwards from ``search_from`` (or cwd).

    Existing environment variables keep precedence. Returns the resolved path
    of the loaded file, or ``None`` when no file was found. Repeated calls
    return the first loaded path without reloading.
    """

    global _DOTENV_LOADED
    if _DOTENV_LOADED is not None:
        return _DOTENV_LOADED
    if search_from is None:
        found = find_dotenv(usecwd=True)
        candidate = Path(found) if found else None
    else:
        candidate = _find_upwards(search_from)
    if candidate is None:
        return None
    load_dotenv(candidate, override=False)
    _DOTENV_LOADED = candidate.resolve()
    return _DOTENV_LOADED


def _find_upwards(start: Path) -> Path | None:
    start = start.resolve()
    for directory in (start, *start.parents):
        candidate = directory / ".env"
        if candidate.is_file():
            return candidate
    return None


def _reset_dotenv_state_for_testing() -> None:
    global _DOTENV_LOADED
    _DOTENV_LOADED = None


@dataclass(frozen=True, slots=True)
class EventBufferSettings:
    """Validated configuration for an :class:`~lib_event_buffer.EventBuffer`.

    ``flush_interval`` of ``None`` disables background flushing.
    """

    max_len: int = 0
    eol: bytes = b"\n"
    json_field: str = ""
    flush_interval: float | None = 1.0

    def __post_init__(self) -> None:
        if self.max_len < 0:
            raise ValueError("max_len must be zero or positive")
        if self.flush_interval is not None and self.flush_interval <= 0:
            raise ValueError("flush_interval must be positive")

    def buffer_kwargs(self) -> dict[str, Any]:
        """Return the constructor arguments for :class:`EventBuffer`."""

        return {"max_len": self.max_len, "eol": self.eol, "json_field": self.json_field}


def decode_escapes(value: str) -> bytes:
    r"""Translate backslash escapes such as ``\n`` into raw bytes.

    Examples
    --------
    >>> decode_escapes(r"\r\n")
    b'\r\n'
    >>> decode_escapes("")
    b''
    >>> decode_escapes("\\")
    Traceback (most recent call last):
    ...
    ValueError: invalid backslash escape in '\\'
    """

    try:
        return value.encode("utf-8").decode("unicode_escape").encode("latin-1")
    except UnicodeError as exc:
        raise ValueError(f"invalid backslash escape in {value!r}") from exc


def _parse_eol(raw: str) -> bytes:
    try:
        return decode_escapes(raw)
    except ValueError as exc:
        raise ValueError(f"{EOL_ENV_VAR} has an {exc}") from exc


def _parse_max_len(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"{MAX_LEN_ENV_VAR} must be an integer, got {raw!r}") from exc
    if value < 0:
        raise ValueError(f"{MAX_LEN_ENV_VAR} must be zero or positive, got {value}")
    return value


def _parse_interval(raw: str) -> float | None:
    if raw.strip().lower() in _FALSY:
        return None
    try:
        value = float(raw)
    except ValueError as exc:
        raise ValueError(f"{FLUSH_INTERVAL_ENV_VAR} must be a number of seconds, got {raw!r}") from exc
    if value <= 0:
        raise ValueError(f"{FLUSH_INTERVAL_ENV_VAR} must be positive, got {value}")
    return value


def _resolve(
    explicit: Any,
    environ: Mapping[str, str],
    key: str,
    parse: Callable[[str], Any],
    default: Any,
) -> Any:
    if explicit is not None:
        return explicit
    raw = environ.get(key)
    if raw is None:
        return default
    return parse(raw)


def load_settings(
    *,
    max_len: int | None = None,
    eol: bytes | str | None = None,
    json_field: str | None = None,
    flush_interval: float | None = None,
    environ: Mapping[str, str] | None = None,
) -> EventBufferSettings:
    """Build :class:`EventBufferSettings` from arguments and the environment.

    ``None`` arguments fall back to ``EVENT_BUFFER_*`` variables, then to the
    dataclass defaults. ``flush_interval=0`` (or
    ``EVENT_BUFFER_FLUSH_INTERVAL=0``) disables background flushing.

    Examples
    --------
    >>> load_settings(environ={"EVENT_BUFFER_MAX_LEN": "64"}).max_len
    64
    >>> load_settings(max_len=8, environ={"EVENT_BUFFER_MAX_LEN": "64"}).max_len
    8
    >>> load_settings(environ={"EVENT_BUFFER_EOL": "\\\\r\\\\n"}).eol
    b'\\r\\n'
    """

    env = os.environ if environ is None else environ
    defaults = EventBufferSettings()
    if isinstance(eol, str):
        eol = eol.encode("utf-8")
    interval = _resolve(flush_interval, env, FLUSH_INTERVAL_ENV_VAR, _parse_interval, defaults.flush_interval)
    return EventBufferSettings(
        max_len=_resolve(max_len, env, MAX_LEN_ENV_VAR, _parse_max_len, defaults.max_len),
        eol=_resolve(eol, env, EOL_ENV_VAR, _parse_eol, defaults.eol),
        json_field=_resolve(json_field, env, JSON_FIELD_ENV_VAR, str, defaults.json_field),
        flush_interval=interval or None,
    )


__all__ = [
    "DOTENV_ENV_VAR",
    "EOL_ENV_VAR",
    "EventBufferSettings",
    "FLUSH_INTERVAL_ENV_VAR",
    "JSON_FIELD_ENV_VAR",
    "MAX_LEN_ENV_VAR",
    "decode_escapes",
    "enable_dotenv",
    "load_settings",
    "should_use_dotenv",
]
