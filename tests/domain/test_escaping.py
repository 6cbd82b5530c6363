from __future__ import annotations

import pytest

from lib_event_buffer.domain.escaping import ESCAPES, escape, escape_into, needs_escaping
from tests.os_markers import OS_AGNOSTIC

pytestmark = [OS_AGNOSTIC]

SPECIAL = b"\b\f\r\n\t\\\""


def test_escape_replaces_every_special_byte() -> None:
    assert escape(SPECIAL) == rb"\b\f\r\n\t\\\""
    assert len(escape(SPECIAL)) == 14


@pytest.mark.parametrize("value, expected", sorted(ESCAPES.items()))
def test_each_special_byte_becomes_its_pair(value: int, expected: bytes) -> None:
    assert escape(bytes([value, value])) == expected * 2


def test_non_special_bytes_pass_through_unchanged() -> None:
    data = bytes(value for value in range(256) if value not in ESCAPES)
    assert escape(data) == data


def test_utf8_bytes_are_not_touched() -> None:
    data = "grüße ✓".encode("utf-8")
    assert escape(data) == data


def test_escape_into_without_limit_appends_everything() -> None:
    target = bytearray(b"pre:")
    appended = escape_into(target, b"a\tb")
    assert appended == 4
    assert bytes(target) == b"pre:a\\tb"


def test_escape_into_stops_at_limit_for_plain_bytes() -> None:
    target = bytearray()
    assert escape_into(target, b"abcdefghij", limit=5) == 5
    assert bytes(target) == b"abcde"


def test_escape_into_never_splits_an_escape_pair() -> None:
    target = bytearray()
    assert escape_into(target, b"\n\n\n\n", limit=5) == 4
    assert bytes(target) == b"\\n\\n"


def test_escape_into_stops_at_first_unit_that_does_not_fit() -> None:
    target = bytearray(b"abc")
    # the quote needs two bytes but only one is left; the trailing "x" is not considered
    assert escape_into(target, b'"x', limit=4) == 0
    assert bytes(target) == b"abc"


def test_escape_into_full_buffer_appends_nothing() -> None:
    target = bytearray(b"12345")
    assert escape_into(target, b"more", limit=5) == 0
    assert bytes(target) == b"12345"


@pytest.mark.parametrize("limit", [1, 2, 3, 7, 8])
def test_escape_into_all_escaping_input_keeps_even_count(limit: int) -> None:
    target = bytearray()
    appended = escape_into(target, b"\t" * 10, limit=limit)
    assert appended == limit - limit % 2
    assert len(target) == appended


def test_needs_escaping() -> None:
    assert needs_escaping(b"with\nnewline")
    assert not needs_escaping(b"message")
