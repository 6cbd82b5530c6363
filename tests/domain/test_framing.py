from __future__ import annotations

import pytest

from lib_event_buffer.domain.framing import LineFormat
from tests.os_markers import OS_AGNOSTIC

pytestmark = [OS_AGNOSTIC]


def test_raw_mode_appends_eol() -> None:
    assert LineFormat(eol=b"\n").render(b"line1\\nline2") == b"line1\\nline2\n"


def test_raw_mode_without_eol_emits_content_only() -> None:
    fmt = LineFormat()
    assert fmt.overhead == 0
    assert fmt.render(b"abc") == b"abc"


def test_json_mode_wraps_content() -> None:
    fmt = LineFormat(eol=b"\n", json_field="message")
    assert fmt.json_mode
    assert fmt.render(b"line1\\nline2") == b'{"message":"line1\\nline2"}\n'


def test_string_eol_is_encoded() -> None:
    assert LineFormat(eol="\r\n").eol == b"\r\n"


def test_overhead_counts_wrapper_and_eol() -> None:
    assert LineFormat(eol=b"\r\n", json_field="log").overhead == len(b'{"log":""}\r\n')


def test_json_mode_truncates_content_to_fit_wrapper() -> None:
    fmt = LineFormat(eol=b"\n", json_field="message")
    line = fmt.render(b"line1\\nline2", max_len=25)
    assert line == b'{"message":"line1\\nlin"}\n'
    assert len(line) == 25


def test_content_that_fits_is_untouched() -> None:
    fmt = LineFormat(eol=b"\n", json_field="message")
    assert fmt.render(b"ok", max_len=25) == b'{"message":"ok"}\n'


def test_raw_mode_truncation_accounts_for_eol() -> None:
    line = LineFormat(eol=b"\n").render(b"abcdef", max_len=4)
    assert line == b"abc\n"


def test_truncation_may_split_escape_pair() -> None:
    line = LineFormat(eol=b"\n").render(b"ab\\n", max_len=4)
    assert line == b"ab\\\n"


def test_wrapper_longer_than_limit_elides_content() -> None:
    fmt = LineFormat(eol=b"\n", json_field="message")
    line = fmt.render(b"anything", max_len=10)
    assert line == b'{"message"'
    assert len(line) == 10


def test_wrapper_exactly_at_limit_emits_empty_value() -> None:
    fmt = LineFormat(eol=b"\n", json_field="message")
    assert fmt.render(b"content", max_len=fmt.overhead) == b'{"message":""}\n'


@pytest.mark.parametrize("field", ['mes"sage', "back\\slash", "tab\tbed"])
def test_json_field_requiring_escapes_is_rejected(field: str) -> None:
    with pytest.raises(ValueError, match="require escaping"):
        LineFormat(json_field=field)
