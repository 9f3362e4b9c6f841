"""Tests for printable-run string extraction."""

import pytest

from modforge.errors import UnsupportedEncoding
from modforge.models import ByteBuffer, StringRecord
from modforge.scanners import StringScanner


def test_two_runs_split_by_null():
    records = StringScanner(min_length=4).scan(ByteBuffer(b"Hello\x00World!"))

    assert records == [
        StringRecord(id=0, offset=0, length=5, original="Hello"),
        StringRecord(id=1, offset=6, length=6, original="World!"),
    ]


def test_min_length_longer_than_buffer_yields_nothing():
    data = b"abcdefgh"
    assert StringScanner(min_length=len(data) + 1).scan(ByteBuffer(data)) == []


def test_short_runs_are_dropped():
    records = StringScanner(min_length=4).scan(ByteBuffer(b"ab\x00abcd\x01xyz"))
    assert [(r.offset, r.original) for r in records] == [(3, "abcd")]


def test_control_and_delete_bytes_end_a_run():
    records = StringScanner(min_length=4).scan(ByteBuffer(b"abcd\x7fefgh\tijkl"))
    assert [r.original for r in records] == ["abcd", "efgh", "ijkl"]


def test_length_counts_bytes_not_characters():
    text = "héllo wörld"
    records = StringScanner().scan(ByteBuffer(b"\x00" + text.encode("utf-8") + b"\x00"))

    assert len(records) == 1
    assert records[0].offset == 1
    assert records[0].length == len(text.encode("utf-8"))
    assert records[0].original == text


def test_undecodable_run_is_dropped_and_ids_stay_dense():
    data = b"\xff\xfe\xfdabc\x00Good text\x00"
    records = StringScanner().scan(ByteBuffer(data))
    assert records == [StringRecord(id=0, offset=7, length=9, original="Good text")]


def test_run_decoding_to_replacement_character_is_dropped():
    data = "ab\ufffdcd".encode("utf-8") + b"\x00keep"
    records = StringScanner().scan(ByteBuffer(data))
    assert [r.original for r in records] == ["keep"]


def test_shift_jis_charset():
    text = "日本語テキスト"
    data = b"\x00\x00" + text.encode("shift_jis") + b"\x00"
    records = StringScanner(charset="shift_jis").scan(ByteBuffer(data))
    assert [(r.offset, r.original) for r in records] == [(2, text)]


@pytest.mark.parametrize("charset", ["no-such-charset", "base64"])
def test_unsupported_charset_fails_whole_scan(charset):
    with pytest.raises(UnsupportedEncoding):
        StringScanner(charset=charset).scan(ByteBuffer(b"plenty of text here"))


def test_bytes_codec_fails_even_without_runs():
    with pytest.raises(UnsupportedEncoding):
        StringScanner(charset="hex").scan(ByteBuffer(b"\x00\x01"))


def test_min_length_must_be_positive():
    with pytest.raises(ValueError):
        StringScanner(min_length=0)


def test_scan_is_idempotent():
    buffer = ByteBuffer(b"\x01first string\x00\x02second\x00third one")
    scanner = StringScanner()
    assert scanner.scan(buffer) == scanner.scan(buffer)


def test_empty_buffer():
    assert StringScanner().scan(ByteBuffer(b"")) == []
