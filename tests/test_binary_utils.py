"""Tests for byte helpers."""

import numpy as np
import pytest

from modforge.errors import UnsupportedEncoding
from modforge.utils import (
    find_sequence,
    format_size,
    hexdump_rows,
    printable_mask,
    printable_runs,
    resolve_charset,
)


def as_array(data: bytes) -> np.ndarray:
    return np.frombuffer(data, dtype=np.uint8)


def test_printable_mask_boundaries():
    mask = printable_mask(as_array(bytes([0, 31, 32, 126, 127, 128, 255])))
    assert mask.tolist() == [False, False, True, True, False, True, True]


def test_printable_runs_include_trailing_run():
    starts, lengths = printable_runs(as_array(b"ab\x00\x00cde"))
    assert starts.tolist() == [0, 4]
    assert lengths.tolist() == [2, 3]


def test_printable_runs_on_empty_data():
    starts, lengths = printable_runs(as_array(b""))
    assert starts.size == 0 and lengths.size == 0


def test_hexdump_rows():
    rows = hexdump_rows(b"Hi\x00\x7f" + bytes(range(65, 81)), width=16, base_offset=0x100)

    assert [row.offset for row in rows] == [0x100, 0x110]
    assert rows[0].hex.split()[:4] == ["48", "69", "00", "7F"]
    assert rows[0].ascii[:4] == "Hi.."
    assert rows[1].hex == "4D 4E 4F 50"
    assert rows[0].render().startswith("00000100  48 69 00 7F")


def test_format_size():
    assert format_size(512) == "512 B"
    assert format_size(2048) == "2.0 KB"
    assert format_size(5 * 1024 * 1024) == "5.0 MB"


def test_find_sequence():
    data = as_array(b"xxIENDyyIEND")
    assert find_sequence(data, b"IEND") == 2
    assert find_sequence(data, b"IEND", 3) == 8
    assert find_sequence(data, b"IHDR") == -1


def test_resolve_charset_normalises_name():
    assert resolve_charset("UTF8") == "utf-8"
    assert resolve_charset("sjis") == "shift_jis"


@pytest.mark.parametrize("charset", ["base64", "hex", "zlib", "not-a-codec"])
def test_resolve_charset_rejects_non_text_codecs(charset):
    with pytest.raises(UnsupportedEncoding):
        resolve_charset(charset)
