"""Tests for signature-based carving."""

import pytest

import modforge.detectors as detectors
from modforge.detectors import JsonObjectDetector, TagDetector, register_detector
from modforge.models import ByteBuffer, CarvedKind
from modforge.scanners import SignatureCarver

PAD = bytes(32)


def summary(records):
    return [(r.offset, r.size, r.kind) for r in records]


def test_json_object_at_start():
    records = SignatureCarver().scan(ByteBuffer(b'{"a":1}' + PAD))
    assert summary(records) == [(0, 7, CarvedKind.JSON)]
    assert records[0].display_name == "File_0.json"


def test_json_object_after_newline_brace_with_nesting():
    payload = b'{\n "a": {"b": [1, 2]}\n}'
    records = SignatureCarver().scan(ByteBuffer(b"\x00\x00" + payload + PAD))
    assert summary(records) == [(2, len(payload), CarvedKind.JSON)]


def test_brace_not_followed_by_quote_or_newline_is_ignored():
    assert SignatureCarver().scan(ByteBuffer(b"{a:1}" + PAD)) == []


def test_unbalanced_outer_object_falls_through_to_inner():
    records = SignatureCarver().scan(ByteBuffer(b'{"a":{"b":1}' + PAD))
    assert summary(records) == [(5, 7, CarvedKind.JSON)]


def test_unbalanced_json_is_not_carved():
    assert SignatureCarver().scan(ByteBuffer(b'{"a":[1, 2' + PAD)) == []


def test_json_balancing_is_bounded_by_window():
    data = b'{"' + b"x" * 20 + b"}" + PAD
    assert SignatureCarver([JsonObjectDetector(max_window=10)]).scan(ByteBuffer(data)) == []
    assert summary(SignatureCarver([JsonObjectDetector(max_window=30)]).scan(ByteBuffer(data))) == [
        (0, 23, CarvedKind.JSON)
    ]


def test_png_sized_through_iend_crc():
    data = bytearray(700)
    data[100:108] = b"\x89PNG\r\n\x1a\n"
    data[600:604] = b"IEND"
    data[604:608] = b"\xaeB`\x82"

    records = SignatureCarver().scan(ByteBuffer(bytes(data)))
    assert summary(records) == [(100, 508, CarvedKind.IMAGE)]
    assert records[0].display_name == "File_0.png"


def test_minimal_png_spans_whole_buffer(minimal_png):
    records = SignatureCarver().scan(ByteBuffer(minimal_png))
    assert summary(records) == [(0, len(minimal_png), CarvedKind.IMAGE)]


def test_png_only_needs_four_magic_bytes():
    data = b"\x89PNGxxxx" + bytes(8) + b"IEND" + bytes(4) + PAD
    records = SignatureCarver().scan(ByteBuffer(data))
    assert summary(records) == [(0, 24, CarvedKind.IMAGE)]


def test_png_without_iend_is_not_carved():
    assert SignatureCarver().scan(ByteBuffer(b"\x89PNG\r\n\x1a\n" + PAD)) == []


def test_png_whose_iend_crc_runs_past_end_is_not_carved():
    data = b"\x89PNG\r\n\x1a\n" + PAD + b"IEND\xae"
    assert SignatureCarver().scan(ByteBuffer(data)) == []


def test_unity_bundle_has_unknown_size():
    records = SignatureCarver().scan(ByteBuffer(b"\x00UnityFS\x00" + PAD))
    assert summary(records) == [(1, None, CarvedKind.ARCHIVE)]
    assert not records[0].has_known_size
    assert records[0].display_name == "File_0.assets"


def test_unknown_size_hits_are_not_deduplicated():
    # Two Ogg pages of the same stream are reported separately
    data = b"OggS\x00\x02" + bytes(10) + b"OggS\x00\x00" + PAD
    records = SignatureCarver().scan(ByteBuffer(data))
    assert summary(records) == [(0, None, CarvedKind.AUDIO), (16, None, CarvedKind.AUDIO)]
    assert [r.display_name for r in records] == ["File_0.ogg", "File_1.ogg"]


def test_signatures_inside_sized_region_are_skipped():
    data = b'{"tag":"OggS UnityFS"}' + b"\x00OggS" + PAD
    records = SignatureCarver().scan(ByteBuffer(data))
    assert summary(records) == [(0, 22, CarvedKind.JSON), (23, None, CarvedKind.AUDIO)]
    assert [r.id for r in records] == [0, 1]


def test_signatures_inside_unknown_region_are_reported():
    data = b"UnityFS\x00" + b'{"a":1}' + PAD
    records = SignatureCarver().scan(ByteBuffer(data))
    assert summary(records) == [(0, None, CarvedKind.ARCHIVE), (8, 7, CarvedKind.JSON)]


def test_lookahead_margin():
    # Offsets must be below len - 16 to be probed
    assert SignatureCarver().scan(ByteBuffer(bytes(20) + b"OggS" + bytes(12))) == []
    records = SignatureCarver().scan(ByteBuffer(bytes(19) + b"OggS" + bytes(13)))
    assert summary(records) == [(19, None, CarvedKind.AUDIO)]


def test_short_and_empty_buffers():
    assert SignatureCarver().scan(ByteBuffer(b"")) == []
    assert SignatureCarver().scan(ByteBuffer(b'{"a":1}')) == []


def test_custom_detector_list():
    carver = SignatureCarver([TagDetector(b"RIFF", CarvedKind.AUDIO)])
    records = carver.scan(ByteBuffer(b"OggS RIFF" + PAD))
    assert summary(records) == [(5, None, CarvedKind.AUDIO)]


def test_registered_detector_is_used_by_default_carver(monkeypatch):
    monkeypatch.setattr(detectors, "_DETECTORS", list(detectors._DETECTORS))
    riff = TagDetector(b"RIFF", CarvedKind.AUDIO)
    register_detector(riff)

    assert detectors.default_detectors()[-1] is riff
    records = SignatureCarver().scan(ByteBuffer(b"\x00\x00RIFF" + PAD))
    assert summary(records) == [(2, None, CarvedKind.AUDIO)]


def test_register_detector_rejects_non_detectors():
    with pytest.raises(TypeError):
        register_detector(object())


def test_tag_detector_requires_tag():
    with pytest.raises(ValueError):
        TagDetector(b"", CarvedKind.ARCHIVE)


def test_scan_is_idempotent(minimal_png):
    buffer = ByteBuffer(b'{"a":1}' + minimal_png + b"OggS" + PAD)
    carver = SignatureCarver()
    assert carver.scan(buffer) == carver.scan(buffer)
