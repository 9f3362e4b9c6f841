"""Tests for the translation interchange document."""

import json

import pytest

from modforge.errors import MalformedDocument
from modforge.models import StringRecord, TranslationTable
from modforge.storage import TranslationMemory

RECORDS = [
    StringRecord(id=0, offset=16, length=5, original="Start"),
    StringRecord(id=1, offset=40, length=9, original="Game Over"),
]


def test_build_defaults_translation_to_empty():
    document = TranslationMemory().build(RECORDS, {40: "Fin"})
    assert document == [
        {"offset": 16, "original": "Start", "translation": ""},
        {"offset": 40, "original": "Game Over", "translation": "Fin"},
    ]


def test_dumps_keeps_non_ascii_readable():
    text = TranslationMemory().dumps(RECORDS, {16: "เริ่ม"})
    assert "เริ่ม" in text
    assert json.loads(text)[0]["translation"] == "เริ่ม"


def test_loads_merges_only_non_empty_translations():
    existing = TranslationTable({16: "Go"})
    document = json.dumps([
        {"offset": 16, "original": "Start", "translation": ""},
        {"offset": 40, "original": "Game Over", "translation": "Fin"},
        {"offset": 999, "original": "gone", "translation": "kept"},
    ])

    merged = TranslationMemory().loads(document, existing)

    assert dict(merged) == {16: "Go", 40: "Fin", 999: "kept"}
    assert dict(existing) == {16: "Go"}


def test_loads_accepts_missing_translation_key():
    merged = TranslationMemory().loads('[{"offset": 3, "original": "abc"}]', {})
    assert len(merged) == 0


@pytest.mark.parametrize(
    "text",
    [
        "not json",
        '{"offset": 1}',
        "[1, 2]",
        '[{"offset": "16", "translation": "x"}]',
        '[{"offset": true, "translation": "x"}]',
        '[{"translation": "x"}]',
        '[{"offset": 16, "translation": 5}]',
        '[{"offset": 16, "translation": 0}]',
        '[{"offset": 16, "translation": false}]',
        '[{"offset": 16, "translation": []}]',
    ],
)
def test_malformed_documents(text):
    existing = TranslationTable({16: "Go"})
    with pytest.raises(MalformedDocument):
        TranslationMemory().loads(text, existing)
    assert dict(existing) == {16: "Go"}


def test_save_and_load_file(tmp_path):
    memory = TranslationMemory()
    path = memory.save(tmp_path / memory.document_name("data.unity3d"), RECORDS, {16: "Begin"})

    assert path.name == "data.unity3d_translation.json"
    assert dict(memory.load(path, {})) == {16: "Begin"}


def test_load_rejects_non_utf8_file(tmp_path):
    path = tmp_path / "bad.json"
    path.write_bytes(b"\xff\xfe\x00garbage")
    with pytest.raises(MalformedDocument):
        TranslationMemory().load(path, {})
