"""JSON interchange format for translation work."""

import json
import logging
from pathlib import Path
from typing import Iterable, Mapping

from modforge.errors import MalformedDocument
from modforge.models import StringRecord, TranslationTable

logger = logging.getLogger(__name__)


class TranslationMemory:
    """Read and write translation documents.

    A document is a JSON list of ``{"offset", "original", "translation"}``
    objects, one per string record, in record order.
    """

    SUFFIX = "_translation.json"

    @staticmethod
    def document_name(original_name: str) -> str:
        """File name used when exporting translations for ``original_name``."""
        return f"{original_name}{TranslationMemory.SUFFIX}"

    def build(self, records: Iterable[StringRecord], translations: Mapping[int, str]) -> list[dict]:
        """Build the document for the given records."""
        return [
            {
                "offset": record.offset,
                "original": record.original,
                "translation": translations.get(record.offset, ""),
            }
            for record in records
        ]

    def dumps(self, records: Iterable[StringRecord], translations: Mapping[int, str]) -> str:
        return json.dumps(self.build(records, translations), indent=2, ensure_ascii=False)

    def save(
        self,
        path: Path | str,
        records: Iterable[StringRecord],
        translations: Mapping[int, str],
    ) -> Path:
        """Write the document to ``path``."""
        path = Path(path)
        path.write_text(self.dumps(records, translations), encoding="utf-8")
        logger.info(f"Exported translations -> {path}")
        return path

    def loads(self, text: str, translations: Mapping[int, str]) -> TranslationTable:
        """Merge a document into a copy of ``translations``.

        Entries with an empty translation are ignored. Offsets that match no
        current string are kept; they show up as unmatched at repack.

        Returns:
            A new TranslationTable. ``translations`` is never modified.

        Raises:
            MalformedDocument: If the text is not valid JSON or not a list of
                entries with integer offsets and string translations.
        """
        try:
            document = json.loads(text)
        except json.JSONDecodeError as e:
            raise MalformedDocument(f"Invalid JSON: {e}") from e

        if not isinstance(document, list):
            raise MalformedDocument("Translation document must be a JSON list")

        merged = TranslationTable(translations)
        for index, item in enumerate(document):
            if not isinstance(item, dict):
                raise MalformedDocument(f"Entry {index} is not an object")

            offset = item.get("offset")
            if isinstance(offset, bool) or not isinstance(offset, int):
                raise MalformedDocument(f"Entry {index} has no integer offset")

            translation = item.get("translation", "")
            if translation is None:
                translation = ""
            if not isinstance(translation, str):
                raise MalformedDocument(f"Entry {index} translation is not a string")
            if translation:
                merged.set(offset, translation)

        logger.info(f"Imported {len(document)} entries ({len(merged)} pending translations)")
        return merged

    def load(self, path: Path | str, translations: Mapping[int, str]) -> TranslationTable:
        """Read a document from ``path`` and merge it into a copy of ``translations``."""
        try:
            text = Path(path).read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise MalformedDocument(f"{path} is not UTF-8 text") from e
        return self.loads(text, translations)
