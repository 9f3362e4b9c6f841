"""Operator session: owns the canonical buffer and everything derived from it."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from modforge.models import (
    ByteBuffer,
    CarvedRecord,
    Extraction,
    RepackReport,
    ReplaceOutcome,
    ReplaceProposal,
    StringRecord,
    TranslationTable,
)
from modforge.patching import SubFileExtractor, SubFileReplacer, TextPatcher
from modforge.scanners import SignatureCarver, StringScanner
from modforge.storage import TranslationMemory
from modforge.utils.binary import HexRow, hexdump_rows
from modforge.utils.charset import resolve_charset

logger = logging.getLogger(__name__)


class ForgeSession:
    """One loaded file and the work done on it.

    There is exactly one canonical ByteBuffer at a time. Replacing a sub-file
    publishes a new generation; record lists built from an older generation
    are kept but reported as stale until the file is scanned again.
    """

    MODDED_PREFIX = "MODDED_"

    def __init__(
        self,
        buffer: ByteBuffer,
        name: str = "untitled.bin",
        min_length: int | None = None,
        charset: str | None = None,
        export_charset: str | None = None,
    ):
        self.buffer = buffer
        self.name = name
        self.scanner = StringScanner(min_length=min_length, charset=charset)
        self.carver = SignatureCarver()
        self.extractor = SubFileExtractor()
        self.replacer = SubFileReplacer()
        self.patcher = TextPatcher(charset=export_charset)
        self.memory = TranslationMemory()

        self.strings: list[StringRecord] = []
        self.carved: list[CarvedRecord] = []
        self.translations = TranslationTable()
        self._strings_generation: int | None = None
        self._carved_generation: int | None = None

    @classmethod
    def load(cls, path: Path | str, **options) -> "ForgeSession":
        """Open a file from disk. No format validation is done."""
        path = Path(path)
        session = cls(ByteBuffer.from_file(path), name=path.name, **options)
        logger.info(f"Loaded {path.name} ({len(session.buffer)} bytes)")
        return session

    @classmethod
    def from_bytes(cls, data: bytes, name: str = "untitled.bin", **options) -> "ForgeSession":
        return cls(ByteBuffer(data), name=name, **options)

    # Scanning

    def configure_scanner(self, min_length: int | None = None, charset: str | None = None) -> None:
        """Replace the string scanner with one using new settings.

        Existing string records are kept but reported as stale until the
        next scan.

        Raises:
            ValueError: If ``min_length`` is below 1.
            UnsupportedEncoding: If ``charset`` is not a text encoding.
        """
        scanner = StringScanner(min_length=min_length, charset=charset)
        resolve_charset(scanner.charset)
        self.scanner = scanner
        self._strings_generation = None
        logger.info(f"String scan: min_length={scanner.min_length} charset={scanner.charset}")

    def scan_strings(self) -> list[StringRecord]:
        snapshot = self.buffer
        self.strings = self.scanner.scan(snapshot)
        self._strings_generation = snapshot.generation
        return self.strings

    def carve(self) -> list[CarvedRecord]:
        snapshot = self.buffer
        self.carved = self.carver.scan(snapshot)
        self._carved_generation = snapshot.generation
        return self.carved

    def scan_all(self) -> tuple[list[StringRecord], list[CarvedRecord]]:
        """Run the string scan and the carve in parallel over one snapshot."""
        snapshot = self.buffer
        with ThreadPoolExecutor(max_workers=2) as pool:
            strings = pool.submit(self.scanner.scan, snapshot)
            carved = pool.submit(self.carver.scan, snapshot)
            self.strings = strings.result()
            self.carved = carved.result()
        self._strings_generation = self._carved_generation = snapshot.generation
        return self.strings, self.carved

    @property
    def strings_stale(self) -> bool:
        return self._strings_generation != self.buffer.generation

    @property
    def carved_stale(self) -> bool:
        return self._carved_generation != self.buffer.generation

    def search_strings(self, query: str) -> list[StringRecord]:
        """Strings whose original or pending text contains ``query`` (case-insensitive)."""
        needle = query.lower()
        if not needle:
            return list(self.strings)
        return [
            record
            for record in self.strings
            if needle in record.original.lower()
            or needle in self.translations.get(record.offset, "").lower()
        ]

    # Sub-files

    def extract(self, record: CarvedRecord, directory: Path | str | None = None) -> Extraction:
        """Extract a carved record, writing ``File_{id}.{ext}`` when a directory is given."""
        extraction = self.extractor.extract(self.buffer, record)
        if directory is not None:
            target = Path(directory) / record.display_name
            target.write_bytes(extraction.data)
            logger.info(f"Extracted {record.display_name} ({len(extraction.data)} bytes) -> {target}")
        return extraction

    def propose_replace(self, record: CarvedRecord, payload: bytes) -> ReplaceProposal:
        return self.replacer.propose(self.buffer, record, payload)

    def commit_replace(self, proposal: ReplaceProposal, confirmed: bool = False) -> ReplaceOutcome:
        """Apply a proposal and publish the resulting buffer."""
        new_buffer, outcome = self.replacer.commit(self.buffer, proposal, confirmed=confirmed)
        self._publish(new_buffer)
        return outcome

    # Translations

    def set_translation(self, offset: int, text: str) -> None:
        self.translations.set(offset, text)

    def too_long(self, record: StringRecord) -> bool:
        """Whether the pending edit for ``record`` exceeds its byte budget."""
        text = self.translations.get(record.offset)
        return text is not None and not self.patcher.fits(record, text)

    def export_translations(self, path: Path | str | None = None) -> Path:
        """Write the translation document (default ``{name}_translation.json``)."""
        path = Path(path) if path is not None else Path(self.memory.document_name(self.name))
        return self.memory.save(path, self.strings, self.translations)

    def import_translations(self, path: Path | str) -> int:
        """Merge a translation document; the table is only replaced on success."""
        self.translations = self.memory.load(path, self.translations)
        return len(self.translations)

    # Export

    def repack(self) -> tuple[ByteBuffer, RepackReport]:
        """Patch pending translations into a clone of the current buffer.

        The canonical buffer is not replaced.
        """
        return self.patcher.repack(self.buffer, self.strings, self.translations)

    def save_modded(self, directory: Path | str) -> tuple[Path, RepackReport]:
        """Repack and write ``MODDED_{name}`` into ``directory``."""
        patched, report = self.repack()
        target = Path(directory) / f"{self.MODDED_PREFIX}{self.name}"
        target.write_bytes(patched.tobytes())
        logger.info(f"Wrote {target} ({report.summary()})")
        return target, report

    def hex_preview(self, limit: int = 512) -> list[HexRow]:
        return hexdump_rows(self.buffer.slice(0, limit))

    def _publish(self, buffer: ByteBuffer) -> None:
        self.buffer = buffer
        logger.info(f"Published generation {buffer.generation}")
