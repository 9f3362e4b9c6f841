"""Size-constrained in-place text patching."""

import logging
from typing import Iterable, Mapping

from modforge.models import ByteBuffer, RepackReport, StringRecord
from modforge.utils.charset import resolve_charset

logger = logging.getLogger(__name__)


class TextPatcher:
    """Write translations over the original string slots.

    Each translation must fit the byte length of the string it replaces.
    Shorter text is zero-padded to the slot; longer text is skipped whole.
    Outcomes are tallied per entry, so one bad entry never stops the rest.
    """

    DEFAULT_CHARSET = "utf-8"

    def __init__(self, charset: str | None = None):
        self.charset = charset or self.DEFAULT_CHARSET

    def encode(self, text: str) -> bytes:
        return text.encode(resolve_charset(self.charset))

    def fits(self, record: StringRecord, text: str) -> bool:
        """Check whether ``text`` fits the record's byte budget."""
        try:
            return len(self.encode(text)) <= record.length
        except UnicodeEncodeError:
            return False

    def repack(
        self,
        buffer: ByteBuffer,
        records: Iterable[StringRecord],
        translations: Mapping[int, str],
    ) -> tuple[ByteBuffer, RepackReport]:
        """Apply translations to a copy of the buffer.

        Args:
            buffer: Current snapshot (not modified)
            records: String records the translations refer to
            translations: Replacement text keyed by string offset

        Returns:
            The patched buffer and a report of applied, rejected and
            unmatched offsets

        Raises:
            UnsupportedEncoding: If the export charset is unknown.
        """
        codec = resolve_charset(self.charset)
        size = len(buffer)
        by_offset = {record.offset: record for record in records}
        report = RepackReport()
        writes: list[tuple[int, bytes]] = []

        for offset, text in translations.items():
            record = by_offset.get(offset)
            if record is None:
                report.unmatched_offsets.append(offset)
                continue
            if record.end > size:
                logger.warning(f"  0x{offset:X}: slot runs past end of buffer, skipped")
                report.unmatched_offsets.append(offset)
                continue

            try:
                encoded = text.encode(codec)
            except UnicodeEncodeError:
                logger.warning(f"  0x{offset:X}: text not encodable as {codec}, skipped")
                report.rejected_offsets.append(offset)
                continue

            if len(encoded) > record.length:
                logger.warning(
                    f"  0x{offset:X}: {len(encoded)} bytes exceeds slot of {record.length}, skipped"
                )
                report.rejected_offsets.append(offset)
                continue

            writes.append((offset, encoded + bytes(record.length - len(encoded))))
            report.applied_offsets.append(offset)

        new_buffer = buffer.overwrite(writes)
        logger.info(f"Repack: {report.summary()}")
        return new_buffer, report
