"""Extraction and fixed-slot replacement of carved sub-files."""

import logging

from modforge.errors import OversizeWrite, UnknownSlotSize
from modforge.models import (
    ByteBuffer,
    CarvedRecord,
    Extraction,
    ReplaceOutcome,
    ReplaceProposal,
)

logger = logging.getLogger(__name__)


class SubFileExtractor:
    """Slice carved regions out of a buffer."""

    # Best-effort cap for regions whose size is unknown
    UNKNOWN_SIZE_CAP = 5 * 1024 * 1024

    def __init__(self, unknown_size_cap: int | None = None):
        self.unknown_size_cap = unknown_size_cap or self.UNKNOWN_SIZE_CAP

    def extract(self, buffer: ByteBuffer, record: CarvedRecord) -> Extraction:
        """Return the bytes of a carved record.

        Known sizes give the exact slot. Unknown sizes give at most
        ``unknown_size_cap`` bytes from the record offset, flagged as
        approximate.
        """
        if record.has_known_size:
            return Extraction(record, buffer.slice(record.offset, record.end))

        data = buffer.slice(record.offset, record.offset + self.unknown_size_cap)
        logger.warning(
            f"{record.display_name}: size unknown, extracted first {len(data)} bytes only"
        )
        return Extraction(record, data, approximate=True)


class SubFileReplacer:
    """Overwrite carved regions without changing the buffer length.

    Replacement is two-phase: ``propose`` inspects the payload and attaches
    an OversizeWrite warning when it does not fit; ``commit`` performs the
    write, and refuses an oversize proposal unless it is confirmed.
    """

    def propose(self, buffer: ByteBuffer, record: CarvedRecord, payload: bytes) -> ReplaceProposal:
        """Check a replacement against the record's slot.

        Raises:
            UnknownSlotSize: If the record has no known size.
            ValueError: If the slot does not fit in this buffer.
        """
        if not record.has_known_size:
            raise UnknownSlotSize(record.offset, record.display_name)
        if record.end > len(buffer):
            raise ValueError(
                f"{record.display_name} slot ends at 0x{record.end:X}, past buffer end 0x{len(buffer):X}"
            )

        payload = bytes(payload)
        warning = None
        if len(payload) > record.size:
            warning = OversizeWrite(record.offset, record.size, len(payload))
        return ReplaceProposal(record=record, payload=payload, warning=warning)

    def commit(
        self,
        buffer: ByteBuffer,
        proposal: ReplaceProposal,
        confirmed: bool = False,
    ) -> tuple[ByteBuffer, ReplaceOutcome]:
        """Write a proposal into a copy of the buffer.

        Args:
            buffer: Current snapshot (not modified)
            proposal: Result of ``propose``
            confirmed: Operator accepted an oversize write

        Returns:
            The next buffer generation and the byte counts written

        Raises:
            OversizeWrite: If the proposal is oversize and not confirmed.
        """
        if proposal.oversize and not confirmed:
            raise proposal.warning

        record = proposal.record
        written = proposal.payload[:record.size]
        padding = record.size - len(written)
        outcome = ReplaceOutcome(
            written=len(written),
            padded=padding,
            truncated=len(proposal.payload) - len(written),
        )

        if outcome.truncated:
            logger.warning(
                f"{record.display_name}: confirmed oversize write, "
                f"{outcome.truncated} bytes dropped at slot end"
            )

        new_buffer = buffer.overwrite([(record.offset, written + bytes(padding))])
        logger.info(
            f"Replaced {record.display_name} at 0x{record.offset:X}: "
            f"{outcome.written} written, {outcome.padded} zero-filled "
            f"(generation {new_buffer.generation})"
        )
        return new_buffer, outcome

    def replace(
        self,
        buffer: ByteBuffer,
        record: CarvedRecord,
        payload: bytes,
        confirmed: bool = False,
    ) -> tuple[ByteBuffer, ReplaceOutcome]:
        """Propose and commit in one call."""
        return self.commit(buffer, self.propose(buffer, record, payload), confirmed=confirmed)
