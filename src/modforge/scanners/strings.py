"""Printable-run string extraction."""

import logging

from modforge.models import ByteBuffer, StringRecord
from modforge.utils.binary import printable_runs
from modforge.utils.charset import resolve_charset

logger = logging.getLogger(__name__)

REPLACEMENT_CHAR = "\ufffd"


class StringScanner:
    """Extract printable byte runs that decode cleanly as text.

    A run is a maximal sequence of bytes that are printable ASCII or have
    the high bit set. Runs shorter than ``min_length`` bytes are dropped
    before decoding; runs that fail strict decoding under ``charset`` are
    dropped silently.
    """

    DEFAULT_MIN_LENGTH = 4
    DEFAULT_CHARSET = "utf-8"

    def __init__(self, min_length: int | None = None, charset: str | None = None):
        self.min_length = self.DEFAULT_MIN_LENGTH if min_length is None else min_length
        self.charset = charset or self.DEFAULT_CHARSET
        if self.min_length < 1:
            raise ValueError(f"min_length must be at least 1, got {self.min_length}")

    def scan(self, buffer: ByteBuffer) -> list[StringRecord]:
        """Scan the whole buffer for text.

        Args:
            buffer: Snapshot to scan (not modified)

        Returns:
            StringRecords in ascending offset order, ids numbered from 0

        Raises:
            UnsupportedEncoding: If the charset is unknown. Raised before
                any run is examined.
        """
        codec = resolve_charset(self.charset)
        data = buffer.view

        starts, lengths = printable_runs(data)
        keep = lengths >= self.min_length

        records: list[StringRecord] = []
        for start, length in zip(starts[keep].tolist(), lengths[keep].tolist()):
            try:
                text = data[start:start + length].tobytes().decode(codec)
            except UnicodeDecodeError:
                continue
            if REPLACEMENT_CHAR in text:
                continue
            records.append(StringRecord(id=len(records), offset=start, length=length, original=text))

        logger.info(
            f"String scan: {len(records)} strings from {int(keep.sum())} candidate runs "
            f"({codec}, min {self.min_length} bytes)"
        )
        return records
