"""Signature-based carving of embedded sub-files."""

import logging
from typing import Iterable, Optional

import numpy as np

from modforge.detectors import default_detectors
from modforge.models import ByteBuffer, CarvedRecord
from modforge.protocols import DetectorMatch, SignatureDetector

logger = logging.getLogger(__name__)


class SignatureCarver:
    """Walk a buffer and report regions that look like known resources.

    Detectors are tried in order at each offset and the first match wins.
    A match with a known size moves the cursor past the carved region, so
    nested signatures are not reported. A match of unknown size only moves
    it one byte, so one resource can be reported several times.
    """

    # Offsets this close to the end are never probed
    LOOKAHEAD_MARGIN = 16

    def __init__(self, detectors: Optional[Iterable[SignatureDetector]] = None):
        self.detectors = list(detectors) if detectors is not None else default_detectors()

    def scan(self, buffer: ByteBuffer) -> list[CarvedRecord]:
        """Carve candidate sub-files from the buffer.

        Args:
            buffer: Snapshot to scan (not modified)

        Returns:
            CarvedRecords in ascending offset order, ids numbered from 0
        """
        data = buffer.view
        limit = len(data) - self.LOOKAHEAD_MARGIN
        records: list[CarvedRecord] = []
        if limit <= 0 or not self.detectors:
            return records

        # Only offsets holding some detector's lead byte can match
        lead_bytes = np.array(sorted({d.lead_byte for d in self.detectors}), dtype=np.uint8)
        candidates = np.flatnonzero(np.isin(data[:limit], lead_bytes))

        cursor = 0
        for offset in candidates.tolist():
            if offset < cursor:
                continue
            match = self._probe(data, offset)
            if match is None:
                continue

            record = CarvedRecord(id=len(records), offset=offset, size=match.size, kind=match.kind)
            records.append(record)
            logger.debug(f"  {record.display_name} at 0x{offset:X} size={match.size}")

            cursor = offset + match.size if match.size is not None else offset + 1

        logger.info(f"Deep scan: {len(records)} embedded files found")
        return records

    def _probe(self, data: np.ndarray, offset: int) -> Optional[DetectorMatch]:
        """Return the first detector match at ``offset``."""
        byte = data[offset]
        for detector in self.detectors:
            if byte != detector.lead_byte:
                continue
            match = detector.probe(data, offset)
            if match is not None:
                return match
        return None
