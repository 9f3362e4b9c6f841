"""Detector for PNG images."""

from typing import Optional

import numpy as np

from modforge.models import CarvedKind
from modforge.protocols import DetectorMatch
from modforge.utils.binary import find_sequence


class PngDetector:
    """Detect a PNG by its leading magic and size it up to the IEND chunk.

    Only the first four bytes of the eight-byte PNG signature are checked.
    The carved size runs through the IEND type code and its 4-byte CRC.
    """

    MAGIC = b"\x89PNG"
    END_CHUNK = b"IEND"
    HEADER_SIZE = 8
    TRAILER_SIZE = 8  # chunk type + CRC

    kind = CarvedKind.IMAGE
    lead_byte = MAGIC[0]

    def probe(self, data: np.ndarray, offset: int) -> Optional[DetectorMatch]:
        if data[offset:offset + len(self.MAGIC)].tobytes() != self.MAGIC:
            return None

        end_chunk = find_sequence(data, self.END_CHUNK, offset + self.HEADER_SIZE)
        if end_chunk == -1 or end_chunk + self.TRAILER_SIZE > len(data):
            return None
        return DetectorMatch(self.kind, end_chunk + self.TRAILER_SIZE - offset)
