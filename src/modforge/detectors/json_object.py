"""Heuristic detector for embedded JSON objects."""

from typing import Optional

import numpy as np

from modforge.models import CarvedKind
from modforge.protocols import DetectorMatch

OPEN_BRACE = 0x7B
CLOSE_BRACE = 0x7D
QUOTE = 0x22
NEWLINE = 0x0A


class JsonObjectDetector:
    """Detect ``{"`` or ``{\\n`` and balance braces to find the end.

    Balancing is bounded to MAX_WINDOW bytes from the opening brace so a
    stray brace in binary data cannot trigger an unbounded scan. Braces
    inside string literals are counted like any other.
    """

    MAX_WINDOW = 50_000

    kind = CarvedKind.JSON
    lead_byte = OPEN_BRACE

    def __init__(self, max_window: int | None = None):
        self.max_window = max_window or self.MAX_WINDOW

    def probe(self, data: np.ndarray, offset: int) -> Optional[DetectorMatch]:
        if data[offset] != OPEN_BRACE or data[offset + 1] not in (QUOTE, NEWLINE):
            return None

        stop = min(len(data), offset + self.max_window)
        window = data[offset + 1:stop]
        steps = (window == OPEN_BRACE).astype(np.int64) - (window == CLOSE_BRACE)
        depth = 1 + np.cumsum(steps)
        balanced = np.flatnonzero(depth == 0)
        if balanced.size == 0:
            return None

        # Closing brace sits at offset + 1 + index
        return DetectorMatch(self.kind, int(balanced[0]) + 2)
