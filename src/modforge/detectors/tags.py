"""Detectors for fixed container tags whose length cannot be derived."""

from typing import Optional

import numpy as np

from modforge.models import UNKNOWN_SIZE, CarvedKind
from modforge.protocols import DetectorMatch


class TagDetector:
    """Match an exact byte tag and report a region of unknown size."""

    def __init__(self, tag: bytes, kind: CarvedKind):
        if not tag:
            raise ValueError("Tag must not be empty")
        self.tag = tag
        self.kind = kind
        self.lead_byte = tag[0]

    def __repr__(self) -> str:
        return f"TagDetector({self.tag!r}, {self.kind.name})"

    def probe(self, data: np.ndarray, offset: int) -> Optional[DetectorMatch]:
        if data[offset:offset + len(self.tag)].tobytes() != self.tag:
            return None
        return DetectorMatch(self.kind, UNKNOWN_SIZE)


def unity_bundle_detector() -> TagDetector:
    """UnityFS asset bundle header."""
    return TagDetector(b"UnityFS", CarvedKind.ARCHIVE)


def ogg_stream_detector() -> TagDetector:
    """Ogg page capture pattern. Stream length needs page parsing, so unknown."""
    return TagDetector(b"OggS", CarvedKind.AUDIO)
