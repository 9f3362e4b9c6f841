"""Protocol definitions for extensible components."""

from modforge.protocols.detector import DetectorMatch, SignatureDetector

__all__ = ["DetectorMatch", "SignatureDetector"]
