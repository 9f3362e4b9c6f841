"""Read-only scanners that index a ByteBuffer."""

from modforge.scanners.carver import SignatureCarver
from modforge.scanners.strings import StringScanner

__all__ = ["SignatureCarver", "StringScanner"]
