"""Byte classification and display helpers."""

import re
from dataclasses import dataclass

import numpy as np

# Display-safe ASCII range for hex dumps
ASCII_PRINTABLE = range(32, 127)


def printable_mask(data: np.ndarray) -> np.ndarray:
    """Mark bytes that may belong to a text run.

    A byte counts when it is printable ASCII (32-126) or has the high bit
    set, so multi-byte encodings such as UTF-8 or Shift-JIS stay intact.

    Args:
        data: uint8 array

    Returns:
        Boolean array of the same shape
    """
    return ((data >= 32) & (data <= 126)) | (data > 127)


@dataclass(frozen=True)
class HexRow:
    """One line of a hex dump."""

    offset: int
    hex: str
    ascii: str

    def render(self, width: int = 16) -> str:
        return f"{self.offset:08X}  {self.hex:<{width * 3 - 1}}  {self.ascii}"


def hexdump_rows(data: bytes, width: int = 16, base_offset: int = 0) -> list[HexRow]:
    """Split bytes into hex dump rows.

    Args:
        data: Raw bytes to show
        width: Bytes per row
        base_offset: Offset of ``data[0]`` in the enclosing file

    Returns:
        Rows with upper-case hex pairs and an ASCII column where
        non-printable bytes are shown as ``.``
    """
    rows = []
    for start in range(0, len(data), width):
        chunk = data[start:start + width]
        rows.append(
            HexRow(
                offset=base_offset + start,
                hex=" ".join(f"{byte:02X}" for byte in chunk),
                ascii="".join(chr(byte) if byte in ASCII_PRINTABLE else "." for byte in chunk),
            )
        )
    return rows


def format_size(size: int) -> str:
    """Human readable byte count."""
    if size < 1024:
        return f"{size} B"
    elif size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


def find_sequence(data: np.ndarray, needle: bytes, start: int = 0) -> int:
    """Find the first occurrence of ``needle`` at or after ``start``.

    Searches the array's memory directly instead of copying it to bytes.

    Returns:
        Absolute index of the match, or -1
    """
    match = re.compile(re.escape(needle)).search(memoryview(data), start)
    return match.start() if match else -1


def printable_runs(data: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Locate maximal runs of printable bytes.

    Returns:
        (starts, lengths) arrays in ascending offset order. A run that
        reaches the end of the data is included.
    """
    padded = np.zeros(len(data) + 2, dtype=np.int8)
    padded[1:-1] = printable_mask(data)
    edges = np.diff(padded)
    starts = np.flatnonzero(edges == 1)
    ends = np.flatnonzero(edges == -1)
    return starts, ends - starts
