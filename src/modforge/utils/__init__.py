"""Utility functions for ModForge."""

from modforge.utils.binary import (
    HexRow,
    find_sequence,
    format_size,
    hexdump_rows,
    printable_mask,
    printable_runs,
)
from modforge.utils.charset import resolve_charset

__all__ = [
    "HexRow",
    "find_sequence",
    "format_size",
    "hexdump_rows",
    "printable_mask",
    "printable_runs",
    "resolve_charset",
]
