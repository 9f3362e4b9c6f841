"""Data models for ModForge."""

from modforge.models.buffer import ByteBuffer
from modforge.models.records import (
    UNKNOWN_SIZE,
    CarvedKind,
    CarvedRecord,
    Extraction,
    RepackReport,
    ReplaceOutcome,
    ReplaceProposal,
    StringRecord,
    TranslationEntry,
    TranslationTable,
)

__all__ = [
    "ByteBuffer",
    "UNKNOWN_SIZE",
    "CarvedKind",
    "CarvedRecord",
    "Extraction",
    "RepackReport",
    "ReplaceOutcome",
    "ReplaceProposal",
    "StringRecord",
    "TranslationEntry",
    "TranslationTable",
]
