"""ModForge - locate, extract and patch assets and text inside opaque game files."""

from modforge.errors import (
    ForgeError,
    MalformedDocument,
    OversizeWrite,
    UnknownSlotSize,
    UnsupportedEncoding,
)
from modforge.models import ByteBuffer, CarvedKind, CarvedRecord, StringRecord, TranslationTable
from modforge.session import ForgeSession

__all__ = [
    "ByteBuffer",
    "CarvedKind",
    "CarvedRecord",
    "ForgeError",
    "ForgeSession",
    "MalformedDocument",
    "OversizeWrite",
    "StringRecord",
    "TranslationTable",
    "UnknownSlotSize",
    "UnsupportedEncoding",
]
