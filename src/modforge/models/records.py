"""Records derived from a ByteBuffer, and the reports produced by patching."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional

from modforge.errors import OversizeWrite

# Marker for carved regions whose extent cannot be determined.
UNKNOWN_SIZE = None


class CarvedKind(Enum):
    """Kinds of embedded resource the carver can recognise."""

    JSON = ("json", "json")
    IMAGE = ("image", "png")
    ARCHIVE = ("archive", "assets")
    AUDIO = ("audio", "ogg")

    def __init__(self, label: str, extension: str):
        self.label = label
        self.extension = extension

    def __str__(self) -> str:
        return self.label


@dataclass(frozen=True)
class StringRecord:
    """A printable byte run decoded as text.

    ``length`` is the run's size in bytes, not characters. It is the hard
    budget for any replacement written at ``offset``.
    """

    id: int
    offset: int
    length: int
    original: str

    @property
    def end(self) -> int:
        return self.offset + self.length


@dataclass(frozen=True)
class CarvedRecord:
    """A candidate sub-file found by signature matching."""

    id: int
    offset: int
    size: Optional[int]
    kind: CarvedKind

    @property
    def display_name(self) -> str:
        return f"File_{self.id}.{self.kind.extension}"

    @property
    def has_known_size(self) -> bool:
        return self.size is not UNKNOWN_SIZE

    @property
    def end(self) -> Optional[int]:
        """Exclusive end offset, or None when the size is unknown."""
        if self.size is None:
            return None
        return self.offset + self.size


@dataclass(frozen=True)
class TranslationEntry:
    """Operator-supplied replacement text for the string at ``offset``."""

    offset: int
    pending_text: str


class TranslationTable(Mapping):
    """Pending translations keyed by string offset, in insertion order.

    Behaves as a read-only ``Mapping[int, str]`` so it can be handed to the
    text patcher directly. Setting an empty text drops the entry.
    """

    def __init__(self, entries: Optional[Mapping[int, str]] = None):
        self._entries: dict[int, TranslationEntry] = {}
        if entries:
            for offset, text in entries.items():
                self.set(offset, text)

    def __getitem__(self, offset: int) -> str:
        return self._entries[offset].pending_text

    def __iter__(self) -> Iterator[int]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"TranslationTable({dict(self)!r})"

    def set(self, offset: int, text: str) -> None:
        """Record a pending edit; an empty text removes it."""
        if not text:
            self.discard(offset)
            return
        self._entries[int(offset)] = TranslationEntry(int(offset), text)

    def discard(self, offset: int) -> None:
        self._entries.pop(offset, None)

    def entries(self) -> list[TranslationEntry]:
        return list(self._entries.values())

    def copy(self) -> "TranslationTable":
        return TranslationTable(self)


@dataclass
class Extraction:
    """Bytes cut out of a buffer for a carved record.

    ``approximate`` is set when the record size is unknown and the data is a
    capped best-effort slice rather than the real resource.
    """

    record: CarvedRecord
    data: bytes
    approximate: bool = False


@dataclass(frozen=True)
class ReplaceOutcome:
    """Byte counts for one sub-file replacement."""

    written: int
    padded: int
    truncated: int


@dataclass
class RepackReport:
    """Tally of a text repack, per entry outcome."""

    applied_offsets: list[int] = field(default_factory=list)
    rejected_offsets: list[int] = field(default_factory=list)
    unmatched_offsets: list[int] = field(default_factory=list)

    @property
    def applied(self) -> int:
        return len(self.applied_offsets)

    @property
    def rejected(self) -> int:
        return len(self.rejected_offsets)

    @property
    def unmatched(self) -> int:
        return len(self.unmatched_offsets)

    def summary(self) -> str:
        return f"applied={self.applied} rejected={self.rejected} unmatched={self.unmatched}"


@dataclass(frozen=True)
class ReplaceProposal:
    """First phase of a sub-file replacement, not yet applied.

    ``warning`` is set when the payload does not fit the slot; committing
    such a proposal needs explicit confirmation.
    """

    record: CarvedRecord
    payload: bytes
    warning: Optional[OversizeWrite] = None

    @property
    def oversize(self) -> bool:
        return self.warning is not None
