"""Immutable, versioned snapshot of a loaded file."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

import numpy as np


class ByteBuffer:
    """A read-only byte snapshot with a generation counter.

    The underlying numpy array is flagged non-writeable, so every reader can
    hold on to a snapshot safely. Changes go through ``overwrite``, which
    copies once and returns the next generation with the same length.
    """

    def __init__(self, data: bytes | bytearray | memoryview | np.ndarray, generation: int = 0):
        if isinstance(data, np.ndarray):
            array = np.array(data, dtype=np.uint8, copy=True).reshape(-1)
        else:
            array = np.frombuffer(bytes(data), dtype=np.uint8).copy()
        array.flags.writeable = False
        self._array = array
        self.generation = generation

    @classmethod
    def from_file(cls, path: Path | str) -> "ByteBuffer":
        """Load a file as generation 0."""
        return cls(Path(path).read_bytes())

    @property
    def view(self) -> np.ndarray:
        """Read-only uint8 view of the whole buffer."""
        return self._array

    def __len__(self) -> int:
        return int(self._array.shape[0])

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ByteBuffer):
            return NotImplemented
        return np.array_equal(self._array, other._array)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"ByteBuffer(len={len(self)}, generation={self.generation})"

    def slice(self, start: int, stop: int) -> bytes:
        """Return bytes ``[start, stop)`` clamped to the buffer."""
        return self._array[max(start, 0):min(stop, len(self))].tobytes()

    def tobytes(self) -> bytes:
        return self._array.tobytes()

    def overwrite(self, writes: Iterable[tuple[int, bytes]]) -> "ByteBuffer":
        """Apply in-place overwrites to a copy and return the next generation.

        Args:
            writes: (offset, data) pairs. Each must lie fully inside the buffer.

        Returns:
            A new ByteBuffer of the same length with ``generation + 1``.

        Raises:
            ValueError: If any write falls outside the buffer. Nothing is
                copied in that case.
        """
        pending = list(writes)
        size = len(self)
        for offset, data in pending:
            if offset < 0 or offset + len(data) > size:
                raise ValueError(
                    f"Write of {len(data)} bytes at 0x{offset:X} exceeds buffer of {size} bytes"
                )

        draft = self._array.copy()
        for offset, data in pending:
            if data:
                draft[offset:offset + len(data)] = np.frombuffer(data, dtype=np.uint8)
        return ByteBuffer._adopt(draft, self.generation + 1)

    @classmethod
    def _adopt(cls, array: np.ndarray, generation: int) -> "ByteBuffer":
        """Wrap a freshly built array without copying it again."""
        instance = cls.__new__(cls)
        array.flags.writeable = False
        instance._array = array
        instance.generation = generation
        return instance
