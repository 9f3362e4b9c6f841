"""Error types raised by ModForge operations."""


class ForgeError(Exception):
    """Base class for all ModForge errors."""


class UnsupportedEncoding(ForgeError, LookupError):
    """The requested charset is not known to the codec registry."""

    def __init__(self, charset: str):
        self.charset = charset
        super().__init__(f"Unsupported encoding: {charset!r}")


class UnknownSlotSize(ForgeError, ValueError):
    """A carved region has no known size, so there is no safe write boundary."""

    def __init__(self, offset: int, name: str):
        self.offset = offset
        self.name = name
        super().__init__(
            f"Cannot replace {name} at 0x{offset:X}: region size is unknown"
        )


class OversizeWrite(ForgeError):
    """Replacement content is larger than its slot.

    Raised by a commit that was not confirmed. The same instance is attached
    to the proposal as a warning, so callers can show it before deciding.
    """

    def __init__(self, offset: int, slot_size: int, payload_size: int):
        self.offset = offset
        self.slot_size = slot_size
        self.payload_size = payload_size
        super().__init__(
            f"New content ({payload_size} bytes) is larger than the slot "
            f"({slot_size} bytes) at 0x{offset:X}; overwriting may corrupt the file"
        )

    @property
    def overflow(self) -> int:
        """Number of payload bytes that will not fit in the slot."""
        return self.payload_size - self.slot_size


class MalformedDocument(ForgeError, ValueError):
    """A translation memory document could not be read."""
