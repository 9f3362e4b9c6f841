"""Shared byte fixtures."""

import struct
import zlib

import pytest

from modforge.models import ByteBuffer

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


def png_chunk(chunk_type: bytes, payload: bytes) -> bytes:
    crc = zlib.crc32(chunk_type + payload) & 0xFFFFFFFF
    return struct.pack(">I", len(payload)) + chunk_type + payload + struct.pack(">I", crc)


@pytest.fixture
def minimal_png() -> bytes:
    """A 1x1 greyscale PNG: signature, IHDR, IDAT, IEND."""
    ihdr = struct.pack(">IIBBBBB", 1, 1, 8, 0, 0, 0, 0)
    idat = zlib.compress(b"\x00\x00")
    return (
        PNG_SIGNATURE
        + png_chunk(b"IHDR", ihdr)
        + png_chunk(b"IDAT", idat)
        + png_chunk(b"IEND", b"")
    )


@pytest.fixture
def make_buffer():
    """Build a ByteBuffer from byte fragments."""

    def build(*parts: bytes) -> ByteBuffer:
        return ByteBuffer(b"".join(parts))

    return build
