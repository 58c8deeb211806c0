"""
Wire helpers for the name frame.

A frame is a 4-byte little-endian unsigned length followed by exactly
that many payload bytes. Only the file name travels framed; the file
content that follows is bounded by the connection lifetime instead.
"""

import asyncio
import struct

from config import NAME_LENGTH_SIZE
from transfer.errors import MalformedFrame, TruncatedRead

LENGTH_FORMAT = "<I"
MAX_FRAME_LENGTH = 0xFFFFFFFF


def encode_frame(payload: bytes) -> bytes:
    """Prefix a payload with its u32 little-endian length."""
    if len(payload) > MAX_FRAME_LENGTH:
        raise MalformedFrame(f"payload of {len(payload)} bytes does not fit a u32 length")
    return struct.pack(LENGTH_FORMAT, len(payload)) + payload


def decode_length(data: bytes) -> int:
    """Interpret exactly four bytes as an unsigned little-endian length."""
    if len(data) != NAME_LENGTH_SIZE:
        raise MalformedFrame(
            f"a length is exactly {NAME_LENGTH_SIZE} bytes, got {len(data)}"
        )
    (length,) = struct.unpack(LENGTH_FORMAT, data)
    return length


async def read_exact(reader: asyncio.StreamReader, n: int) -> bytes:
    """Read exactly n bytes, or raise TruncatedRead if the peer closes first."""
    try:
        return await reader.readexactly(n)
    except asyncio.IncompleteReadError as e:
        raise TruncatedRead(n, len(e.partial)) from e


async def read_length(reader: asyncio.StreamReader) -> int:
    return decode_length(await read_exact(reader, NAME_LENGTH_SIZE))
