from __future__ import annotations

import asyncio
import struct

import pytest

from conftest import feed_reader
from transfer.errors import MalformedFrame, TruncatedRead
from transfer.framing import decode_length, encode_frame, read_exact, read_length


def test_decode_length_is_little_endian():
    assert decode_length(b"\x0a\x00\x00\x00") == 10
    assert decode_length(b"\x00\x01\x00\x00") == 256
    assert decode_length(b"\xff\xff\xff\xff") == 0xFFFFFFFF


def test_decode_length_short_input():
    with pytest.raises(MalformedFrame):
        decode_length(b"\x01\x02\x03")


def test_encode_frame_prefixes_length():
    assert encode_frame(b"report.pdf") == struct.pack("<I", 10) + b"report.pdf"
    assert encode_frame(b"") == b"\x00\x00\x00\x00"


@pytest.mark.parametrize("payload", [b"", b"x", b"report.pdf", bytes(range(256)) * 40])
def test_frame_roundtrip(payload):
    async def run():
        reader = feed_reader(encode_frame(payload) + b"trailing")
        n = await read_length(reader)
        body = await read_exact(reader, n)
        rest = await reader.read()
        return n, body, rest

    n, body, rest = asyncio.run(run())
    assert n == len(payload)
    assert body == payload
    assert rest == b"trailing"


def test_read_exact_truncated():
    async def run():
        await read_exact(feed_reader(b"abc"), 5)

    with pytest.raises(TruncatedRead) as exc:
        asyncio.run(run())
    assert exc.value.expected == 5
    assert exc.value.received == 3


def test_read_length_truncated():
    with pytest.raises(TruncatedRead):
        asyncio.run(read_length_from(b"\x01\x00"))


async def read_length_from(data: bytes) -> int:
    return await read_length(feed_reader(data))


def test_decode_length_rejects_extra_bytes():
    with pytest.raises(MalformedFrame):
        decode_length(b"\x01\x00\x00\x00\x00")
