from __future__ import annotations

import asyncio
import socket

import pytest

from transfer.framing import encode_frame


def _free_port(kind: int) -> int:
    with socket.socket(socket.AF_INET, kind) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


@pytest.fixture
def free_udp_port() -> int:
    return _free_port(socket.SOCK_DGRAM)


@pytest.fixture
def free_tcp_port() -> int:
    return _free_port(socket.SOCK_STREAM)


def feed_reader(data: bytes) -> asyncio.StreamReader:
    """A StreamReader holding `data` followed by end-of-stream. Call inside a loop."""
    reader = asyncio.StreamReader()
    reader.feed_data(data)
    reader.feed_eof()
    return reader


def file_transfer(name: str, content: bytes) -> bytes:
    return encode_frame(name.encode("utf-8")) + content


async def start_sender(parts: list[bytes]) -> tuple[asyncio.AbstractServer, int]:
    """A fake sender: writes `parts` to whoever connects, then closes."""

    async def handle(reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        for part in parts:
            writer.write(part)
            await writer.drain()
        writer.close()
        await writer.wait_closed()

    server = await asyncio.start_server(handle, "127.0.0.1", 0)
    return server, server.sockets[0].getsockname()[1]


async def announce_until_done(task: asyncio.Task, port: int, message: bytes) -> None:
    """Send the announcement repeatedly until the receiver task finishes."""
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as s:
        while not task.done():
            s.sendto(message, ("127.0.0.1", port))
            await asyncio.sleep(0.05)


async def start_watching_sender(
    parts: list[bytes],
) -> tuple[asyncio.AbstractServer, int, asyncio.Future]:
    """
    A fake sender that keeps its side open after writing `parts`.

    The returned future resolves to True once the receiver closes the
    connection.
    """
    released = asyncio.get_running_loop().create_future()

    async def handle(reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        for part in parts:
            writer.write(part)
            await writer.drain()
        rest = await asyncio.wait_for(reader.read(), 5)
        released.set_result(rest == b"")
        writer.close()

    server = await asyncio.start_server(handle, "127.0.0.1", 0)
    return server, server.sockets[0].getsockname()[1], released
