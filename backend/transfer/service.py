"""
TCP receive session.

Connects to a discovered sender and runs the receive side of the wire
protocol: a u32 little-endian name length, the UTF-8 file name, then raw
file content until the sender closes the connection.
"""

import asyncio
import logging
import time

from config import ReceiverConfig
from transfer.errors import (
    CloseError,
    ConnectError,
    ContentReadError,
    ContentWriteError,
    FrameError,
    NameLengthReadError,
    NameReadError,
)
from transfer.framing import read_exact, read_length
from transfer.models import TransferInfo, TransferState
from transfer.naming import destination_path

logger = logging.getLogger(__name__)


def split_address(address: str) -> tuple[str, int]:
    """Split "host:port" into its parts."""
    host, sep, port = address.rpartition(":")
    if not sep or not host:
        raise ConnectError(f"invalid peer address {address!r}")
    try:
        return host, int(port)
    except ValueError as e:
        raise ConnectError(f"invalid port in peer address {address!r}") from e


async def _read_chunk(
    reader: asyncio.StreamReader, chunk_size: int, timeout: float | None
) -> bytes:
    try:
        if timeout is None:
            return await reader.read(chunk_size)
        return await asyncio.wait_for(reader.read(chunk_size), timeout)
    except asyncio.TimeoutError as e:
        raise ContentReadError(f"no content received for {timeout}s") from e
    except OSError as e:
        raise ContentReadError(f"err receiving file chunk: {e}") from e


async def receive_file(
    reader: asyncio.StreamReader,
    info: TransferInfo,
    save_dir: str,
    chunk_size: int,
    read_timeout: float | None = None,
    unique_names: bool = False,
) -> TransferInfo:
    """
    Receive one file from an open connection and write it under save_dir.

    The connection itself is not closed here; the caller owns it.
    `info` is mutated in place as the session advances.
    """
    # 1. Name length
    info.state = TransferState.AWAITING_NAME_LENGTH
    try:
        name_len = await read_length(reader)
    except (FrameError, OSError) as e:
        raise NameLengthReadError(f"err receiving file name length: {e}") from e

    # 2. Name
    info.state = TransferState.AWAITING_NAME
    try:
        raw_name = await read_exact(reader, name_len)
    except (FrameError, OSError) as e:
        raise NameReadError(f"err receiving file name: {e}") from e
    info.file_name = raw_name.decode("utf-8", errors="replace")

    # 3. Content, until the sender closes its side
    info.dest_path = destination_path(info.file_name, save_dir, unique=unique_names)
    logger.info(f"Receiving '{info.file_name}' from {info.peer} into {info.dest_path}")

    try:
        f = open(info.dest_path, "wb")
    except (OSError, ValueError) as e:
        # ValueError: the sender's extension carried a NUL byte
        raise ContentWriteError(f"err creating dest file: {e}") from e

    info.state = TransferState.STREAMING_CONTENT
    with f:
        while True:
            chunk = await _read_chunk(reader, chunk_size, read_timeout)
            if not chunk:
                break
            try:
                await asyncio.to_thread(f.write, chunk)
            except OSError as e:
                raise ContentWriteError(f"err writing chunk to the file: {e}") from e
            info.transferred_bytes += len(chunk)
            logger.debug(f"Chunk of {len(chunk)} bytes, {info.transferred_bytes} total")

    logger.info(f"received {info.transferred_bytes} bytes from the sender")
    return info


async def _close(writer: asyncio.StreamWriter) -> None:
    writer.close()
    try:
        await writer.wait_closed()
    except OSError as e:
        raise CloseError(f"err closing connection: {e}") from e


def _mark_failed(info: TransferInfo, message: str) -> None:
    info.state = TransferState.FAILED
    info.error_message = message
    info.finished_at = time.time()


async def run_session(
    address: str, config: ReceiverConfig, info: TransferInfo | None = None
) -> TransferInfo:
    """
    Connect to a sender at "host:port" and receive its file.

    Raises ConnectError if the sender is unreachable. Any later failure
    closes the connection before propagating. Pass `info` to observe the
    session state even when it fails.
    """
    if info is None:
        info = TransferInfo(peer=address)
    info.peer = address
    info.started_at = time.time()
    host, port = split_address(address)

    try:
        reader, writer = await asyncio.open_connection(host, port)
    except OSError as e:
        _mark_failed(info, str(e))
        raise ConnectError(f"err connecting to peer {address}: {e}") from e

    logger.info(f"connected to peer: {address}")

    try:
        await receive_file(
            reader,
            info,
            save_dir=config.save_dir,
            chunk_size=config.chunk_size,
            read_timeout=config.read_timeout,
            unique_names=config.unique_names,
        )
    except BaseException as e:
        _mark_failed(info, str(e) or type(e).__name__)
        writer.close()
        try:
            await writer.wait_closed()
        except OSError as close_err:
            logger.debug(f"Ignoring close error after failure: {close_err}")
        raise

    try:
        await _close(writer)
    except CloseError as e:
        _mark_failed(info, str(e))
        raise
    info.state = TransferState.CLOSED
    info.finished_at = time.time()
    return info
