"""
UDP sender discovery.

Binds the discovery port, waits for a single announcement datagram and
turns it into an address the transfer session can connect to. The
endpoint only lives for the duration of one discovery.
"""

import asyncio
import logging
import socket

from config import DISCOVERY_BUFFER_SIZE, ReceiverConfig
from discovery.models import Announcement
from transfer.errors import DiscoveryBindError, DiscoveryReadError

logger = logging.getLogger(__name__)


class DiscoveryProtocol(asyncio.DatagramProtocol):
    """asyncio UDP protocol that resolves a future with the first datagram."""

    def __init__(self, received: asyncio.Future) -> None:
        self._received = received

    def datagram_received(self, data: bytes, addr: tuple[str, int]) -> None:
        if self._received.done():
            return
        logger.debug(f"Announcement of {len(data)} bytes from {addr}")
        self._received.set_result(data[:DISCOVERY_BUFFER_SIZE])

    def error_received(self, exc: Exception) -> None:
        logger.warning(f"Discovery UDP error: {exc}")
        if not self._received.done():
            self._received.set_exception(exc)

    def connection_lost(self, exc: Exception | None) -> None:
        if not self._received.done():
            self._received.set_exception(
                exc or ConnectionAbortedError("discovery endpoint closed")
            )


class DiscoveryListener:
    """One-shot announcement listener, usable as an async context manager."""

    def __init__(self, bind_host: str, port: int, peer_host: str) -> None:
        self._bind_host = bind_host
        self._port = port
        self._peer_host = peer_host
        self._transport: asyncio.DatagramTransport | None = None
        self._received: asyncio.Future | None = None

    @property
    def bound_port(self) -> int:
        if self._transport is None:
            return 0
        return self._transport.get_extra_info("sockname")[1]

    async def open(self) -> None:
        loop = asyncio.get_running_loop()
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM, socket.IPPROTO_UDP)
        try:
            sock.setblocking(False)
            sock.bind((self._bind_host, self._port))
        except OSError as e:
            sock.close()
            raise DiscoveryBindError(
                f"err starting up udp listener on {self._bind_host}:{self._port}: {e}"
            ) from e

        self._received = loop.create_future()
        try:
            self._transport, _ = await loop.create_datagram_endpoint(
                lambda: DiscoveryProtocol(self._received),
                sock=sock,
            )
        except OSError as e:
            sock.close()
            raise DiscoveryBindError(f"err starting up udp listener: {e}") from e
        logger.info(f"Waiting for an announcement on UDP port {self.bound_port}")

    async def receive(self, timeout: float | None = None) -> Announcement:
        """Wait for exactly one datagram and parse it."""
        if self._received is None:
            raise DiscoveryReadError("discovery endpoint is not open")
        try:
            data = await asyncio.wait_for(self._received, timeout)
        except asyncio.TimeoutError as e:
            raise DiscoveryReadError(f"no announcement within {timeout}s") from e
        except OSError as e:
            raise DiscoveryReadError(f"err reading from udp: {e}") from e

        announcement = Announcement.from_datagram(data, host=self._peer_host)
        logger.info(f"Sender announced transfer port {announcement.port}")
        return announcement

    def close(self) -> None:
        if self._received and not self._received.done():
            self._received.cancel()
        if self._transport:
            self._transport.close()
            self._transport = None

    async def __aenter__(self) -> "DiscoveryListener":
        await self.open()
        return self

    async def __aexit__(self, *exc_info) -> None:
        self.close()


async def discover(config: ReceiverConfig) -> str:
    """Block until a sender announces itself; return its "host:port"."""
    async with DiscoveryListener(
        config.bind_host, config.discovery_port, config.peer_host
    ) as listener:
        announcement = await listener.receive(config.discovery_timeout)
    return announcement.address
