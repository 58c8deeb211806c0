"""
Transfer Manager: drives discovery and the receive session(s).

Discovery currently yields exactly one sender, but peers are handled as a
sequence so each one is processed (and can fail) independently.
"""

import logging
import os

from config import ReceiverConfig
from discovery.service import discover
from transfer.errors import ConnectError, ContentWriteError
from transfer.models import TransferInfo
from transfer.service import run_session

logger = logging.getLogger(__name__)


class TransferManager:
    """Runs one receiver pass: discover, connect, receive."""

    def __init__(self, config: ReceiverConfig | None = None) -> None:
        self._config = config or ReceiverConfig()
        self._transfers: list[TransferInfo] = []

    @property
    def config(self) -> ReceiverConfig:
        return self._config

    def get_transfers(self) -> list[TransferInfo]:
        """Return the sessions completed so far."""
        return list(self._transfers)

    async def discover_peers(self) -> list[str]:
        return [await discover(self._config)]

    async def handle(self) -> list[TransferInfo]:
        """
        Receive from every discovered peer, in order.

        Unreachable peers are logged and skipped. Discovery failures and
        failures after a connection is made propagate to the caller.
        """
        try:
            os.makedirs(self._config.save_dir, exist_ok=True)
        except OSError as e:
            raise ContentWriteError(f"err preparing save dir: {e}") from e
        peers = await self.discover_peers()

        completed = []
        for peer in peers:
            try:
                info = await run_session(peer, self._config)
            except ConnectError as e:
                logger.warning(f"Skipping peer: {e}")
                continue
            self._transfers.append(info)
            completed.append(info)
            logger.info(
                f"Transfer from {peer} complete: {info.dest_path} "
                f"({info.transferred_bytes} bytes, {info.duration:.2f}s)"
            )

        return completed
