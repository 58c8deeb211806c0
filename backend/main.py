"""
PeerDrop receiver: command-line entry point.

Waits for a sender's announcement, connects to it and saves the file it
streams into the save directory.
"""

import argparse
import asyncio
import logging

from pydantic import ValidationError

from config import (
    CHUNK_SIZE,
    DEFAULT_SAVE_DIR,
    DISCOVERY_BIND_HOST,
    DISCOVERY_PORT,
    PEER_HOST,
    ReceiverConfig,
)
from transfer.errors import ReceiverError
from transfer.manager import TransferManager

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="peerdrop-receive",
        description="Discover a sender over UDP and receive one file over TCP.",
    )
    p.add_argument("--chunk-size", type=int, default=CHUNK_SIZE)
    p.add_argument("--discovery-port", type=int, default=DISCOVERY_PORT)
    p.add_argument("--bind-host", default=DISCOVERY_BIND_HOST)
    p.add_argument("--peer-host", default=PEER_HOST)
    p.add_argument("--save-dir", default=DEFAULT_SAVE_DIR)
    p.add_argument("--discovery-timeout", type=float, default=None,
                   help="seconds to wait for an announcement (default: forever)")
    p.add_argument("--read-timeout", type=float, default=None,
                   help="seconds to wait for each content read (default: forever)")
    p.add_argument("--unique-names", action="store_true",
                   help="never overwrite an existing file with the same name")
    p.add_argument("-v", "--verbose", action="store_true")
    return p


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        config = ReceiverConfig(
            chunk_size=args.chunk_size,
            discovery_port=args.discovery_port,
            bind_host=args.bind_host,
            peer_host=args.peer_host,
            save_dir=args.save_dir,
            discovery_timeout=args.discovery_timeout,
            read_timeout=args.read_timeout,
            unique_names=args.unique_names,
        )
    except ValidationError as e:
        parser.error(str(e))

    try:
        asyncio.run(TransferManager(config).handle())
    except ReceiverError as e:
        logger.error(f"Receive failed: {e}")
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 130
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
