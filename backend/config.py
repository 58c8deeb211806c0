"""Receiver configuration: defaults plus the validated settings model."""

from pydantic import BaseModel, Field, field_validator

# --- Networking ---
DISCOVERY_BIND_HOST = "0.0.0.0"  # all interfaces
DISCOVERY_PORT = 41234  # UDP
DISCOVERY_BUFFER_SIZE = 1024
PEER_HOST = "localhost"

# --- Transfer ---
CHUNK_SIZE = 131072  # 128 KB
NAME_LENGTH_SIZE = 4  # u32, little-endian

# --- Storage ---
DEFAULT_SAVE_DIR = "."


class ReceiverConfig(BaseModel):
    """Construction-time parameters for one receiver run."""
    chunk_size: int = Field(default=CHUNK_SIZE, gt=0)
    discovery_port: int = Field(default=DISCOVERY_PORT, ge=0, le=65535)
    bind_host: str = DISCOVERY_BIND_HOST
    peer_host: str = PEER_HOST
    save_dir: str = DEFAULT_SAVE_DIR
    discovery_timeout: float | None = None
    read_timeout: float | None = None
    unique_names: bool = False

    @field_validator("discovery_timeout", "read_timeout")
    @classmethod
    def _positive_timeout(cls, value: float | None) -> float | None:
        if value is not None and value <= 0:
            raise ValueError("timeout must be positive")
        return value
