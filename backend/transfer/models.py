"""Pydantic models for a receive session."""

from enum import Enum

from pydantic import BaseModel


class TransferState(str, Enum):
    """States of a receive session, in protocol order."""
    CONNECTING = "connecting"
    AWAITING_NAME_LENGTH = "awaiting_name_length"
    AWAITING_NAME = "awaiting_name"
    STREAMING_CONTENT = "streaming_content"
    CLOSED = "closed"
    FAILED = "failed"


class TransferInfo(BaseModel):
    """State of a single receive session, kept for logging and reporting."""
    peer: str
    file_name: str = ""
    dest_path: str = ""
    transferred_bytes: int = 0
    state: TransferState = TransferState.CONNECTING
    started_at: float = 0.0
    finished_at: float | None = None
    error_message: str | None = None

    @property
    def duration(self) -> float:
        if self.finished_at is None:
            return 0.0
        return max(0.0, self.finished_at - self.started_at)
