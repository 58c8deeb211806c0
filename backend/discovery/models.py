"""Pydantic models for sender discovery."""

from pydantic import BaseModel, Field, ValidationError

from config import PEER_HOST
from transfer.errors import MalformedAnnouncement


class Announcement(BaseModel):
    """A sender's announcement: the port it accepts the transfer on."""
    port: int = Field(ge=1, le=65535)
    host: str = PEER_HOST

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"

    @classmethod
    def parse(cls, text: str, host: str = PEER_HOST) -> "Announcement":
        """
        Parse announcement text of the form "<prefix...> <port>".

        Only the final whitespace-delimited token is used.
        """
        tokens = text.split()
        if not tokens:
            raise MalformedAnnouncement("empty announcement")
        port = tokens[-1]
        if not (port.isascii() and port.isdigit()):
            raise MalformedAnnouncement(f"announcement does not end in a port: {port!r}")
        try:
            return cls(port=int(port), host=host)
        except ValidationError as e:
            raise MalformedAnnouncement(f"announced port {port} out of range") from e

    @classmethod
    def from_datagram(cls, data: bytes, host: str = PEER_HOST) -> "Announcement":
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedAnnouncement(f"announcement is not UTF-8: {e}") from e
        return cls.parse(text, host=host)
