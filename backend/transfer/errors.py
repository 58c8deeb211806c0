"""Errors raised while discovering a sender and receiving its file."""


class ReceiverError(Exception):
    """Base class for every failure surfaced by the receiver."""


# --- Discovery ---

class DiscoveryError(ReceiverError):
    pass


class DiscoveryBindError(DiscoveryError):
    """Raised when the discovery endpoint cannot be bound."""


class DiscoveryReadError(DiscoveryError):
    """Raised when no announcement could be read from the endpoint."""


class MalformedAnnouncement(DiscoveryError):
    """Raised when an announcement does not end in a usable port number."""


# --- Framing ---

class FrameError(ReceiverError):
    pass


class MalformedFrame(FrameError):
    pass


class TruncatedRead(FrameError):
    """Raised when the stream ends before the requested byte count."""

    def __init__(self, expected: int, received: int) -> None:
        super().__init__(
            f"stream closed after {received} of {expected} bytes"
        )
        self.expected = expected
        self.received = received


# --- Transfer session ---

class TransferError(ReceiverError):
    pass


class ConnectError(TransferError):
    pass


class NameLengthReadError(TransferError):
    pass


class NameReadError(TransferError):
    pass


class ContentReadError(TransferError):
    pass


class ContentWriteError(TransferError):
    pass


class CloseError(TransferError):
    pass
