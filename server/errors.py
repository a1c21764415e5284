"""
Transfer server exceptions.

Client-input problems derive from ValueError so callers can treat them the
same way as any other bad value; lifecycle problems are reported to the
operator and never crash the process.
"""


class TransferError(Exception):
    """Base class for transfer server errors."""


class SessionInUseError(TransferError):
    """An upload session id is already registered."""

    def __init__(self, session_id: str):
        super().__init__(f"Upload id already in use: {session_id}")
        self.session_id = session_id


class ServiceStartError(TransferError):
    """The HTTP listener could not be bound or started."""

    def __init__(self, port: int, reason: Exception):
        super().__init__(f"Failed to start service on port {port}: {reason}")
        self.port = port
        self.reason = reason


class InvalidPortError(TransferError, ValueError):
    """A port string is not a number in the valid range."""
