"""Byte-counting stream adapter used while an upload is copied to disk."""

from typing import Callable


class ProgressTrackingStream:
    """
    Wrap a readable binary stream and report every chunk read.

    `on_read(n)` runs after each successful read of n > 0 bytes and before the
    data is handed back, so the reported count lags the bytes on disk by at
    most one copy buffer.
    """

    def __init__(self, stream, on_read: Callable[[int], None]):
        self._stream = stream
        self._on_read = on_read

    def read(self, size: int = -1) -> bytes:
        data = self._stream.read(size)
        if data:
            self._on_read(len(data))
        return data

    def readinto(self, buffer) -> int:
        n = self._stream.readinto(buffer)
        if n:
            self._on_read(n)
        return n

    def readable(self) -> bool:
        return True

    def close(self):
        self._stream.close()

    @property
    def closed(self) -> bool:
        return self._stream.closed
