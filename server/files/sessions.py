"""
Upload session registry.

Tracks progress of in-flight uploads keyed by the client-generated upload id.
Every request runs on its own thread, so all access to the backing dict goes
through a single lock.
"""

import threading
from typing import Dict, Optional, Tuple

from server.errors import SessionInUseError


class UploadProgress:
    """Byte counters for one upload."""

    def __init__(self, total_size: int):
        self.total_size = total_size
        self.uploaded = 0


class UploadSessionRegistry:
    """Thread-safe map of upload id -> UploadProgress."""

    def __init__(self):
        self._sessions: Dict[str, UploadProgress] = {}
        self._lock = threading.Lock()

    def begin(self, session_id: str, total_size: int):
        """Register a new upload. Raises SessionInUseError if the id is taken."""
        if total_size < 0:
            raise ValueError(f"total_size must be non-negative, got {total_size}")
        with self._lock:
            if session_id in self._sessions:
                raise SessionInUseError(session_id)
            self._sessions[session_id] = UploadProgress(total_size)

    def advance(self, session_id: str, delta: int):
        """Add delta bytes to the session's counter, never past its total."""
        if delta < 0:
            raise ValueError(f"delta must be non-negative, got {delta}")
        with self._lock:
            progress = self._sessions.get(session_id)
            if progress is None:
                return
            progress.uploaded = min(progress.total_size, progress.uploaded + delta)

    def snapshot(self, session_id: str) -> Optional[Tuple[int, int]]:
        """Return (total, uploaded), or None for an unknown id."""
        with self._lock:
            progress = self._sessions.get(session_id)
            if progress is None:
                return None
            return progress.total_size, progress.uploaded

    def end(self, session_id: str):
        """Drop the session. Ending an unknown id is a no-op."""
        with self._lock:
            self._sessions.pop(session_id, None)

    def __contains__(self, session_id) -> bool:
        with self._lock:
            return session_id in self._sessions

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
