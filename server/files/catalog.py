"""
Download catalog.

The operator picks files on the desktop; they are appended here and served
by name from the download endpoints.
"""

import os
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from common.constants import SIZE_UNIT


@dataclass(frozen=True)
class DownloadFile:
    """A file offered for download."""
    display_name: str
    absolute_path: str
    size_kb: int

    @classmethod
    def from_path(cls, path) -> 'DownloadFile':
        """Stat a selected path and build its catalog entry."""
        abs_path = Path(path).resolve()
        if not abs_path.exists():
            raise FileNotFoundError(f"File not found: {path}")
        if abs_path.is_dir():
            raise IsADirectoryError(f"Please select a file, not a directory: {path}")

        size = abs_path.stat().st_size
        size_kb = -(-size // SIZE_UNIT)  # round up
        return cls(abs_path.name, str(abs_path), size_kb)


class DownloadCatalog:
    """Append-only list of DownloadFile entries."""

    def __init__(self, files=None):
        self._files: List[DownloadFile] = list(files or [])
        self._lock = threading.Lock()

    def add(self, file: DownloadFile):
        """Append a file to the catalog."""
        with self._lock:
            self._files.append(file)

    def add_path(self, path) -> DownloadFile:
        """Stat a path and append it."""
        file = DownloadFile.from_path(path)
        self.add(file)
        return file

    def list(self) -> List[DownloadFile]:
        """Snapshot of the catalog in insertion order."""
        with self._lock:
            return list(self._files)

    def find(self, display_name: str) -> Optional[DownloadFile]:
        """Exact, case-sensitive lookup by display name."""
        with self._lock:
            for file in self._files:
                if file.display_name == display_name:
                    return file
        return None

    def describe(self) -> str:
        """Numbered summary for the operator."""
        files = self.list()
        if not files:
            return "No files selected"
        return os.linesep.join(
            f"{i}. {f.display_name} ({f.size_kb} KB)" for i, f in enumerate(files, start=1)
        )

    def __len__(self) -> int:
        with self._lock:
            return len(self._files)

    def __bool__(self) -> bool:
        return len(self) > 0
