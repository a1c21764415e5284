"""
File transfer module for server-side file operations.

Handles:
- Upload session tracking
- Download catalog management
- Progress accounting while upload bodies are written
"""

from server.files.catalog import DownloadCatalog, DownloadFile
from server.files.progress_stream import ProgressTrackingStream
from server.files.sessions import UploadProgress, UploadSessionRegistry

__all__ = [
    "DownloadCatalog", "DownloadFile", "ProgressTrackingStream",
    "UploadProgress", "UploadSessionRegistry",
]
