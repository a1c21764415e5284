"""
Server configuration module.

This module handles server-side configuration settings.
"""

import os

from common.constants import (
    DEFAULT_SERVER_HOST, DEFAULT_PORT, MAX_PORT, UPLOAD_DIR, LOG_DIR,
    COPY_CHUNK_SIZE, MAX_UPLOAD_SIZE
)
from server.errors import InvalidPortError


def parse_port(text) -> int:
    """Parse an operator-supplied port. Port 0 asks the OS for a free port."""
    try:
        port = int(str(text).strip())
    except (TypeError, ValueError):
        raise InvalidPortError(f"Invalid port number: {text!r}") from None
    if port < 0 or port > MAX_PORT:
        raise InvalidPortError(f"Port out of range (0-{MAX_PORT}): {port}")
    return port


class ServerConfig:
    """Server configuration class."""

    def __init__(self, host: str = DEFAULT_SERVER_HOST, port: int = DEFAULT_PORT, upload_dir: str = UPLOAD_DIR):
        self.host = host
        self.port = port
        self.upload_dir = os.path.abspath(upload_dir)

        # Logging configuration
        self.logs_dir = LOG_DIR

        # File transfer settings
        self.chunk_size = COPY_CHUNK_SIZE
        self.max_upload_size = MAX_UPLOAD_SIZE

    def get_connection_info(self):
        """Get connection information."""
        return {
            'host': self.host,
            'port': self.port
        }

    def get_file_settings(self):
        """Get file transfer settings."""
        return {
            'upload_dir': self.upload_dir,
            'chunk_size': self.chunk_size,
            'max_upload_size': self.max_upload_size
        }

    def get_log_settings(self):
        """Get logging settings."""
        return {
            'logs_dir': self.logs_dir
        }
