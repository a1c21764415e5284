"""
Server logging module.

This module handles server-side logging functionality.
"""

import logging
from datetime import datetime
from pathlib import Path

from common.constants import LOG_DIR, TRANSFER_LOG_FILE


class ServerLogger:
    """Server logging class."""

    def __init__(self, logs_dir: str = LOG_DIR, log_level: int = logging.INFO):
        self.logs_dir = Path(logs_dir)

        # Set up main logger
        self.logger = logging.getLogger('qr_transfer_server')
        self.logger.setLevel(log_level)

        # Remove existing handlers
        for handler in self.logger.handlers[:]:
            self.logger.removeHandler(handler)

        # Create console handler
        console_handler = logging.StreamHandler()
        console_handler.setLevel(log_level)

        # Create formatter
        formatter = logging.Formatter(
            '%(asctime)s [%(levelname)s] %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        console_handler.setFormatter(formatter)

        # Add handler to logger
        self.logger.addHandler(console_handler)

        self.transfer_log_path = self.logs_dir / TRANSFER_LOG_FILE

    def info(self, message: str):
        """Log info message."""
        self.logger.info(message)

    def error(self, message: str):
        """Log error message."""
        self.logger.error(message)

    def warning(self, message: str):
        """Log warning message."""
        self.logger.warning(message)

    def debug(self, message: str):
        """Log debug message."""
        self.logger.debug(message)

    def log_service_start(self, url: str, port: int):
        """Log listener start."""
        self.info(f"Service started on port {port}: {url}")

    def log_service_stop(self, port: int):
        """Log listener stop."""
        self.info(f"Service on port {port} stopped")

    def log_upload(self, filename: str, size: int, upload_id: str, client: str):
        """Log file upload."""
        self.info(f"✓ FILE UPLOAD SUCCESS: '{filename}' ({size} bytes)")
        self.info(f"  Client: {client}")
        self.info(f"  Upload ID: {upload_id}")
        self._write_to_file(self.transfer_log_path, f"{datetime.now().isoformat()} | UPLOAD | {filename} | CLIENT: {client} | SIZE: {size} bytes | ID: {upload_id}")

    def log_download(self, filename: str, size: int, client: str):
        """Log file download."""
        self.info(f"✓ FILE DOWNLOAD: '{filename}' ({size} bytes) to {client}")
        self._write_to_file(self.transfer_log_path, f"{datetime.now().isoformat()} | DOWNLOAD | {filename} | CLIENT: {client} | SIZE: {size} bytes")

    def log_error(self, operation: str, error: Exception):
        """Log error with operation context."""
        self.error(f"Error in {operation}: {error}")

    def _write_to_file(self, file_path: Path, content: str):
        """Write content to log file."""
        try:
            self.logs_dir.mkdir(parents=True, exist_ok=True)
            with open(file_path, 'a', encoding='utf-8') as f:
                f.write(content + '\n')
        except OSError as e:
            self.error(f"Failed to write to log file {file_path}: {e}")


# Global logger instance
logger = ServerLogger()
