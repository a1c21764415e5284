"""
Shared constants for the QR LAN file transfer tool.

This module contains all constants used across the server and desktop components.
"""

# Network Configuration
DEFAULT_SERVER_HOST = '0.0.0.0'
DEFAULT_PORT = 1082
MAX_PORT = 65535
LOOPBACK_LABEL = 'localhost'

# Buffer Sizes
COPY_CHUNK_SIZE = 64 * 1024
MAX_UPLOAD_SIZE = 100 * 1024 * 1024  # 100 MiB multipart body limit

# File Transfer
UPLOAD_DIR = '.'
SIZE_UNIT = 1024  # catalog sizes are reported in KB

# Logging
LOG_DIR = 'logs'
TRANSFER_LOG_FILE = 'file_transfers.log'

# QR Code
QR_IMAGE_SIZE = 256


class Routes:
    INDEX = '/'
    DOWNLOAD_PAGE = '/download-page'
    UPLOAD = '/upload'
    PROGRESS = '/progress'
    DOWNLOAD = '/download'


class QueryParams:
    UPLOAD_ID = 'uploadId'
    FILE = 'file'
    FORM_FILE_FIELD = 'file'
