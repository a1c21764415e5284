#!/usr/bin/env python3
"""
QR LAN File Transfer - Headless Server Entry Point

Serves the upload page and, optionally, a list of files for download without
the desktop window. The session URL is logged so it can be opened by hand or
turned into a QR code.

Usage:
    python main_server.py

Optional arguments:
    --host HOST           Bind address (default: 0.0.0.0)
    --port PORT           HTTP port (default: 1082)
    --upload-dir DIR      Directory for uploaded files (default: current directory)
    --share FILE ...      Files to offer on the download page
"""

import argparse
import sys

from common.constants import DEFAULT_SERVER_HOST, DEFAULT_PORT, UPLOAD_DIR
from server.errors import ServiceStartError, InvalidPortError
from server.files.catalog import DownloadCatalog
from server.main_server import TransferServer
from server.utils.config import ServerConfig, parse_port
from server.utils.logger import logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='QR LAN File Transfer Server')
    parser.add_argument('--host', type=str, default=DEFAULT_SERVER_HOST,
                        help=f'Host to bind to (default: {DEFAULT_SERVER_HOST})')
    parser.add_argument('--port', type=str, default=str(DEFAULT_PORT),
                        help=f'HTTP port (default: {DEFAULT_PORT})')
    parser.add_argument('--upload-dir', type=str, default=UPLOAD_DIR,
                        help='Directory for uploaded files (default: current directory)')
    parser.add_argument('--share', nargs='*', default=[], metavar='FILE',
                        help='Files to offer for download')
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    try:
        port = parse_port(args.port)
    except InvalidPortError as e:
        logger.error(str(e))
        return 2

    catalog = DownloadCatalog()
    for path in args.share:
        try:
            entry = catalog.add_path(path)
        except OSError as e:
            logger.error(f"Cannot share {path}: {e}")
            return 2
        logger.info(f"Sharing {entry.display_name} ({entry.size_kb} KB)")

    config = ServerConfig(host=args.host, port=port, upload_dir=args.upload_dir)
    server = TransferServer(config=config, catalog=catalog)
    try:
        server.serve_forever(port)
    except ServiceStartError as e:
        logger.error(str(e))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
