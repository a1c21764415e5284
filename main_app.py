#!/usr/bin/env python3
"""
QR LAN File Transfer - Desktop Application Launcher

Opens the operator window: pick files to offer, choose a port, start the
service and scan the QR code from a phone on the same network.
"""

import argparse
import sys

from PyQt6.QtWidgets import QApplication

from common.constants import DEFAULT_PORT, UPLOAD_DIR
from desktop.ui.transfer_window import TransferWindow
from server.main_server import TransferServer
from server.utils.config import ServerConfig


def main():
    """Main entry point for the application."""
    parser = argparse.ArgumentParser(
        description='QR LAN File Transfer',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Start with the default port
  python main_app.py

  # Pre-fill another port and save uploads elsewhere
  python main_app.py --port 8080 --upload-dir ~/Downloads
        """
    )

    parser.add_argument(
        '--port',
        type=int,
        default=DEFAULT_PORT,
        help=f'Initial port shown in the window (default: {DEFAULT_PORT})'
    )

    parser.add_argument(
        '--upload-dir',
        type=str,
        default=UPLOAD_DIR,
        help='Directory for uploaded files (default: current directory)'
    )

    args = parser.parse_args()

    app = QApplication(sys.argv)
    app.setApplicationName("QR LAN File Transfer")

    server = TransferServer(config=ServerConfig(upload_dir=args.upload_dir))
    window = TransferWindow(server, default_port=args.port)
    window.show()

    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
