#!/usr/bin/env python3
"""
Transfer Window - PyQt6 operator window

Features:
- Port entry
- File selection feeding the download catalog
- Start/stop of the embedded transfer server
- QR code dialog with the session URL
"""

from PyQt6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QLabel, QPushButton,
    QLineEdit, QFileDialog, QMessageBox, QDialog, QFrame
)
from PyQt6.QtCore import Qt
from PyQt6.QtGui import QIntValidator, QPixmap

from common.constants import DEFAULT_PORT, MAX_PORT, QR_IMAGE_SIZE
from desktop.qr import qr_png_bytes
from server.errors import InvalidPortError, ServiceStartError
from server.main_server import TransferServer
from server.utils.config import parse_port
from server.utils.logger import logger


class QRCodeDialog(QDialog):
    """Shows the session URL and its QR code."""

    def __init__(self, url: str, has_downloads: bool, parent=None):
        super().__init__(parent)
        if has_downloads:
            self.setWindowTitle("File download service started")
            tip = f"Download list: {url}\nScan to open the download page"
        else:
            self.setWindowTitle("File upload service started")
            tip = f"Upload page: {url}\nScan to open the upload page"

        layout = QVBoxLayout(self)

        tip_label = QLabel(tip)
        tip_label.setTextInteractionFlags(Qt.TextInteractionFlag.TextSelectableByMouse)
        layout.addWidget(tip_label)

        qr_label = QLabel()
        qr_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        pixmap = QPixmap()
        if pixmap.loadFromData(qr_png_bytes(url)):
            qr_label.setPixmap(pixmap)
            qr_label.setMinimumSize(QR_IMAGE_SIZE, QR_IMAGE_SIZE)
        else:
            qr_label.setText("Failed to render QR code")
        layout.addWidget(qr_label)

        close_btn = QPushButton("Close")
        close_btn.clicked.connect(self.accept)
        layout.addWidget(close_btn)


class TransferWindow(QMainWindow):
    """Main operator window."""

    def __init__(self, server: TransferServer, default_port: int = DEFAULT_PORT):
        super().__init__()
        self.server = server

        self.setWindowTitle("Cross-platform File Transfer")
        self.resize(600, 500)

        central = QWidget()
        layout = QVBoxLayout(central)

        layout.addWidget(QLabel("Port:"))
        self.port_entry = QLineEdit(str(default_port))
        self.port_entry.setPlaceholderText(f"Port number (e.g. {DEFAULT_PORT})")
        self.port_entry.setValidator(QIntValidator(0, MAX_PORT, self))
        layout.addWidget(self.port_entry)

        layout.addWidget(self._separator())

        layout.addWidget(QLabel("Files to offer for download:"))
        select_btn = QPushButton("Select files")
        select_btn.clicked.connect(self.select_files)
        layout.addWidget(select_btn)

        self.file_label = QLabel(self.server.catalog.describe())
        self.file_label.setWordWrap(True)
        layout.addWidget(self.file_label)

        layout.addWidget(self._separator())
        layout.addStretch()

        buttons = QHBoxLayout()
        start_btn = QPushButton("Start service")
        start_btn.clicked.connect(self.start_service)
        stop_btn = QPushButton("Stop service")
        stop_btn.clicked.connect(self.stop_service)
        buttons.addWidget(start_btn)
        buttons.addWidget(stop_btn)
        layout.addLayout(buttons)

        self.setCentralWidget(central)

    @staticmethod
    def _separator() -> QFrame:
        line = QFrame()
        line.setFrameShape(QFrame.Shape.HLine)
        return line

    def select_files(self):
        """Add picked files to the download catalog."""
        paths, _ = QFileDialog.getOpenFileNames(self, "Select files to share")
        for path in paths:
            try:
                entry = self.server.catalog.add_path(path)
            except OSError as e:
                QMessageBox.warning(self, "Error", f"Cannot add file: {e}")
                continue
            logger.info(f"Added {entry.display_name} ({entry.size_kb} KB) to catalog")

        self.file_label.setText(f"Selected files:\n{self.server.catalog.describe()}")

    def start_service(self):
        """Start (or restart) the server and show the QR code."""
        try:
            port = parse_port(self.port_entry.text())
        except InvalidPortError as e:
            QMessageBox.warning(self, "Error", f"Invalid port: {e}")
            return

        try:
            self.server.start(port)
        except ServiceStartError as e:
            QMessageBox.critical(self, "Error", str(e))
            return

        dialog = QRCodeDialog(self.server.session_url, len(self.server.catalog) > 0, self)
        dialog.exec()

    def stop_service(self):
        if self.server.stop():
            QMessageBox.information(self, "Success", "Service stopped")
        else:
            QMessageBox.information(self, "Info", "No service is running")

    def closeEvent(self, event):
        self.server.stop()
        super().closeEvent(event)
