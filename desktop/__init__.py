"""
Desktop package for the QR LAN file transfer tool.

This package contains the operator-facing side:
- Main window with port entry, file selection and start/stop controls
- QR code rendering of the session URL
"""
