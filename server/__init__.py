"""
Server package for the QR LAN file transfer tool.

This package contains the embedded HTTP transfer service:
- Upload session tracking and progress reporting
- Download catalog management
- HTTP route handlers
- Listener lifecycle (start/stop/restart)
- Configuration and utilities
"""
