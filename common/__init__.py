"""
Common package for the QR LAN file transfer tool.

Holds constants shared by the transfer server and the desktop window.
"""
