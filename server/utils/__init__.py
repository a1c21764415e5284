"""Configuration and logging utilities for the transfer server."""
