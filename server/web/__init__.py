"""
HTTP layer for the transfer server.

Handles:
- Upload and download pages
- Streamed upload endpoint with progress polling
- Catalog download endpoint
"""

from server.web.routes import RouteHandlers, create_app

__all__ = ["RouteHandlers", "create_app"]
