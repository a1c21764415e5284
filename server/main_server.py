#!/usr/bin/env python3
"""
QR LAN File Transfer Server

Owns the HTTP listener lifecycle. Routes are wired once when the server object
is built; start/stop cycles only recreate the listening socket.
"""

import socket
import threading
import time
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

from werkzeug.serving import get_sockaddr, make_server, select_address_family

from server.errors import ServiceStartError
from server.files.catalog import DownloadCatalog
from server.files.sessions import UploadSessionRegistry
from server.network import build_session_url, get_local_ip
from server.utils.config import ServerConfig
from server.utils.logger import logger
from server.web.routes import create_app

LISTEN_BACKLOG = 128


class ServerState(Enum):
    STOPPED = 'stopped'
    STARTING = 'starting'
    RUNNING = 'running'


class TransferServer:
    """Embedded HTTP file-transfer service."""

    def __init__(self, config: ServerConfig = None, registry: UploadSessionRegistry = None,
                 catalog: DownloadCatalog = None, local_ip_provider: Callable[[], str] = get_local_ip):
        self.config = config or ServerConfig()
        self.registry = registry if registry is not None else UploadSessionRegistry()
        self.catalog = catalog if catalog is not None else DownloadCatalog()
        self.local_ip_provider = local_ip_provider
        Path(self.config.upload_dir).mkdir(parents=True, exist_ok=True)
        self.app = create_app(self.registry, self.catalog, self.config)

        self._lock = threading.Lock()  # serializes start/stop transitions
        self._state = ServerState.STOPPED
        self._httpd = None
        self._serve_thread: Optional[threading.Thread] = None
        self._port: Optional[int] = None
        self._session_url: Optional[str] = None

    @property
    def state(self) -> ServerState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state is ServerState.RUNNING

    @property
    def port(self) -> Optional[int]:
        return self._port

    @property
    def session_url(self) -> Optional[str]:
        """URL computed at the last start; not refreshed if the catalog changes later."""
        return self._session_url

    def start(self, port: int) -> int:
        """Bind and serve on port, closing any running listener first. Returns the bound port."""
        with self._lock:
            if self._state is ServerState.RUNNING:
                logger.info(f"Restarting service (was on port {self._port})")
                self._close_listener()

            self._state = ServerState.STARTING
            try:
                sock = self._bind_socket(port)
            except (OSError, OverflowError) as e:
                self._state = ServerState.STOPPED
                logger.log_error(f"binding port {port}", e)
                raise ServiceStartError(port, e) from e

            # werkzeug takes a duplicate of the descriptor
            try:
                with sock:
                    httpd = make_server(self.config.host, port, self.app, threaded=True, fd=sock.fileno())
            except Exception as e:
                self._state = ServerState.STOPPED
                logger.log_error(f"starting server on port {port}", e)
                raise ServiceStartError(port, e) from e

            self._httpd = httpd
            self._port = httpd.socket.getsockname()[1]
            self._serve_thread = threading.Thread(
                target=httpd.serve_forever,
                name=f"transfer-server-{self._port}",
                daemon=True
            )
            self._serve_thread.start()
            self._state = ServerState.RUNNING

            self._session_url = build_session_url(self.local_ip_provider(), self._port, self.catalog)
            logger.log_service_start(self._session_url, self._port)
            return self._port

    def stop(self) -> bool:
        """Stop the listener. Returns False when nothing was running."""
        with self._lock:
            if self._state is not ServerState.RUNNING:
                logger.info("No running service to stop")
                return False
            self._close_listener()
            return True

    def _bind_socket(self, port: int) -> socket.socket:
        """Bind the listening socket; werkzeug exits the process on its own bind errors."""
        family = select_address_family(self.config.host, port)
        sock = socket.socket(family, socket.SOCK_STREAM)
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind(get_sockaddr(self.config.host, port, family))
            sock.listen(LISTEN_BACKLOG)
        except BaseException:
            sock.close()
            raise
        return sock

    def _close_listener(self):
        """Gracefully close the current listener; failures are logged, not raised."""
        httpd, thread, port = self._httpd, self._serve_thread, self._port
        self._httpd = None
        self._serve_thread = None
        self._state = ServerState.STOPPED

        try:
            httpd.shutdown()
            httpd.server_close()
        except Exception as e:
            logger.log_error(f"closing listener on port {port}", e)
        if thread is not None:
            thread.join(timeout=5)
        logger.log_service_stop(port)

    def serve_forever(self, port: int):
        """Start, block until interrupted, then stop."""
        self.start(port)
        try:
            while self.is_running:
                time.sleep(0.5)
        except KeyboardInterrupt:
            logger.info("Server shutting down...")
        finally:
            self.stop()
