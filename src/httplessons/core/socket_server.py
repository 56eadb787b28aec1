"""
=============================================================================
TCP SOCKET SERVER
=============================================================================

The bottom layer: a listening TCP socket and an accept loop.

    ┌─────────────────────────────────────────────────────────────────────┐
    │   create_server()  = socket() + SO_REUSEADDR + bind() + listen()      │
    │                                          │                          │
    │                                          ▼                          │
    │                         ┌──── while running: ────┐                  │
    │                         │  accept()  (1s timeout) │                  │
    │                         │  Connection(...)        │                  │
    │                         │  handler(conn)          │ ◄── runs to     │
    │                         └─────────────────────────┘     completion  │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
ONE THREAD, ONE CONNECTION AT A TIME
=============================================================================

The handler runs inline in the accept loop. While one request is being
answered, the next clients wait in the kernel's listen backlog. That's
the whole concurrency model of the lesson servers: no threads, no locks,
no interleaving between requests. A slow handler delays everyone, which
is exactly what the lessons want to make visible.

The 1 second accept timeout lets the loop notice shutdown() without
needing a wake-up connection.

=============================================================================
"""

import logging
import signal
import socket
import threading
from typing import Callable, Optional

from ..config import ServerConfig
from .connection import Connection


logger = logging.getLogger(__name__)

ConnectionHandler = Callable[[Connection], None]

ACCEPT_POLL_SECONDS = 1.0
_SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class SocketServer:
    """
    Listening socket plus the accept loop.

        def handle_connection(conn: Connection):
            ...

        server = SocketServer(config)
        server.start(handle_connection)  # blocks until shutdown()

    Started from the main thread, SIGINT/SIGTERM call shutdown(). Started
    from any other thread (as the tests do) signals are left alone.
    """

    def __init__(self, config: ServerConfig):
        self.config = config
        self._socket: Optional[socket.socket] = None
        self._running = False
        self._ready = threading.Event()
        self._previous_handlers: dict = {}

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def address(self) -> tuple[str, int]:
        """The bound (IP, port), or the configured one before start()."""
        if self._socket is None:
            return (self.config.host, self.config.port)
        return self._socket.getsockname()[:2]

    def _listen(self) -> socket.socket:
        """
        socket.create_server() sets SO_REUSEADDR, so a restart does not
        fail while old connections sit in TIME_WAIT.
        """
        address = (self.config.host, self.config.port)
        try:
            sock = socket.create_server(address, backlog=self.config.backlog)
        except OSError as e:
            logger.error(f"Failed to bind to {address[0]}:{address[1]}: {e}")
            raise
        sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
        sock.settimeout(ACCEPT_POLL_SECONDS)
        return sock

    def _install_signal_handlers(self):
        if threading.current_thread() is not threading.main_thread():
            return

        def on_signal(signum, frame):
            logger.info(f"Received {signal.Signals(signum).name}, shutting down")
            self.shutdown()

        for sig in _SHUTDOWN_SIGNALS:
            self._previous_handlers[sig] = signal.signal(sig, on_signal)

    def _restore_signal_handlers(self):
        while self._previous_handlers:
            sig, handler = self._previous_handlers.popitem()
            signal.signal(sig, handler)

    def start(self, handler: ConnectionHandler):
        """
        Bind, listen and serve until shutdown(). BLOCKS.

        Args:
            handler: Called with each accepted Connection, one at a time.
                     It owns the connection and must close it.
        """
        self._socket = self._listen()
        self._running = True
        self._install_signal_handlers()

        host, port = self.address
        logger.info(f"Server listening on {host}:{port}")
        self._ready.set()

        try:
            while self._running:
                conn = self._accept()
                if conn is not None:
                    handler(conn)
        finally:
            self._close()

    def _accept(self) -> Optional[Connection]:
        """Next client, or None when the poll timed out or the socket closed."""
        try:
            client, address = self._socket.accept()
        except socket.timeout:
            return None
        except OSError as e:
            if self._running:
                logger.error(f"Accept error: {e}")
            self._running = False
            return None

        logger.debug(f"Accepted connection from {address[0]}:{address[1]}")
        return Connection(
            socket=client,
            address=address,
            buffer_size=self.config.buffer_size,
            timeout=self.config.timeout,
            max_request_size=self.config.max_request_size,
        )

    def shutdown(self):
        """Stop the accept loop. Idempotent, safe from any thread."""
        if self._running:
            logger.info("Shutting down socket server...")
        self._running = False

    def _close(self):
        self._restore_signal_handlers()
        if self._socket is not None:
            self._socket.close()
            self._socket = None
        self._ready.clear()
        logger.info("Socket server stopped")

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """Block until the socket is listening. False on timeout."""
        return self._ready.wait(timeout)
