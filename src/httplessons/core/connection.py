"""
=============================================================================
CLIENT CONNECTION
=============================================================================

Wraps one accepted client socket. The lesson servers handle exactly one
request per connection and always answer with ``Connection: close``:

    ┌─────────────────────────────────────────────────────────────────┐
    │   accept() ──► read_request() ──► handler ──► send_response()   │
    │                                                   │             │
    │                                                close()          │
    └─────────────────────────────────────────────────────────────────┘

No keep-alive keeps the single-threaded model honest: a client that
holds its connection open can't starve the ones queued behind it.

=============================================================================
CONNECTION STATE MACHINE
=============================================================================

    NEW ──► READING ──► PROCESSING ──► WRITING ──► CLOSING ──► CLOSED
     │         │                                     ▲
     └─────────┴─────────────────────────────────────┘
          (client vanished / timeout / error)

=============================================================================
"""

import logging
import re
import socket
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


logger = logging.getLogger(__name__)

HEADER_END = b"\r\n\r\n"
_CONTENT_LENGTH = re.compile(rb"^content-length:[ \t]*(\d+)[ \t]*\r?$", re.IGNORECASE | re.MULTILINE)


class ConnectionState(Enum):
    """Where a connection is in its one-request life."""

    NEW = "new"
    READING = "reading"
    PROCESSING = "processing"
    WRITING = "writing"
    CLOSING = "closing"
    CLOSED = "closed"


def content_length_of(head: bytes) -> int:
    """
    Content-Length from raw header bytes, 0 when absent or malformed.

    Needed before the request can be parsed, so this is a byte-level
    search rather than a real header parse.
    """
    match = _CONTENT_LENGTH.search(head)
    return int(match.group(1)) if match else 0


@dataclass
class Connection:
    """
    One accepted client socket.

    Reads until the header terminator, then exactly ``Content-Length``
    body bytes. A silent client raises TimeoutError after ``timeout``
    seconds so it cannot hold the accept loop forever.
    """

    socket: socket.socket
    address: tuple[str, int]

    id: str = field(default_factory=lambda: uuid.uuid4().hex[:8])
    state: ConnectionState = ConnectionState.NEW
    opened_at: float = field(default_factory=time.monotonic)

    buffer_size: int = 8192
    timeout: Optional[float] = 30.0
    max_request_size: int = 10 * 1024 * 1024

    _buffer: bytearray = field(default_factory=bytearray, repr=False)

    def __post_init__(self):
        self.socket.settimeout(self.timeout)

    def read_request(self) -> Optional[bytes]:
        """
        Read one complete HTTP request.

        Returns:
            The request bytes, or None if the client hung up before
            sending anything.

        Raises:
            TimeoutError: The client stopped sending mid-request.
            ValueError: The request grew past max_request_size.
        """
        self.state = ConnectionState.READING
        try:
            if not self._fill(lambda: HEADER_END in self._buffer):
                return bytes(self._buffer) or None

            body_start = self._buffer.index(HEADER_END) + len(HEADER_END)
            wanted = body_start + content_length_of(bytes(self._buffer[:body_start]))

            # a short body is left for the parser to reject
            self._fill(lambda: len(self._buffer) >= wanted)
        except socket.timeout:
            raise TimeoutError("Request read timeout") from None

        request = bytes(self._buffer[:wanted])
        del self._buffer[:wanted]
        return request

    def _fill(self, done) -> bool:
        """recv() into the buffer until ``done()``. False if the peer hung up first."""
        while not done():
            try:
                chunk = self.socket.recv(self.buffer_size)
            except (ConnectionResetError, BrokenPipeError):
                chunk = b""
            if not chunk:
                return False
            self._buffer += chunk
            if len(self._buffer) > self.max_request_size:
                raise ValueError(f"Request too large: {len(self._buffer)} bytes")
        return True

    def send_response(self, data: bytes) -> bool:
        """sendall() the response. False if the client is already gone."""
        self.state = ConnectionState.WRITING
        try:
            self.socket.sendall(data)
        except OSError as e:
            logger.warning(f"[{self.id}] Send failed: {e}")
            return False
        return True

    def close(self):
        """
        Close the connection:

            shutdown(SHUT_WR)   FIN, nothing more to write
            recv() until EOF    let the client finish reading
            close()             release the descriptor
        """
        if self.state is ConnectionState.CLOSED:
            return
        self.state = ConnectionState.CLOSING

        try:
            self.socket.shutdown(socket.SHUT_WR)
            self.socket.settimeout(0.5)
            while self.socket.recv(1024):
                pass
        except OSError:
            pass  # peer already gone, or the drain timed out
        finally:
            self.socket.close()

        self.state = ConnectionState.CLOSED
        elapsed = time.monotonic() - self.opened_at
        logger.debug(f"[{self.id}] {self.address[0]} closed after {elapsed:.3f}s")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
