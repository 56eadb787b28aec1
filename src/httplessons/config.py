"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

One dataclass holds every knob a lesson server has. Values come from,
in increasing priority:

    1. Defaults below                     port=5000
    2. Environment variables              HTTP_PORT=8000
    3. Command line                       --port 9000

=============================================================================
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


DEFAULT_PORT = 5000
DEFAULT_ASSETS_DIR = Path(__file__).parent / "assets"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_LOG_FORMATS = ("text", "json", "simple")


@dataclass
class ServerConfig:
    """
    Configuration for a lesson server.

    =========================================================================
    CONFIGURATION GROUPS
    =========================================================================

    NETWORK:   host, port, backlog, buffer_size, timeout
    HTTP:      max_request_size, server_name
    CONTENT:   assets_dir (public/, navbar-app/, methods-public/)
    LOGGING:   log_level, log_format

    =========================================================================
    """

    host: str = "127.0.0.1"
    """
    The IP address to bind to.
    - "127.0.0.1" - Localhost only
    - "0.0.0.0" - All network interfaces
    """

    port: int = DEFAULT_PORT
    """Every lesson listens on 5000 unless told otherwise."""

    backlog: int = 128
    """Maximum number of queued connections."""

    buffer_size: int = 8192
    """Size of each socket read in bytes."""

    timeout: Optional[float] = 30.0
    """
    Socket timeout in seconds for reading a request.
    None = blocking (one slow client stalls the single-threaded server)
    """

    max_request_size: int = 10 * 1024 * 1024  # 10 MB
    """Requests larger than this get 413 Payload Too Large."""

    assets_dir: Optional[str] = None
    """Directory holding the lesson assets. None = the bundled copy."""

    log_level: str = "INFO"
    """DEBUG, INFO, WARNING, ERROR or CRITICAL."""

    log_format: str = "text"
    """Access log format: 'text', 'json' or 'simple'."""

    server_name: str = "HTTPLessons/1.0"
    """Value of the Server response header."""

    @property
    def assets_path(self) -> Path:
        """Assets directory as a Path, falling back to the bundled assets."""
        return Path(self.assets_dir) if self.assets_dir else DEFAULT_ASSETS_DIR

    @property
    def numeric_log_level(self) -> int:
        return getattr(logging, self.log_level.upper(), logging.INFO)

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from environment variables.

        =====================================================================
        ENVIRONMENT VARIABLES
        =====================================================================

        HTTP_HOST        Server host (default: 127.0.0.1)
        HTTP_PORT        Server port (default: 5000)
        HTTP_TIMEOUT     Request timeout in seconds (default: 30)
        HTTP_ASSETS_DIR  Lesson assets directory (default: bundled)
        HTTP_LOG_LEVEL   Logging level (default: INFO)
        HTTP_LOG_FORMAT  Access log format (default: text)

        =====================================================================

            HTTP_PORT=3000 HTTP_LOG_LEVEL=DEBUG python -m httplessons middleware
        """
        return cls(
            host=os.getenv("HTTP_HOST", "127.0.0.1"),
            port=int(os.getenv("HTTP_PORT", str(DEFAULT_PORT))),
            timeout=float(os.getenv("HTTP_TIMEOUT", "30")),
            assets_dir=os.getenv("HTTP_ASSETS_DIR") or None,
            log_level=os.getenv("HTTP_LOG_LEVEL", "INFO"),
            log_format=os.getenv("HTTP_LOG_FORMAT", "text"),
        )

    def validate(self) -> None:
        """
        Validate configuration values.

        Fail fast: a typo in HTTP_PORT should stop the server at startup,
        not surface later as a confusing socket error.
        """
        if not 0 < self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 1-65535.")

        if self.buffer_size < 1024:
            raise ValueError("buffer_size must be >= 1024")

        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0")

        if self.max_request_size < 1024:
            raise ValueError("max_request_size must be >= 1024")

        if self.log_level.upper() not in _LOG_LEVELS:
            raise ValueError(f"Invalid log level: {self.log_level}")

        if self.log_format not in _LOG_FORMATS:
            raise ValueError(f"Invalid log format: {self.log_format}")

        if self.assets_dir is not None and not Path(self.assets_dir).is_dir():
            raise ValueError(f"Assets directory does not exist: {self.assets_dir}")
