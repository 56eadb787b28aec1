"""
=============================================================================
LOGGING MIDDLEWARE
=============================================================================

The first middleware every lesson writes: print what came in, then let
the request carry on.

=============================================================================
LOG FORMATS
=============================================================================

    SIMPLE (the lesson logger, logged BEFORE the handler runs):
    ┌─────────────────────────────────────────────────────────────────────┐
    │ [2026] GET /api/v1/products?user=john                               │
    │ ─┬───  ─┬─ ──────────────┬───────────                               │
    │  year  method        full url                                       │
    └─────────────────────────────────────────────────────────────────────┘

    TEXT (access log, logged AFTER the handler with timing):
    ┌─────────────────────────────────────────────────────────────────────┐
    │ 127.0.0.1 - - [19/Oct/2026:10:55:36 +0000] "GET /about" 200 25 0.4ms│
    └─────────────────────────────────────────────────────────────────────┘

    JSON (same fields as TEXT, one object per line for log shippers)

Because the simple format logs before calling next(), it also shows the
requests that a later middleware rejects (e.g. a 401 from authorize).

=============================================================================
"""

import json
import logging
import time
import uuid
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Optional

from .base import Middleware, NextHandler
from ..http.request import HTTPRequest
from ..http.response import HTTPResponse


logger = logging.getLogger("httplessons.access")

LOG_FORMATS = ("text", "json", "simple")


@dataclass
class RequestLog:
    """One access log entry, built once the response is known."""

    request_id: str
    method: str
    path: str
    query: str
    client_ip: str
    user_agent: str
    status_code: int
    content_length: int
    duration_ms: float
    timestamp: str

    @classmethod
    def from_exchange(
        cls,
        request_id: str,
        request: HTTPRequest,
        response: HTTPResponse,
        started: float,
    ) -> "RequestLog":
        return cls(
            request_id=request_id,
            method=request.method,
            path=request.path,
            query=request.query_string,
            client_ip=request.client_address[0] or "-",
            user_agent=request.user_agent or "-",
            status_code=int(response.status),
            content_length=len(response.body),
            duration_ms=round((time.perf_counter() - started) * 1000, 2),
            timestamp=time.strftime("%d/%b/%Y:%H:%M:%S %z"),
        )

    def to_text(self) -> str:
        """Apache-style access log line."""
        return (
            f'{self.client_ip} - - [{self.timestamp}] '
            f'"{self.method} {self.path}" {self.status_code} '
            f'{self.content_length} {self.duration_ms:.2f}ms'
        )

    def to_json(self) -> str:
        return json.dumps(asdict(self))


def format_simple(request: HTTPRequest, now: Optional[datetime] = None) -> str:
    """
    ``[<year>] <METHOD> <url>``, the one-line lesson logger format.

    Mounted with ``app.use(logger, path="/api")`` the url is relative to
    the mount point: ``GET /v1/products?user=john``.
    """
    now = now or datetime.now()
    return f"[{now.year}] {request.method} {request.mounted_url}"


class LoggingMiddleware(Middleware):
    """
    Request logging middleware.

    Add it FIRST so it sees every request, including the ones a later
    middleware turns away:

        app.use(LoggingMiddleware("simple"))
        app.use(AuthorizeMiddleware())

    Args:
        log_format: "simple", "text" or "json"
        include_request_id: Stamp an X-Request-ID header (text/json only)
        log_level: Level the access lines are logged at
        skip_paths: Paths that are never logged
    """

    def __init__(
        self,
        log_format: str = "text",
        include_request_id: bool = True,
        log_level: int = logging.INFO,
        skip_paths: Optional[list[str]] = None,
    ):
        if log_format not in LOG_FORMATS:
            raise ValueError(f"log_format must be one of {LOG_FORMATS}, got {log_format!r}")
        self.log_format = log_format
        self.include_request_id = include_request_id
        self.log_level = log_level
        self.skip_paths = frozenset(skip_paths or ())

    def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        if request.path in self.skip_paths:
            return next(request)

        if self.log_format == "simple":
            logger.log(self.log_level, format_simple(request))
            return next(request)

        request_id = uuid.uuid4().hex[:8]
        request.context["request_id"] = request_id
        started = time.perf_counter()

        try:
            response = next(request)
        except Exception as e:
            elapsed = (time.perf_counter() - started) * 1000
            logger.error(
                f"[{request_id}] {request.method} {request.path} failed after "
                f"{elapsed:.2f}ms: {type(e).__name__}: {e}"
            )
            raise

        entry = RequestLog.from_exchange(request_id, request, response, started)
        line = entry.to_json() if self.log_format == "json" else entry.to_text()
        logger.log(self.log_level, line)

        if self.include_request_id:
            response.headers["X-Request-ID"] = request_id
        return response
