"""
=============================================================================
HTTP RESPONSE BUILDER
=============================================================================

Constructs HTTP responses and serializes them to bytes.

There are two ways to produce a response in this package, matching the
two styles the lessons teach:

    ┌─────────────────────────────────────────────────────────────────────┐
    │ 1. RETURN A RESPONSE (framework style)                              │
    │                                                                     │
    │    @app.get("/about")                                               │
    │    def about(request):                                              │
    │        return html_page("<h1>About Page</h1>")                      │
    │                                                                     │
    │    Build it with ResponseBuilder or one of the shortcut functions.  │
    ├─────────────────────────────────────────────────────────────────────┤
    │ 2. WRITE TO A WRITER (raw listener style)                           │
    │                                                                     │
    │    def listener(request, res):                                      │
    │        res.write_head(200, {"content-type": "text/html"})           │
    │        res.write("<h1>Hello</h1>")                                  │
    │        res.end()                                                    │
    │                                                                     │
    │    ResponseWriter records the calls and refuses a second response.  │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
ONE REQUEST, ONE RESPONSE
=============================================================================

A request gets exactly one response. With a writer that is easy to get
wrong: ending twice, or writing headers after the body has started.
Those mistakes raise ResponseAlreadySentError instead of silently
producing garbage on the wire.

=============================================================================
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Dict, Any, Union
import json

from .status_codes import HTTPStatus
from .mime_types import get_content_type


DEFAULT_SERVER_NAME = "HTTPLessons/1.0"

HTML_CONTENT_TYPE = "text/html; charset=utf-8"
JSON_CONTENT_TYPE = "application/json; charset=utf-8"
TEXT_CONTENT_TYPE = "text/plain; charset=utf-8"


def _coerce_status(status: Union[HTTPStatus, int]) -> Union[HTTPStatus, int]:
    """Turn a plain int into an HTTPStatus member when one exists."""
    try:
        return HTTPStatus(status)
    except ValueError:
        return status


@dataclass
class HTTPResponse:
    """
    Represents an HTTP response to be sent to the client.

        Handler returns          to_bytes()              Socket sends
        HTTPResponse    ─────►   serializes    ─────►    raw bytes
    """

    status: HTTPStatus = HTTPStatus.OK
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    version: str = "HTTP/1.1"

    @property
    def status_line(self) -> str:
        """
        Get the HTTP status line, e.g. "HTTP/1.1 404 Not Found".
        """
        phrase = self.status.phrase if isinstance(self.status, HTTPStatus) else "Unknown"
        return f"{self.version} {int(self.status)} {phrase}"

    @property
    def text(self) -> str:
        """The body decoded as UTF-8."""
        return self.body.decode("utf-8", errors="replace")

    def json(self) -> Any:
        """Decode a JSON body."""
        return json.loads(self.body.decode("utf-8"))

    def get_header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Case-insensitive header lookup."""
        lowered = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lowered:
                return value
        return default

    def set_header(self, name: str, value: str) -> "HTTPResponse":
        """Set a response header. Returns self for chaining."""
        self.headers[name] = value
        return self

    def drop_body(self) -> "HTTPResponse":
        """
        Turn this into the answer to a HEAD request: headers unchanged,
        Content-Length still that of the full body, no body bytes.
        """
        if self.get_header("Content-Length") is None:
            self.headers["Content-Length"] = str(len(self.body))
        self.body = b""
        return self

    def to_bytes(self, server_name: str = DEFAULT_SERVER_NAME) -> bytes:
        """
        Serialize the response to bytes for sending over socket.

            HTTP/1.1 200 OK\\r\\n
            Content-Type: text/html; charset=utf-8\\r\\n
            Content-Length: 28\\r\\n
            Date: Mon, 19 Oct 2026 10:00:00 GMT\\r\\n
            Server: HTTPLessons/1.0\\r\\n
            \\r\\n
            <h1>Home Page</h1>

        Content-Length, Date and Server are added when missing.
        """
        response_headers = dict(self.headers)
        present = {name.lower() for name in response_headers}

        if "content-length" not in present:
            response_headers["Content-Length"] = str(len(self.body))
        if "date" not in present:
            response_headers["Date"] = format_http_date(datetime.now(timezone.utc))
        if "server" not in present:
            response_headers["Server"] = server_name

        lines = [self.status_line]
        for name, value in response_headers.items():
            lines.append(f"{name}: {value}")
        lines.append("")

        header_bytes = "\r\n".join(lines).encode("utf-8") + b"\r\n"
        return header_bytes + self.body


class ResponseBuilder:
    """
    Fluent builder for constructing HTTP responses.

        response = (ResponseBuilder()
            .status(HTTPStatus.NOT_FOUND)
            .json({"error": "Product not found", "searchedId": 9999})
            .build())

    Each method returns ``self`` except ``build()`` and ``to_bytes()``.
    """

    def __init__(self, server_name: str = DEFAULT_SERVER_NAME):
        self._status: Union[HTTPStatus, int] = HTTPStatus.OK
        self._headers: Dict[str, str] = {}
        self._body: bytes = b""
        self._server_name = server_name

    # =========================================================================
    # STATUS AND HEADERS
    # =========================================================================

    def status(self, status: Union[HTTPStatus, int]) -> "ResponseBuilder":
        self._status = _coerce_status(status)
        return self

    def header(self, name: str, value: str) -> "ResponseBuilder":
        self._headers[name] = value
        return self

    def headers(self, headers: Dict[str, str]) -> "ResponseBuilder":
        self._headers.update(headers)
        return self

    def content_type(self, content_type: str) -> "ResponseBuilder":
        self._headers["Content-Type"] = content_type
        return self

    # =========================================================================
    # BODY
    # =========================================================================

    def body(self, body: Union[str, bytes]) -> "ResponseBuilder":
        """Set a raw body; strings are UTF-8 encoded."""
        self._body = body.encode("utf-8") if isinstance(body, str) else body
        return self

    def text(self, text: str, content_type: str = TEXT_CONTENT_TYPE) -> "ResponseBuilder":
        self._body = text.encode("utf-8")
        self._headers["Content-Type"] = content_type
        return self

    def html(self, html: str) -> "ResponseBuilder":
        return self.text(html, HTML_CONTENT_TYPE)

    def json(self, data: Any, pretty: bool = False) -> "ResponseBuilder":
        """
        Serialize ``data`` to JSON and set Content-Type.

        ensure_ascii=False keeps non-ASCII product names readable.
        """
        indent = 2 if pretty else None
        self._body = json.dumps(data, indent=indent, ensure_ascii=False).encode("utf-8")
        self._headers["Content-Type"] = JSON_CONTENT_TYPE
        return self

    def file(self, content: bytes, filename: str) -> "ResponseBuilder":
        """File body with Content-Type detected from the filename."""
        self._body = content
        self._headers["Content-Type"] = get_content_type(filename)
        return self

    # =========================================================================
    # CACHING / CONNECTION
    # =========================================================================

    def no_cache(self) -> "ResponseBuilder":
        self._headers["Cache-Control"] = "no-store, no-cache, must-revalidate"
        self._headers["Pragma"] = "no-cache"
        self._headers["Expires"] = "0"
        return self

    def cache(self, max_age: int = 3600) -> "ResponseBuilder":
        self._headers["Cache-Control"] = f"public, max-age={max_age}"
        return self

    def close_connection(self) -> "ResponseBuilder":
        self._headers["Connection"] = "close"
        return self

    # =========================================================================
    # BUILD
    # =========================================================================

    def build(self) -> HTTPResponse:
        return HTTPResponse(
            status=self._status,
            headers=self._headers,
            body=self._body,
        )

    def to_bytes(self) -> bytes:
        return self.build().to_bytes(self._server_name)


# =============================================================================
# RESPONSE WRITER
# =============================================================================

class ResponseAlreadySentError(RuntimeError):
    """Raised when a handler tries to respond to the same request twice."""


class ResponseWriter:
    """
    Callback-style response object handed to raw listeners.

    =========================================================================
    STATE MACHINE
    =========================================================================

        ┌──────────┐  write_head() / write()  ┌──────────────┐  end()  ┌──────────┐
        │  FRESH   │ ───────────────────────► │ HEADERS_SENT │ ──────► │ FINISHED │
        └──────────┘                          └──────────────┘         └──────────┘
             │                                                               ▲
             └──────────────────────────── end() ────────────────────────────┘

        FRESH         set_header / write_head allowed
        HEADERS_SENT  only write / end allowed
        FINISHED      nothing allowed (ResponseAlreadySentError)

    Calling ``write`` before ``write_head`` sends an implicit 200 head, the
    same way a real streaming server commits its status line as soon as
    the first body byte goes out.
    =========================================================================
    """

    def __init__(self):
        self._status: Union[HTTPStatus, int] = HTTPStatus.OK
        self._headers: Dict[str, str] = {}
        self._chunks: list[bytes] = []
        self._headers_sent = False
        self._finished = False

    @property
    def headers_sent(self) -> bool:
        return self._headers_sent

    @property
    def finished(self) -> bool:
        return self._finished

    @property
    def status(self) -> Union[HTTPStatus, int]:
        return self._status

    def set_header(self, name: str, value: str) -> "ResponseWriter":
        if self._headers_sent:
            raise ResponseAlreadySentError(
                f"Cannot set header {name!r}: headers already sent"
            )
        self._headers[name] = value
        return self

    def write_head(
        self,
        status: Union[HTTPStatus, int],
        headers: Optional[Dict[str, str]] = None
    ) -> "ResponseWriter":
        """Commit the status line and headers."""
        if self._headers_sent:
            raise ResponseAlreadySentError("Cannot write head: headers already sent")
        self._status = _coerce_status(status)
        if headers:
            self._headers.update(headers)
        self._headers_sent = True
        return self

    def write(self, chunk: Union[str, bytes]) -> "ResponseWriter":
        """Append a body chunk."""
        if self._finished:
            raise ResponseAlreadySentError("Cannot write: response already ended")
        if not self._headers_sent:
            self._headers_sent = True
        self._chunks.append(chunk.encode("utf-8") if isinstance(chunk, str) else chunk)
        return self

    def end(self, chunk: Union[str, bytes, None] = None) -> None:
        """Finish the response, optionally writing a last chunk."""
        if self._finished:
            raise ResponseAlreadySentError("Response already ended")
        if chunk is not None:
            self.write(chunk)
        self._headers_sent = True
        self._finished = True

    def to_response(self) -> HTTPResponse:
        """Freeze the recorded calls into an HTTPResponse."""
        return HTTPResponse(
            status=self._status,
            headers=dict(self._headers),
            body=b"".join(self._chunks),
        )


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================

def format_http_date(dt: datetime) -> str:
    """
    Format a datetime as an HTTP-date (RFC 7231).

    Example: Wed, 01 Jan 2026 12:00:00 GMT (always GMT, never local time).
    """
    days = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
    months = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
              "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

    return (
        f"{days[dt.weekday()]}, "
        f"{dt.day:02d} {months[dt.month - 1]} {dt.year} "
        f"{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d} GMT"
    )


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================
#
#     return ok({"success": True, "people": people})
#     return html_page("<h1>Home Page</h1>")
#     return not_found("Product not found")
#
# =============================================================================

def ok(body: Union[str, bytes, dict, list] = "", content_type: Optional[str] = None) -> HTTPResponse:
    """
    Create a 200 OK response.

    - dict/list → JSON response
    - str → text response
    - bytes → raw response
    """
    builder = ResponseBuilder().status(HTTPStatus.OK)

    if isinstance(body, (dict, list)):
        builder.json(body)
    elif isinstance(body, str):
        builder.text(body, content_type or TEXT_CONTENT_TYPE)
    else:
        builder.body(body)
        if content_type:
            builder.content_type(content_type)

    return builder.build()


def html_page(html: str, status: Union[HTTPStatus, int] = HTTPStatus.OK) -> HTTPResponse:
    """An HTML response with the given status (200 by default)."""
    return ResponseBuilder().status(status).html(html).build()


def json_response(data: Any, status: Union[HTTPStatus, int] = HTTPStatus.OK) -> HTTPResponse:
    """A JSON response with the given status (200 by default)."""
    return ResponseBuilder().status(status).json(data).build()


def created(body: Union[str, bytes, dict, list] = "", location: Optional[str] = None) -> HTTPResponse:
    """
    Create a 201 Created response, optionally with a Location header.
    """
    builder = ResponseBuilder().status(HTTPStatus.CREATED)

    if isinstance(body, (dict, list)):
        builder.json(body)
    elif body:
        builder.body(body)

    if location:
        builder.header("Location", location)

    return builder.build()


def bad_request(message: str = "Bad Request") -> HTTPResponse:
    return json_response({"error": message}, HTTPStatus.BAD_REQUEST)


def unauthorized(message: str = "Unauthorized") -> HTTPResponse:
    """
    Create a 401 Unauthorized response.

    401 means "not authenticated" (identity unknown); for "authenticated
    but not permitted" use 403.
    """
    return json_response({"error": message}, HTTPStatus.UNAUTHORIZED)


def forbidden(message: str = "Forbidden") -> HTTPResponse:
    return json_response({"error": message}, HTTPStatus.FORBIDDEN)


def not_found(message: str = "Not Found") -> HTTPResponse:
    return json_response({"error": message}, HTTPStatus.NOT_FOUND)


def method_not_allowed(allowed_methods: list[str]) -> HTTPResponse:
    """
    Create a 405 Method Not Allowed response.

    Includes the Allow header listing valid methods (RFC 7231 requirement).
    """
    return (ResponseBuilder()
        .status(HTTPStatus.METHOD_NOT_ALLOWED)
        .header("Allow", ", ".join(allowed_methods))
        .json({"error": "Method Not Allowed", "allowed": allowed_methods})
        .build())


def internal_error(message: str = "Internal Server Error") -> HTTPResponse:
    """
    Create a 500 Internal Server Error response.

    Keep the message generic; details belong in the log, not the client.
    """
    return json_response({"error": message}, HTTPStatus.INTERNAL_SERVER_ERROR)
