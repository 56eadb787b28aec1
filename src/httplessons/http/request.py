"""
=============================================================================
HTTP REQUEST PARSER
=============================================================================

Parses raw HTTP/1.1 request bytes into structured HTTPRequest objects.

=============================================================================
WHERE THE LESSONS READ THEIR INPUT FROM
=============================================================================

Every piece of client input a lesson looks at comes from one of four
places in the request:

    GET /api/products/1?search=wooden&limit=2 HTTP/1.1
        ─────────────┬── ────────────┬───────
                     │               │
              PATH PARAMS       QUERY PARAMS
         route "/api/products/:productId"   request.get_query("search")
         → request.path_params["productId"] == "1"

    Content-Type: application/x-www-form-urlencoded
    ───────────────────────┬───────────────────────
                        HEADERS
              request.get_header("content-type")

    name=john
    ────┬────
       BODY
    request.form["name"]  /  request.json["name"]  /  request.payload

Middleware can attach their own data to a request through
``request.context``; the authorize middleware puts the user there and
handlers read it back as ``request.user``.

=============================================================================
PARSING CHALLENGES
=============================================================================

1. LINE ENDINGS: HTTP uses CRLF (\\r\\n); headers end with \\r\\n\\r\\n.

2. CASE SENSITIVITY:
   - Methods are UPPERCASE (case-sensitive)
   - Header names are case-INSENSITIVE ("Content-Type" = "content-type")

3. BODY DETECTION: body length comes from the Content-Length header.

4. SECURITY: a ".." path segment ("/../etc/passwd", "/%2e%2e/") is rejected
   outright. "/api/products/1..2" is an ordinary path.

5. ESCAPES: request.path keeps percent-escapes, so "a%2Fb" stays one
   segment when routing. The router decodes path params after matching.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, Any
from urllib.parse import parse_qs, urlparse, unquote
import re
import json

from .errors import HTTPError


FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


class HTTPParseError(HTTPError):
    """
    Raised when HTTP request parsing fails.

    Different parse errors map to different codes:

        400 Bad Request                 - Malformed request syntax
        405 Method Not Allowed          - Unknown/unsupported method
        413 Payload Too Large           - Request exceeds size limit
        505 HTTP Version Not Supported  - Unknown HTTP version
    """


@dataclass
class HTTPRequest:
    """
    Represents a parsed HTTP request.

    =========================================================================
    ATTRIBUTES
    =========================================================================

        method:         GET, POST, PUT, DELETE, ...
        path:           Request path as sent (percent-escapes kept), no query
        target:         The request target exactly as sent ("/about?user=x")
        version:        "HTTP/1.1" or "HTTP/1.0"
        headers:        Dictionary of headers with LOWERCASE keys
        query_params:   "?a=1&a=2&b=3" → {"a": ["1", "2"], "b": ["3"]}
        body:           Raw request body bytes
        path_params:    Filled in by the router: "/users/:id" → {"id": "123"}
        context:        Per-request scratch space for middleware
        base_url:       Mount prefix of the path-scoped middleware running now
        client_address: (ip, port) of the client
        raw:            The original unparsed request bytes

    =========================================================================
    """

    # Core request line components
    method: str
    path: str
    version: str = "HTTP/1.1"
    target: str = ""

    # Parsed components
    headers: Dict[str, str] = field(default_factory=dict)
    query_params: Dict[str, list[str]] = field(default_factory=dict)
    body: bytes = b""

    # Router-injected parameters
    path_params: Dict[str, str] = field(default_factory=dict)

    # Middleware-injected data (e.g. the authorised user)
    context: Dict[str, Any] = field(default_factory=dict)

    # Mount prefix while a path-scoped middleware runs
    base_url: str = ""

    # Metadata
    client_address: tuple[str, int] = ("", 0)
    raw: bytes = b""

    # Private cached values (computed lazily)
    _body_json: Optional[Any] = field(default=None, repr=False)
    _body_form: Optional[Dict[str, str]] = field(default=None, repr=False)
    _content_type: Optional[str] = field(default=None, repr=False)

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def url(self) -> str:
        """
        The request target as the client sent it, query string included.

        This is what a request logger prints: ``/about?user=john``.
        """
        return self.target or self.path

    @property
    def mounted_url(self) -> str:
        """
        ``url`` seen from ``base_url``, the prefix a path-scoped middleware
        is mounted at:

            url="/api/v1/products?user=john"  base_url="/api"
            → "/v1/products?user=john"
        """
        url = self.url
        if not self.base_url or not url.startswith(self.base_url):
            return url
        rest = url[len(self.base_url):]
        return rest if rest.startswith("/") else "/" + rest

    @property
    def query_string(self) -> str:

        """Raw query string without the leading ``?``."""
        _, _, query = self.url.partition("?")
        return query

    @property
    def content_type(self) -> Optional[str]:
        """
        Get the Content-Type header value (without parameters).

        "application/json; charset=utf-8" → "application/json"
        """
        if self._content_type is None:
            ct = self.headers.get("content-type", "")
            self._content_type = ct.split(";")[0].strip().lower()
        return self._content_type or None

    @property
    def content_length(self) -> int:
        """Content-Length as an int, 0 if missing or invalid."""
        try:
            return int(self.headers.get("content-length", 0))
        except ValueError:
            return 0

    @property
    def host(self) -> str:
        return self.headers.get("host", "")

    @property
    def user_agent(self) -> str:
        return self.headers.get("user-agent", "")

    @property
    def is_json(self) -> bool:
        """Check if the request body is JSON based on Content-Type."""
        return self.content_type == "application/json"

    @property
    def is_form(self) -> bool:
        """Check if the body is an HTML form submission."""
        return self.content_type == FORM_CONTENT_TYPE

    @property
    def json(self) -> Any:
        """
        Parse the request body as JSON.

        Lazy evaluation with caching - only parses once.

        Raises:
            HTTPParseError: If body is not valid JSON.
        """
        if self._body_json is None and self.body:
            try:
                self._body_json = json.loads(self.body.decode("utf-8"))
            except (json.JSONDecodeError, UnicodeDecodeError) as e:
                raise HTTPParseError(f"Invalid JSON body: {e}")
        return self._body_json

    @property
    def form(self) -> Dict[str, str]:
        """
        Parse a url-encoded form body (``name=john&age=3``).

        Keeps the first value of each field. Empty fields are kept as "".
        """
        if self._body_form is None:
            text = self.body.decode("utf-8", errors="replace")
            parsed = parse_qs(text, keep_blank_values=True)
            self._body_form = {key: values[0] for key, values in parsed.items()}
        return self._body_form

    @property
    def payload(self) -> Any:
        """
        The decoded body, whatever format it arrived in.

            application/json                   → request.json
            application/x-www-form-urlencoded  → request.form
            anything else / no body            → {}
        """
        if self.is_json:
            data = self.json
            return {} if data is None else data
        if self.is_form:
            return self.form
        return {}

    @property
    def user(self) -> Optional[Dict[str, Any]]:
        """The user attached by the authorize middleware, if any."""
        return self.context.get("user")

    # =========================================================================
    # ACCESSOR METHODS
    # =========================================================================

    def get_header(self, name: str, default: str = "") -> str:
        """Get a header value (case-insensitive lookup)."""
        return self.headers.get(name.lower(), default)

    def get_query(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """
        Get the first value of a query parameter.

        Example:
            # URL: /api/v1/query?search=a&search=b
            request.get_query("search")  # Returns "a"
        """
        values = self.query_params.get(name, [])
        return values[0] if values else default

    def get_query_list(self, name: str) -> list[str]:
        """Get all values of a query parameter (empty list if absent)."""
        return self.query_params.get(name, [])


class RequestParser:
    """
    Parses raw HTTP request bytes into HTTPRequest objects.

        Raw Request Bytes
              │
              ▼
        1. Size check            too large?  → HTTPParseError(413)
        2. Find \\r\\n\\r\\n        missing?    → HTTPParseError(400)
        3. Parse request line    invalid?    → HTTPParseError(400/405/505)
        4. Parse headers         lowercase names, duplicates joined
        5. Extract body          exactly Content-Length bytes
              │
              ▼
        HTTPRequest dataclass
    """

    VALID_METHODS = {
        "GET",
        "POST",
        "PUT",
        "DELETE",
        "PATCH",
        "HEAD",
        "OPTIONS",
    }

    REQUEST_LINE_PATTERN = re.compile(r"^([A-Z]+) ([^ ]+) (HTTP/\d\.\d)$")
    HEADER_PATTERN = re.compile(r"^([^:]+):\s*(.*)$")

    def __init__(self, max_request_size: int = 10 * 1024 * 1024):
        self.max_request_size = max_request_size

    def parse(
        self,
        data: bytes,
        client_address: tuple[str, int] = ("", 0)
    ) -> HTTPRequest:
        """
        Parse raw HTTP request data into an HTTPRequest object.

        Args:
            data: Raw HTTP request bytes from socket.
            client_address: Client's (ip, port) tuple for logging.

        Raises:
            HTTPParseError: If the request is malformed.
        """
        if len(data) > self.max_request_size:
            raise HTTPParseError(
                f"Request too large: {len(data)} bytes",
                status_code=413
            )

        header_end = data.find(b"\r\n\r\n")
        if header_end == -1:
            raise HTTPParseError("Incomplete request: no header terminator")

        header_section = data[:header_end].decode("utf-8", errors="replace")
        body = data[header_end + 4:]

        lines = header_section.split("\r\n")
        method, target, path, query_params, version = self._parse_request_line(lines[0])
        headers = self._parse_headers(lines[1:])

        # Body length MUST match Content-Length header
        try:
            content_length = int(headers.get("content-length", 0))
        except ValueError:
            raise HTTPParseError("Invalid Content-Length header")
        if content_length < 0:
            raise HTTPParseError("Invalid Content-Length header")
        if len(body) < content_length:
            raise HTTPParseError(
                f"Incomplete body: expected {content_length} bytes, got {len(body)}"
            )

        return HTTPRequest(
            method=method,
            path=path,
            version=version,
            target=target,
            headers=headers,
            query_params=query_params,
            body=body[:content_length],
            client_address=client_address,
            raw=data,
        )

    def _parse_request_line(
        self,
        line: str
    ) -> tuple[str, str, str, Dict[str, list[str]], str]:
        """
        Parse "METHOD SP REQUEST-URI SP HTTP-VERSION".

        Returns:
            Tuple of (method, target, path, query_params, version)
        """
        match = self.REQUEST_LINE_PATTERN.match(line)
        if not match:
            raise HTTPParseError(f"Invalid request line: {line}")

        method, target, version = match.groups()

        if method not in self.VALID_METHODS:
            raise HTTPParseError(f"Invalid method: {method}", status_code=405)

        if version not in ("HTTP/1.0", "HTTP/1.1"):
            raise HTTPParseError(
                f"Unsupported HTTP version: {version}",
                status_code=505
            )

        parsed = urlparse(target)
        path = parsed.path or "/"
        query_params = parse_qs(parsed.query, keep_blank_values=True)

        # Path traversal: "GET /../../../etc/passwd HTTP/1.1", "/%2e%2e/"
        if any(unquote(segment) == ".." for segment in path.split("/")):
            raise HTTPParseError("Invalid path: contains ..", status_code=400)

        return method, target, path, query_params, version

    def _parse_headers(self, lines: list[str]) -> Dict[str, str]:
        """
        Parse header lines into a dictionary with lowercase names.

        Continuation lines (leading whitespace) extend the previous header,
        and repeated headers are joined with ", ".
        """
        headers: Dict[str, str] = {}
        current_name = None

        for line in lines:
            if not line:
                continue

            if line[0] in (" ", "\t"):
                if current_name is not None:
                    headers[current_name] += " " + line.strip()
                continue

            match = self.HEADER_PATTERN.match(line)
            if not match:
                continue  # lenient: skip malformed headers

            name, value = match.groups()
            name = name.strip().lower()
            value = value.strip()
            current_name = name

            if name in headers:
                headers[name] += ", " + value
            else:
                headers[name] = value

        return headers


def parse_request(
    data: bytes,
    client_address: tuple[str, int] = ("", 0),
    max_size: int = 10 * 1024 * 1024
) -> HTTPRequest:
    """
    Convenience function to parse an HTTP request in one call.

    Use RequestParser directly to parse many requests with the same settings.
    """
    parser = RequestParser(max_request_size=max_size)
    return parser.parse(data, client_address)
