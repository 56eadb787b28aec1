"""
=============================================================================
HTTP PROTOCOL IMPLEMENTATION
=============================================================================

Turns raw bytes from TCP into structured HTTP messages and back.

    ┌─────────────────────────────────────────────────────────────────────┐
    │ REQUEST PARSER (request.py)                                         │
    │   b"GET /about?user=john HTTP/1.1\\r\\n..."                           │
    │     → HTTPRequest(method="GET", path="/about", ...)                 │
    ├─────────────────────────────────────────────────────────────────────┤
    │ RESPONSE BUILDER (response.py)                                      │
    │   ResponseBuilder().status(404).html("...").build()                 │
    │   ResponseWriter: write_head / write / end for raw listeners        │
    ├─────────────────────────────────────────────────────────────────────┤
    │ ROUTER (router.py)                                                  │
    │   GET /api/products/1 → single_product(request)                     │
    │                         with path_params={"productId": "1"}         │
    ├─────────────────────────────────────────────────────────────────────┤
    │ STATUS CODES / MIME TYPES / ERRORS                                  │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .errors import HTTPError
from .request import HTTPRequest, RequestParser, HTTPParseError, parse_request
from .response import (
    HTTPResponse,
    ResponseBuilder,
    ResponseWriter,
    ResponseAlreadySentError,
    ok,
    html_page,
    json_response,
    created,
    bad_request,
    unauthorized,
    forbidden,
    not_found,
    method_not_allowed,
    internal_error,
)
from .router import Router, Route
from .status_codes import HTTPStatus
from .mime_types import get_mime_type, get_content_type

__all__ = [
    # Errors
    "HTTPError",
    "HTTPParseError",

    # Request parsing
    "HTTPRequest",
    "RequestParser",
    "parse_request",

    # Response building
    "HTTPResponse",
    "ResponseBuilder",
    "ResponseWriter",
    "ResponseAlreadySentError",

    # Response convenience functions
    "ok",
    "html_page",
    "json_response",
    "created",
    "bad_request",
    "unauthorized",
    "forbidden",
    "not_found",
    "method_not_allowed",
    "internal_error",

    # Routing
    "Router",
    "Route",

    # Status codes / MIME types
    "HTTPStatus",
    "get_mime_type",
    "get_content_type",
]
