"""
=============================================================================
LESSON: MIDDLEWARE
=============================================================================

Middleware is a function that sits BETWEEN the request and the route:

    request ──► logger ──► authorize ──► route handler ──► response
                  │            │
                  │            └── no ?user= → 401, route never runs
                  └── prints "[2024] GET /about?user=john", passes on

Each one gets ``(request, next)`` and either returns ``next(request)``
to continue the chain or returns a response of its own to stop it.

=============================================================================
THREE PLACES TO ATTACH IT
=============================================================================

    scope="global"   app.use(mw)                  every request
    scope="path"     app.use(mw, path="/api")     /api and below only
    scope="route"    app.get("/", middleware=[…]) one route at a time

    python -m httplessons middleware                 (global)
    python -m httplessons middleware --scope path

=============================================================================
"""

import logging
from typing import Optional

from ..config import ServerConfig
from ..http import HTTPRequest, HTTPResponse, HTTPStatus, html_page
from ..middleware import AuthorizeMiddleware, LoggingMiddleware
from ..pages import cannot_page, heading
from ..server import HTTPServer


logger = logging.getLogger(__name__)

SCOPES = ("global", "path", "route")
PROTECTED_PREFIX = "/api"


def _middleware_chain() -> list:
    return [LoggingMiddleware("simple"), AuthorizeMiddleware()]


def build_app(app: HTTPServer, scope: str = "global") -> HTTPServer:
    """
    Register the lesson's middleware and pages on ``app``.

    Shared with middleware_explained, which adds error handling on top.
    """
    if scope not in SCOPES:
        raise ValueError(f"scope must be one of {SCOPES}, got {scope!r}")

    if scope == "global":
        for mw in _middleware_chain():
            app.use(mw)
    elif scope == "path":
        for mw in _middleware_chain():
            app.use(mw, path=PROTECTED_PREFIX)

    route_mw = _middleware_chain() if scope == "route" else None

    @app.get("/", middleware=route_mw)
    def home(request: HTTPRequest) -> HTTPResponse:
        logger.info(f"User info attached by middleware: {request.user}")
        return html_page(heading("Home Page", size=None))

    @app.get("/about", middleware=route_mw)
    def about(request: HTTPRequest) -> HTTPResponse:
        return html_page(heading("About Page", size=None))

    @app.get("/api/v1/products", middleware=route_mw)
    def products(request: HTTPRequest) -> HTTPResponse:
        return html_page(heading("Products Page", size=None))

    @app.get("/api/v1/customers", middleware=route_mw)
    def customers(request: HTTPRequest) -> HTTPResponse:
        return html_page(heading("Customers Page", size=None))

    @app.not_found
    def resource_not_found(request: HTTPRequest) -> HTTPResponse:
        return html_page(cannot_page(request.method, request.path), HTTPStatus.NOT_FOUND)

    return app


def create_app(config: Optional[ServerConfig] = None, scope: str = "global") -> HTTPServer:
    return build_app(HTTPServer(config), scope)
