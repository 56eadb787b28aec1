"""
=============================================================================
LESSON: MIDDLEWARE, EXPLAINED
=============================================================================

The middleware lesson plus the two pieces every real app ends up with:

    ErrorHandlerMiddleware ──► logger ──► authorize ──► routes
            ▲                                              │
            └──── any exception raised further down ───────┘
                  becomes {"error": ...} with its status

    no route matched ──► not-found handler ──► 404 page

ORDER MATTERS. Middleware runs in the order it is added, so the error
handler goes FIRST (outermost) to see every failure, while the 404
handler is not middleware at all: the router calls it only after every
route has had its chance.

Test URLs:

    /?user=john                  authorized
    /                            unauthorized (no user query param)
    /about?user=jane
    /api/v1/products?user=bob

=============================================================================
"""

from typing import Optional

from ..config import ServerConfig
from ..http import HTTPRequest, HTTPResponse, HTTPStatus, html_page
from ..middleware import ErrorHandlerMiddleware
from ..pages import heading
from ..server import HTTPServer
from .middleware_usage import build_app


NOT_FOUND_PAGE = heading("404 - Resource not found", size=None, color="red")


def create_app(config: Optional[ServerConfig] = None, scope: str = "global") -> HTTPServer:
    app = HTTPServer(config)
    app.use(ErrorHandlerMiddleware())
    build_app(app, scope)

    @app.not_found
    def resource_not_found(request: HTTPRequest) -> HTTPResponse:
        return html_page(NOT_FOUND_PAGE, HTTPStatus.NOT_FOUND)

    return app
