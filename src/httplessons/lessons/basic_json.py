"""
=============================================================================
LESSON: SENDING JSON
=============================================================================

An API answers with data, not pages:

    GET /     200  Content-Type: application/json
              [{"id": 1, "name": "albany sofa", ...}, ...]

json_response() serializes the list and sets the header; the client
decides how to render it.

=============================================================================
"""

from typing import Optional

from ..config import ServerConfig
from ..data import PRODUCTS
from ..http import HTTPRequest, HTTPResponse, HTTPStatus, html_page, json_response
from ..pages import not_found_page
from ..server import HTTPServer


def create_app(config: Optional[ServerConfig] = None) -> HTTPServer:
    app = HTTPServer(config)

    @app.get("/")
    def products(request: HTTPRequest) -> HTTPResponse:
        return json_response(list(PRODUCTS))

    @app.all("/*any")
    def resource_not_found(request: HTTPRequest) -> HTTPResponse:
        return html_page(not_found_page(), HTTPStatus.NOT_FOUND)

    return app
