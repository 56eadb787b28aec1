"""
=============================================================================
LESSON: ROUTES INSTEAD OF IF-STATEMENTS
=============================================================================

The same home and about pages as the raw lesson, this time registered
on a router:

    @app.get("/")          GET /        → Home Page
    @app.get("/about")     GET /about   → About Page
    @app.all("/*any")      anything else, any method → 404

Routes are tried in registration order, so the catch-all goes LAST.
The router matches paths, not targets: "/about?x=1" finds "/about".

=============================================================================
"""

from typing import Optional

from ..config import ServerConfig
from ..http import HTTPRequest, HTTPResponse, HTTPStatus, html_page
from ..pages import heading, not_found_page
from ..server import HTTPServer


def create_app(config: Optional[ServerConfig] = None) -> HTTPServer:
    app = HTTPServer(config)

    @app.get("/")
    def home(request: HTTPRequest) -> HTTPResponse:
        return html_page(heading("Home Page"))

    @app.get("/about")
    def about(request: HTTPRequest) -> HTTPResponse:
        return html_page(heading("About Page"))

    @app.all("/*any")
    def resource_not_found(request: HTTPRequest) -> HTTPResponse:
        return html_page(not_found_page(), HTTPStatus.NOT_FOUND)

    return app
