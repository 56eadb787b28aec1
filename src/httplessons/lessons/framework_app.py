"""
=============================================================================
LESSON: STATIC FILES PLUS ONE ROUTE
=============================================================================

    app.use(StaticFiles(public/, index_file=None))

    GET /styles.css       public/styles.css         (static middleware)
    GET /logo.svg         public/logo.svg           (static middleware)
    GET /                 navbar-app/index.html     (route)
    GET /nope             404                       (catch-all)

The static middleware answers every request that names an existing file
and passes the rest on. Directory index lookup is switched off, so "/"
falls through to the route that sends the navbar app's page.

=============================================================================
"""

from typing import Optional

from ..config import ServerConfig
from ..handlers import StaticFileHandler, StaticFiles
from ..http import HTTPRequest, HTTPResponse, HTTPStatus, html_page
from ..pages import not_found_page
from ..server import HTTPServer


def create_app(config: Optional[ServerConfig] = None) -> HTTPServer:
    app = HTTPServer(config)
    assets = app.config.assets_path

    app.use(StaticFiles(assets / "public", index_file=None))
    navbar = StaticFileHandler(assets / "navbar-app", index_file=None, cache_max_age=0)

    @app.get("/")
    def home(request: HTTPRequest) -> HTTPResponse:
        return navbar.serve_file(navbar.root_dir / "index.html", request)

    @app.all("/*any")
    def resource_not_found(request: HTTPRequest) -> HTTPResponse:
        return html_page(not_found_page(), HTTPStatus.NOT_FOUND)

    return app
