"""
=============================================================================
LESSON: EVERYTHING IS A STATIC FILE
=============================================================================

Put index.html into public/ too and the app needs no routes at all:

    GET /               public/index.html
    GET /styles.css     public/styles.css
    GET /anything-else  404

=============================================================================
"""

from typing import Optional

from ..config import ServerConfig
from ..handlers import StaticFiles
from ..http import HTTPRequest, HTTPResponse, HTTPStatus, html_page
from ..pages import not_found_page
from ..server import HTTPServer


def create_app(config: Optional[ServerConfig] = None) -> HTTPServer:
    app = HTTPServer(config)
    app.use(StaticFiles(app.config.assets_path / "public"))

    @app.all("/*any")
    def resource_not_found(request: HTTPRequest) -> HTTPResponse:
        return html_page(not_found_page(), HTTPStatus.NOT_FOUND)

    return app
