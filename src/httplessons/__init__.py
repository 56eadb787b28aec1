"""
=============================================================================
HTTPLESSONS - Learn HTTP by Building the Server Underneath It
=============================================================================

A small HTTP/1.1 server on raw sockets, and a series of lesson apps that
use it, each adding one idea on top of the last.

=============================================================================
PROJECT OVERVIEW
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                        HTTPLESSONS LAYERS                           │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                     │
    │   lessons/      http-basics … methods   (one create_app() each)    │
    │        │                                                            │
    │   server.py     HTTPServer: use(), get(), run(), handle()           │
    │        │                                                            │
    │   middleware/   logging, authorize, error handling                  │
    │   handlers/     static files                                        │
    │   http/         request parsing, responses, router                  │
    │   core/         TCP socket server, connections                      │
    │                                                                     │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    httplessons/
    ├── __init__.py          # This file - package exports
    ├── __main__.py          # CLI (python -m httplessons <lesson>)
    ├── server.py            # HTTPServer, create_app, create_server
    ├── config.py            # ServerConfig dataclass
    ├── data.py              # Sample products and people
    ├── catalog.py           # Product lookup, search and limits
    ├── people.py            # People store and REST handlers
    ├── pages.py             # HTML snippets
    ├── core/                # Sockets and connections
    ├── http/                # Request, response, router, status codes
    ├── middleware/          # Pipeline, logging, authorize, errors
    ├── handlers/            # Static files
    ├── lessons/             # The lesson apps
    └── assets/              # public/, navbar-app/, methods-public/

=============================================================================
QUICK START
=============================================================================

    from httplessons import HTTPServer, ServerConfig
    from httplessons.http import html_page, json_response
    from httplessons.middleware import LoggingMiddleware

    app = HTTPServer(ServerConfig(port=5000))
    app.use(LoggingMiddleware("simple"))

    @app.get("/")
    def home(request):
        return html_page("<h1>Home Page</h1>")

    @app.get("/api/products/:productId")
    def product(request):
        return json_response({"id": request.path_params["productId"]})

    app.run()

=============================================================================
"""

__version__ = "1.0.0"

from .server import HTTPServer, create_app, create_server
from .config import ServerConfig

__all__ = ["HTTPServer", "ServerConfig", "create_app", "create_server", "__version__"]
