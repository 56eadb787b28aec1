"""
=============================================================================
LESSON: HTTP BASICS
=============================================================================

No router, no middleware. One listener function receives EVERY request
and decides what to send back by comparing the URL itself:

    request ──► listener(request, res)
                    │
                    ├── url == "/"        → 200 welcome page
                    ├── url == "/about"   → 200 about page
                    └── anything else     → 404 "Page not found"

Each branch follows the same three steps:

    res.write_head(status, headers)     status line + headers
    res.write(body)                     body
    res.end()                           done, exactly once

Note that the URL includes the query string: "/about?x=1" is NOT
"/about" here. Matching paths properly is what a router is for.

=============================================================================
"""

import logging
from typing import Optional

from ..config import ServerConfig
from ..http import HTTPRequest, ResponseWriter
from ..pages import heading
from ..server import HTTPServer, create_server


logger = logging.getLogger(__name__)

HOME_PAGE = heading("Welcome to our app home page !!")
ABOUT_PAGE = heading("We are an awesome app, check us out !!")
NOT_FOUND_PAGE = heading("Page not found ):", color="red")

_HTML = {"content-type": "text/html"}


def listener(request: HTTPRequest, res: ResponseWriter) -> None:
    logger.info("New user request has arrived")
    url = request.url
    logger.info(f"Req URL {url}")

    if url == "/":
        res.write_head(200, _HTML)
        res.write(HOME_PAGE)
        res.end()
        return

    if url == "/about":
        res.write_head(200, _HTML)
        res.write(ABOUT_PAGE)
        res.end()
        return

    res.write_head(404, _HTML)
    res.write(NOT_FOUND_PAGE)
    res.end()


def create_app(config: Optional[ServerConfig] = None) -> HTTPServer:
    return create_server(listener, config)
