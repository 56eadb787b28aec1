"""
=============================================================================
LESSON: SERVING A SMALL WEB APP BY HAND
=============================================================================

The navbar app is four files. A browser asks for them one by one:

    GET /                  index.html      (references the other three)
    GET /styles.css        styles.css
    GET /logo.svg          logo.svg
    GET /browser-app.js    browser-app.js

Without a static-file middleware every one of them needs its own branch
AND the right Content-Type. Send a stylesheet as text/html and the
browser silently ignores it.

The files are read ONCE, when the app is created, not per request.

=============================================================================
"""

import logging
from typing import Optional

from ..config import ServerConfig
from ..http import HTTPRequest, ResponseWriter
from ..server import HTTPServer, create_server
from .http_basics import ABOUT_PAGE, NOT_FOUND_PAGE


logger = logging.getLogger(__name__)

# url → (file, content type)
NAVBAR_FILES = {
    "/": ("index.html", "text/html"),
    "/styles.css": ("styles.css", "text/css"),
    "/logo.svg": ("logo.svg", "image/svg+xml"),
    "/browser-app.js": ("browser-app.js", "text/javascript"),
}


def make_listener(pages: dict[str, tuple[bytes, str]]):
    """
    Build the listener around preloaded ``url → (content, content type)``.
    """

    def listener(request: HTTPRequest, res: ResponseWriter) -> None:
        logger.info("New user request has arrived")
        url = request.url
        logger.info(f"Req URL {url}")

        if url in pages:
            content, content_type = pages[url]
            res.write_head(200, {"content-type": content_type})
            res.write(content)
            res.end()
            return

        if url == "/about":
            res.write_head(200, {"content-type": "text/html"})
            res.write(ABOUT_PAGE)
            res.end()
            return

        res.write_head(404, {"content-type": "text/html"})
        res.write(NOT_FOUND_PAGE)
        res.end()

    return listener


def create_app(config: Optional[ServerConfig] = None) -> HTTPServer:
    config = config or ServerConfig()
    navbar_dir = config.assets_path / "navbar-app"

    pages = {}
    for url, (filename, content_type) in NAVBAR_FILES.items():
        pages[url] = ((navbar_dir / filename).read_bytes(), content_type)
    logger.debug(f"Loaded {len(pages)} navbar-app files from {navbar_dir}")

    return create_server(make_listener(pages), config)
