"""
=============================================================================
STATIC FILE SERVING
=============================================================================

Serves files from a directory on disk: the navbar app's HTML, CSS,
JavaScript and SVG logo, or the forms of the methods lesson.

Two ways to use it:

    ┌─────────────────────────────────────────────────────────────────────┐
    │ AS A ROUTE HANDLER                                                  │
    │                                                                     │
    │   static = StaticFileHandler("assets/public", url_prefix="/static") │
    │   app.get("/static/*path")(static.handle)                           │
    │                                                                     │
    │   Missing file → 404. Only requests under /static reach it.         │
    ├─────────────────────────────────────────────────────────────────────┤
    │ AS MIDDLEWARE ("serve the public folder")                           │
    │                                                                     │
    │   app.use(StaticFiles("assets/public"))                             │
    │                                                                     │
    │   GET /styles.css  → file exists → served, router never runs        │
    │   GET /api/items   → no such file → next(request) → router          │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
SECURITY: PATH TRAVERSAL
=============================================================================

    GET /../../../etc/passwd

The request parser already rejects ".." in paths; the handler checks
again after resolving symlinks:

    full_path = (root_dir / user_input).resolve()
    full_path.relative_to(root_dir)     # raises ValueError if outside

Anything outside the root gets 403 Forbidden.

=============================================================================
CACHING
=============================================================================

Each file gets an ETag built from its mtime and size. A client that
sends it back in If-None-Match gets 304 Not Modified with no body.

=============================================================================
"""

import logging
from pathlib import Path
from typing import Optional
from datetime import datetime, timezone
from urllib.parse import unquote

from ..http.request import HTTPRequest
from ..http.response import (
    HTTPResponse, ResponseBuilder, format_http_date,
    not_found, forbidden, json_response,
)
from ..http.status_codes import HTTPStatus
from ..http.mime_types import get_content_type
from ..middleware.base import Middleware, NextHandler


logger = logging.getLogger(__name__)


class StaticFileHandler:
    """
    Handler for serving static files.

        Request: GET /static/css/style.css

        1. Strip url_prefix → "css/style.css"
        2. Resolve under root_dir
        3. Security check: still inside root_dir?
        4. Directory: serve index_file (or list, if enabled)
        5. File: check ETag, serve with Content-Type and cache headers

    Args:
        root_dir: Directory to serve. Must exist.
        url_prefix: Stripped from the request path ("" serves from "/").
        index_file: File served for directory requests; None disables it.
        cache_max_age: Cache-Control max-age in seconds.
        enable_directory_listing: Render an HTML index for directories
            without an index file.
    """

    def __init__(
        self,
        root_dir: str | Path,
        url_prefix: str = "",
        index_file: Optional[str] = "index.html",
        cache_max_age: int = 3600,
        enable_directory_listing: bool = False,
    ):
        self.root_dir = Path(root_dir).resolve()
        self.url_prefix = url_prefix.rstrip("/")
        self.index_file = index_file
        self.cache_max_age = cache_max_age
        self.enable_directory_listing = enable_directory_listing

        if not self.root_dir.is_dir():
            raise ValueError(f"Static root directory does not exist: {root_dir}")

    # =========================================================================
    # PATH RESOLUTION
    # =========================================================================

    def _relative_path(self, request: HTTPRequest) -> str:
        file_path = request.path_params.get("path", "")
        if not file_path:
            file_path = unquote(request.path)
            if self.url_prefix and file_path.startswith(self.url_prefix):
                file_path = file_path[len(self.url_prefix):]
        return file_path.lstrip("/")

    def _full_path(self, relative: str) -> Optional[Path]:
        """Resolved path, or None if it escapes the root directory."""
        full_path = (self.root_dir / relative).resolve()
        try:
            full_path.relative_to(self.root_dir)
        except ValueError:
            logger.warning(f"Path traversal attempt: {relative}")
            return None
        return full_path

    def resolve(self, request: HTTPRequest) -> Optional[Path]:
        """
        The file this request would be served, or None.

        None covers: outside the root, missing file, and a directory
        without an index file.
        """
        full_path = self._full_path(self._relative_path(request))
        if full_path is None:
            return None

        if full_path.is_dir():
            if not self.index_file:
                return None
            full_path = full_path / self.index_file

        return full_path if full_path.is_file() else None

    # =========================================================================
    # REQUEST HANDLING
    # =========================================================================

    def handle(self, request: HTTPRequest) -> HTTPResponse:
        """
        Handle a static file request (route handler style).
        """
        relative = self._relative_path(request)
        full_path = self._full_path(relative)
        if full_path is None:
            return forbidden("Access denied")

        if full_path.is_dir():
            index_path = full_path / self.index_file if self.index_file else None
            if index_path is not None and index_path.is_file():
                full_path = index_path
            elif self.enable_directory_listing:
                return self._directory_listing(full_path, request.path)
            else:
                return forbidden("Directory listing not allowed")

        if not full_path.is_file():
            return not_found(f"File not found: {relative}")

        return self.serve_file(full_path, request)

    def serve_file(self, path: Path, request: HTTPRequest) -> HTTPResponse:
        """
        Serve one file with Content-Type, ETag, Last-Modified and
        Cache-Control. HEAD requests get the headers without the body.
        """
        try:
            stat = path.stat()
            size = stat.st_size
            mtime = datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc)
            etag = f'"{int(stat.st_mtime)}-{size}"'

            if request.headers.get("if-none-match", "") == etag:
                return (ResponseBuilder()
                    .status(HTTPStatus.NOT_MODIFIED)
                    .header("ETag", etag)
                    .build())

            content = b"" if request.method == "HEAD" else path.read_bytes()

            return (ResponseBuilder()
                .status(HTTPStatus.OK)
                .header("Content-Type", get_content_type(path))
                .header("Content-Length", str(size))
                .header("ETag", etag)
                .header("Last-Modified", format_http_date(mtime))
                .header("Cache-Control", f"public, max-age={self.cache_max_age}")
                .body(content)
                .build())

        except PermissionError:
            return forbidden("Permission denied")
        except OSError as e:
            logger.error(f"Error serving file {path}: {e}")
            return json_response({"error": "Failed to read file"}, HTTPStatus.INTERNAL_SERVER_ERROR)

    def _directory_listing(self, path: Path, url_path: str) -> HTTPResponse:
        entries = []
        if path != self.root_dir:
            entries.append('<li><a href="../">../</a></li>')

        for entry in sorted(path.iterdir()):
            name = entry.name + ("/" if entry.is_dir() else "")
            entries.append(f'<li><a href="{name}">{name}</a></li>')

        html = (
            "<!DOCTYPE html>\n<html>\n<head>"
            f"<title>Index of {url_path}</title></head>\n<body>\n"
            f"<h1>Index of {url_path}</h1>\n<ul>{''.join(entries)}</ul>\n"
            "</body>\n</html>\n"
        )
        return ResponseBuilder().html(html).build()


class StaticFiles(Middleware):
    """
    Serve files from a directory before the router gets a chance.

        app.use(StaticFiles(public_dir))

    Only GET and HEAD are considered. When the path doesn't resolve to a
    file, the request continues down the pipeline untouched, so routes
    and the catch-all 404 still work.

    Pass ``index_file=None`` to keep "/" away from ``index.html`` and let
    a route answer it instead.
    """

    def __init__(
        self,
        root_dir: str | Path,
        index_file: Optional[str] = "index.html",
        cache_max_age: int = 0,
    ):
        self.handler = StaticFileHandler(
            root_dir,
            url_prefix="",
            index_file=index_file,
            cache_max_age=cache_max_age,
        )

    def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        if request.method not in ("GET", "HEAD"):
            return next(request)

        path = self.handler.resolve(request)
        if path is None:
            return next(request)

        logger.debug(f"Serving static file {path}")
        return self.handler.serve_file(path, request)


def serve_static(root_dir: str | Path, **kwargs) -> StaticFileHandler:
    """
    Factory for a route-style static handler.

        static = serve_static(public_dir, url_prefix="/static")
        app.get("/static/*path")(static.handle)
    """
    return StaticFileHandler(root_dir, **kwargs)
