"""
Request handlers shipped with the framework.

    StaticFileHandler  route-style file serving (404 when missing)
    StaticFiles        middleware-style file serving (falls through when missing)
"""

from .static import StaticFileHandler, StaticFiles, serve_static

__all__ = [
    "StaticFileHandler",
    "StaticFiles",
    "serve_static",
]
