"""
=============================================================================
LESSONS
=============================================================================

Each lesson is a module with ``create_app(config=None) -> HTTPServer``.
They build on each other, from a bare listener to a small REST API:

    http-basics               one listener, if/else on the URL
    http-app                  same, serving a real page with its assets
    framework-basics          router and a catch-all 404
    framework-app             static middleware plus one route
    all-static                static middleware only
    basic-json                JSON responses
    route-params              :params and ?query, the loose way
    route-params-explained    ... and the careful way
    middleware                logger and authorize middleware
    middleware-explained      ... plus error handling and a 404 fallback
    methods                   POST/PUT/DELETE, JSON and form bodies

=============================================================================
"""

from typing import Callable

from ..server import HTTPServer
from . import (
    all_static,
    basic_json,
    framework_app,
    framework_basics,
    http_app,
    http_basics,
    methods_app,
    middleware_explained,
    middleware_usage,
    route_params,
    route_params_explained,
)


AppFactory = Callable[..., HTTPServer]

LESSONS: dict[str, tuple[AppFactory, str]] = {
    "http-basics": (http_basics.create_app, "Raw listener with manual URL matching"),
    "http-app": (http_app.create_app, "Raw listener serving the navbar app"),
    "framework-basics": (framework_basics.create_app, "Router with home, about and a catch-all 404"),
    "framework-app": (framework_app.create_app, "Static public/ files plus a route for /"),
    "all-static": (all_static.create_app, "Everything served from public/"),
    "basic-json": (basic_json.create_app, "Products as JSON"),
    "route-params": (route_params.create_app, "Route and query params, loose version"),
    "route-params-explained": (route_params_explained.create_app, "Route and query params with validation"),
    "middleware": (middleware_usage.create_app, "Logger and authorize middleware"),
    "middleware-explained": (middleware_explained.create_app, "Middleware with error handling and 404 fallback"),
    "methods": (methods_app.create_app, "HTTP methods, JSON and form bodies, people API"),
}

# Lessons whose create_app() takes a middleware ``scope`` argument
SCOPED_LESSONS = ("middleware", "middleware-explained")


def get_lesson(name: str) -> AppFactory:
    """
    Look up a lesson factory by name.

    Raises:
        KeyError: If there is no such lesson.
    """
    try:
        return LESSONS[name][0]
    except KeyError:
        raise KeyError(f"Unknown lesson {name!r}. Available: {', '.join(LESSONS)}") from None


__all__ = ["LESSONS", "SCOPED_LESSONS", "get_lesson"]
