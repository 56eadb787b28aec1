"""
=============================================================================
URL ROUTER
=============================================================================

Maps (method, path) pairs to handler functions, extracting path
parameters on the way.

=============================================================================
PATTERN SYNTAX
=============================================================================

    ┌──────────────────────────────────┬────────────────────────────────────┐
    │ Pattern                          │ Matches                            │
    ├──────────────────────────────────┼────────────────────────────────────┤
    │ /about                           │ /about only                        │
    │ /api/products/:productId         │ /api/products/1                    │
    │                                  │   → {"productId": "1"}             │
    │ /api/products/:productId/        │ /api/products/1/userPreferences/   │
    │   userPreferences/:userPrefId/   │   7/reviews/3                      │
    │   reviews/:reviewId              │   → three params                   │
    │ /*any                            │ every path ("catch-all")           │
    └──────────────────────────────────┴────────────────────────────────────┘

    :name  captures exactly one path segment (no slashes)
    *name  captures the rest of the path, slashes included

Path parameters are always strings. "/api/products/1" gives "1", not 1;
converting (and rejecting "abc") is the handler's job. Patterns match
the path as sent and params are decoded afterwards, so
"/api/products/a%2Fb" gives {"productId": "a/b"}.

=============================================================================
MATCHING ORDER
=============================================================================

First registered, first matched. That's why the catch-all 404 route of
every lesson is registered LAST:

    app.get("/")             ─┐
    app.get("/about")         ├─ tried in this order
    app.all("/*any")         ─┘  ← would swallow everything if it came first

When nothing matches, a registered not_found handler answers. Without
one, a path that exists under another method gets 405 with an Allow
header, anything else a JSON 404.

Every GET route also answers HEAD, with the body dropped.

=============================================================================
"""

from dataclasses import dataclass, field, replace
from typing import Callable, Optional, Dict, Any, List, Sequence
from urllib.parse import unquote
import re

from .request import HTTPRequest
from .response import HTTPResponse, not_found as not_found_response, method_not_allowed


Handler = Callable[[HTTPRequest], HTTPResponse]

ALL_METHODS = ["DELETE", "GET", "HEAD", "OPTIONS", "PATCH", "POST", "PUT"]


@dataclass
class Route:
    """
    A URL pattern bound to a handler.

        @router.get("/api/products/:productId", name="product")
        def single_product(request):
            ...

        Route(path="/api/products/:productId", method="GET",
              handler=single_product, name="product",
              _param_names=["productId"])
    """

    path: str
    method: Optional[str]                # None = any method (router.all)
    handler: Handler
    name: Optional[str] = None
    middleware: List[Any] = field(default_factory=list)
    meta: Dict[str, Any] = field(default_factory=dict)

    _pattern: Optional[re.Pattern] = field(default=None, repr=False)
    _param_names: List[str] = field(default_factory=list, repr=False)


@dataclass
class RouteMatch:
    """A matched route plus its extracted path parameters."""

    route: Route
    params: Dict[str, str]


@dataclass
class _Mount:
    prefix: str
    router: "Router"

    def sub_path(self, path: str) -> Optional[str]:
        """The part of ``path`` below this mount point, or None."""
        if path == self.prefix:
            return "/"
        if path.startswith(self.prefix + "/"):
            return path[len(self.prefix):]
        return None


def _normalize(path: str) -> str:
    return "/" + path.strip("/") if path != "/" else "/"


class Router:
    """
    HTTP request router with dynamic path parameters.

    Decorator API:

        router = Router()

        @router.get("/api/products")
        def products(request):
            return ok(basic_info(PRODUCTS))

        @router.all("/*any")
        def fallback(request):
            return html_page(not_found_page(), 404)

    Mounting a self-contained router under a prefix:

        people = Router()

        @people.get("/")
        def list_people(request): ...

        router.include("/api/people", people)   # GET /api/people

    Per-route middleware runs only for that route:

        @router.get("/api/v1/products", middleware=[LoggingMiddleware()])
        def products_page(request): ...
    """

    def __init__(self, prefix: str = ""):
        self.prefix = prefix.rstrip("/")
        self._entries: List[Any] = []          # Route or _Mount, in order
        self._named_routes: Dict[str, Route] = {}
        self._not_found_handler: Optional[Handler] = None

    # =========================================================================
    # ROUTE REGISTRATION
    # =========================================================================

    def add_route(
        self,
        path: str,
        handler: Handler,
        method: Optional[str] = None,
        name: Optional[str] = None,
        middleware: Optional[Sequence[Any]] = None,
        **meta: Any
    ) -> Route:
        """
        Register a route.

        Args:
            path: URL pattern (e.g., /api/products/:productId)
            handler: Function taking a request and returning a response
            method: HTTP method (None for any method)
            name: Optional route name for url_for()
            middleware: Middleware that runs only for this route
            **meta: Additional metadata (route.meta)
        """
        full_path = self.prefix + path if path != "/" or not self.prefix else self.prefix
        pattern, param_names = self._compile_pattern(full_path)

        route = Route(
            path=full_path,
            method=method.upper() if method else None,
            handler=handler,
            name=name,
            middleware=list(middleware or []),
            meta=meta,
            _pattern=pattern,
            _param_names=param_names,
        )
        self._entries.append(route)

        if name:
            self._named_routes[name] = route

        return route

    def _compile_pattern(self, path: str) -> tuple[re.Pattern, List[str]]:
        """
        Compile a path pattern into a regex.

            "/api/products/:productId"
                → ^/api/products/(?P<productId>[^/]+)$

            "/*any"
                → ^/(?P<any>.*)$
        """
        param_names: List[str] = []
        regex_parts = ["^"]

        for segment in path.split("/"):
            if not segment:
                continue

            regex_parts.append("/")

            if segment.startswith(":"):
                param_name = segment[1:]
                param_names.append(param_name)
                regex_parts.append(f"(?P<{param_name}>[^/]+)")
            elif segment.startswith("*"):
                param_name = segment[1:] or "wildcard"
                param_names.append(param_name)
                regex_parts.append(f"(?P<{param_name}>.*)")
                break  # wildcard consumes the rest
            else:
                regex_parts.append(re.escape(segment))

        if len(regex_parts) == 1:
            regex_parts.append("/")  # the root path "/"

        regex_parts.append("$")
        return re.compile("".join(regex_parts)), param_names

    # =========================================================================
    # ROUTE MATCHING
    # =========================================================================

    def match(self, method: str, path: str) -> Optional[RouteMatch]:
        """
        Find the first route matching ``method`` and ``path``.

        Routes and mounted routers are tried in registration order.
        """
        path = _normalize(path)
        method = method.upper()
        accepted = (method, "GET") if method == "HEAD" else (method,)

        for entry in self._entries:
            if isinstance(entry, _Mount):
                sub_path = entry.sub_path(path)
                if sub_path is not None:
                    result = entry.router.match(method, sub_path)
                    if result:
                        return result
                continue

            if entry.method and entry.method not in accepted:
                continue

            found = entry._pattern.match(path) if entry._pattern else None
            if found:
                params = {name: unquote(value) for name, value in found.groupdict().items()}
                return RouteMatch(route=entry, params=params)

        return None

    def get_allowed_methods(self, path: str) -> List[str]:
        """
        Methods that have a route for ``path`` (used for the Allow header).
        """
        path = _normalize(path)
        methods = set()

        for entry in self._entries:
            if isinstance(entry, _Mount):
                sub_path = entry.sub_path(path)
                if sub_path is not None:
                    methods.update(entry.router.get_allowed_methods(sub_path))
                continue

            if entry._pattern and entry._pattern.match(path):
                if entry.method is None:
                    return list(ALL_METHODS)
                methods.add(entry.method)

        if "GET" in methods:
            methods.add("HEAD")
        return sorted(methods)

    def handle(self, request: HTTPRequest) -> HTTPResponse:
        """
        Route a request to its handler.

        1. Find matching route, inject request.path_params
        2. Run route-level middleware (if any) around the handler
        3. No match: the not-found handler if one is registered, else 405
           when the path exists for other methods, else a JSON 404

        Answers to HEAD requests never carry a body.
        """
        response = self._dispatch(request)
        if request.method == "HEAD":
            response.drop_body()
        return response

    def _dispatch(self, request: HTTPRequest) -> HTTPResponse:
        match = self.match(request.method, request.path)

        if match:
            request.path_params = match.params
            route = match.route
            if route.middleware:
                return self._wrap_route(route)(request)
            return route.handler(request)

        if self._not_found_handler is not None:
            return self._not_found_handler(request)

        allowed = self.get_allowed_methods(request.path)
        if allowed:
            return method_not_allowed(allowed)

        return not_found_response(f"No route matches {request.path}")


    def _wrap_route(self, route: Route) -> Handler:
        # Imported here: the middleware package itself imports from http.
        from ..middleware.base import MiddlewarePipeline

        return MiddlewarePipeline().use(*route.middleware).wrap(route.handler)

    # =========================================================================
    # DECORATOR-STYLE ROUTE REGISTRATION
    # =========================================================================

    def route(
        self,
        path: str,
        method: Optional[str] = None,
        name: Optional[str] = None,
        middleware: Optional[Sequence[Any]] = None,
        **meta: Any
    ) -> Callable[[Handler], Handler]:
        """
        Base decorator; ``get``, ``post`` etc. are shortcuts for it.

            @router.route("/api/people", method="GET")
            def list_people(request):
                return ok([])
        """
        def decorator(handler: Handler) -> Handler:
            self.add_route(path, handler, method, name, middleware, **meta)
            return handler
        return decorator

    def get(self, path: str, name: Optional[str] = None, middleware=None, **meta: Any):
        """Register a GET route."""
        return self.route(path, "GET", name, middleware, **meta)

    def post(self, path: str, name: Optional[str] = None, middleware=None, **meta: Any):
        """Register a POST route."""
        return self.route(path, "POST", name, middleware, **meta)

    def put(self, path: str, name: Optional[str] = None, middleware=None, **meta: Any):
        """Register a PUT route."""
        return self.route(path, "PUT", name, middleware, **meta)

    def delete(self, path: str, name: Optional[str] = None, middleware=None, **meta: Any):
        """Register a DELETE route."""
        return self.route(path, "DELETE", name, middleware, **meta)

    def patch(self, path: str, name: Optional[str] = None, middleware=None, **meta: Any):
        """Register a PATCH route."""
        return self.route(path, "PATCH", name, middleware, **meta)

    def all(self, path: str, name: Optional[str] = None, middleware=None, **meta: Any):
        """Register a route for every method (catch-alls use this)."""
        return self.route(path, None, name, middleware, **meta)

    def not_found(self, handler: Handler) -> Handler:
        """
        Register the handler used when no route matches at all.

            @router.not_found
            def fallback(request):
                logger.info(f"404 - {request.method} {request.path} not found")
                return html_page(not_found_page(), 404)
        """
        self._not_found_handler = handler
        return handler

    # =========================================================================
    # ROUTER COMPOSITION
    # =========================================================================

    def include(self, prefix: str, router: "Router") -> None:
        """
        Mount a sub-router at ``prefix``.

        The sub-router sees paths relative to its mount point, so the same
        router can be mounted anywhere:

            people = Router()
            @people.put("/:personId")
            def update(request): ...

            app.include("/api/people", people)   # PUT /api/people/3
        """
        self._entries.append(_Mount(self.prefix + _normalize(prefix), router))

    def group(self, prefix: str) -> "Router":
        """
        Create and mount an empty router for a group of related routes.

            v1 = router.group("/api/v1")

            @v1.get("/products")      # Matches /api/v1/products
            def products(request): ...
        """
        sub_router = Router()
        self.include(prefix, sub_router)
        return sub_router

    # =========================================================================
    # UTILITY METHODS
    # =========================================================================

    def url_for(self, name: str, **params: str) -> Optional[str]:
        """
        Generate the URL of a named route (reverse routing).

            router.url_for("product", productId="1")  # "/api/products/1"
        """
        for route in self.routes():
            if route.name == name:
                url = route.path
                for param_name, value in params.items():
                    url = url.replace(f":{param_name}", str(value))
                    url = url.replace(f"*{param_name}", str(value))
                return url
        return None

    def routes(self) -> List[Route]:
        """
        All registered routes with their full paths, in matching order.
        """
        all_routes: List[Route] = []
        for entry in self._entries:
            if isinstance(entry, _Mount):
                for route in entry.router.routes():
                    path = entry.prefix if route.path == "/" else entry.prefix + route.path
                    all_routes.append(replace(route, path=path))
            else:
                all_routes.append(entry)
        return all_routes

    def print_routes(self) -> None:
        """
        Print all registered routes:

            Registered Routes:
            ------------------------------------------------------------
              GET      /
              GET      /about
              ANY      /*any
            ------------------------------------------------------------
        """
        print("\nRegistered Routes:")
        print("-" * 60)
        for route in self.routes():
            method = route.method or "ANY"
            print(f"  {method:8} {route.path}")
        print("-" * 60)
