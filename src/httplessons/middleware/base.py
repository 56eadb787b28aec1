"""
=============================================================================
BASE MIDDLEWARE INTERFACE
=============================================================================

Defines the middleware protocol and the pipeline that chains middleware
around a final handler (Chain of Responsibility).

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     ONE REQUEST, LINEAR PIPELINE                    │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                     │
    │   Request ─────────────────────────────────────────────────►        │
    │                                                                     │
    │   ┌──────────┐    ┌───────────┐    ┌──────────┐    ┌──────────┐     │
    │   │  Logger  │───►│ Authorize │───►│  Router  │───►│ Handler  │     │
    │   └──────────┘    └─────┬─────┘    └──────────┘    └──────────┘     │
    │                         │                                           │
    │                 no ?user= │ short-circuit: 401, handler never runs  │
    │                         ▼                                           │
    │   ◄──────────────────────────────────────────────── Response        │
    │                                                                     │
    └─────────────────────────────────────────────────────────────────────┘

Each middleware does exactly one of two things:

    1. return next(request)      → continue down the chain
    2. return <its own response> → stop here (short-circuit)

Forgetting to return anything is the classic middleware bug: the request
just hangs in a callback-style framework. Here the pipeline catches it
and raises MiddlewareError naming the culprit.

=============================================================================
"""

from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Union
import logging

from ..http.request import HTTPRequest
from ..http.response import HTTPResponse


logger = logging.getLogger(__name__)


# NextHandler is the signature for the next middleware or final handler.
NextHandler = Callable[[HTTPRequest], HTTPResponse]


class MiddlewareError(RuntimeError):
    """A middleware broke the contract (e.g. returned None)."""


class Middleware(ABC):
    """
    Abstract base class for middleware.

    =========================================================================
    THE MIDDLEWARE CONTRACT
    =========================================================================

        class Logger(Middleware):
            def __call__(self, request, next):
                # PRE-PROCESSING: look at / decorate the request
                print(request.method, request.url)

                # CONTINUE: hand over to the next link in the chain
                response = next(request)

                # POST-PROCESSING: look at / decorate the response
                return response

    =========================================================================
    """

    @abstractmethod
    def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        """
        Process the request: continue with ``next(request)`` or
        short-circuit with a response of its own.
        """
        pass

    @property
    def name(self) -> str:
        """Get the middleware name for logging."""
        return self.__class__.__name__


MiddlewareLike = Union[Middleware, Callable[[HTTPRequest, NextHandler], HTTPResponse]]


class MiddlewarePipeline:
    """
    Chains multiple middleware together with a final handler.

    First added = outermost:

        pipeline.use(Logger(), Authorize())
        handler = pipeline.wrap(router.handle)

            Logger ( Authorize ( router.handle ) )

    Request flows inward (Logger first), the response flows back outward.
    """

    def __init__(self):
        self._middleware: List[Middleware] = []

    def add(self, middleware: MiddlewareLike) -> "MiddlewarePipeline":
        """
        Add middleware to the pipeline.

        Plain ``(request, next)`` functions are accepted and wrapped in
        FunctionMiddleware.
        """
        if not isinstance(middleware, Middleware):
            middleware = FunctionMiddleware(middleware)
        self._middleware.append(middleware)
        logger.debug(f"Added middleware: {middleware.name}")
        return self

    def use(self, *middleware: MiddlewareLike) -> "MiddlewarePipeline":
        """
        Add several middleware at once, in order.

            pipeline.use(LoggingMiddleware("simple"), AuthorizeMiddleware())
        """
        for mw in middleware:
            self.add(mw)
        return self

    def wrap(self, handler: NextHandler) -> NextHandler:
        """
        Wrap a handler with all middleware in the pipeline.

        Given [MW1, MW2, MW3] we wrap in REVERSE order:

            current = handler
            current = MW3(current)
            current = MW2(current)
            current = MW1(current)      → MW1 → MW2 → MW3 → handler
        """
        current = handler
        for middleware in reversed(self._middleware):
            current = self._create_wrapped_handler(middleware, current)
        return current

    def _create_wrapped_handler(
        self,
        middleware: Middleware,
        next_handler: NextHandler
    ) -> NextHandler:
        """
        Closure that calls ``middleware`` with ``next_handler`` and checks
        that a response actually came back.
        """
        def wrapped(request: HTTPRequest) -> HTTPResponse:
            response = middleware(request, next_handler)
            if response is None:
                raise MiddlewareError(
                    f"Middleware {middleware.name} returned no response; "
                    f"it must return next(request) or its own response"
                )
            return response

        return wrapped

    def __len__(self) -> int:
        return len(self._middleware)

    def __iter__(self):
        return iter(self._middleware)


# =============================================================================
# FUNCTION MIDDLEWARE
# =============================================================================

class FunctionMiddleware(Middleware):
    """
    Wraps a plain function as middleware.

        def logger(request, next):
            print(request.method, request.url)
            return next(request)

        pipeline.add(FunctionMiddleware(logger))
    """

    def __init__(
        self,
        func: Callable[[HTTPRequest, NextHandler], HTTPResponse],
        name: Optional[str] = None
    ):
        self._func = func
        self._name = name or getattr(func, "__name__", type(func).__name__)

    def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        return self._func(request, next)

    @property
    def name(self) -> str:
        return self._name


def function_middleware(
    func: Callable[[HTTPRequest, NextHandler], HTTPResponse]
) -> FunctionMiddleware:
    """
    Decorator to create middleware from a function.

        @function_middleware
        def stamp(request, next):
            response = next(request)
            response.set_header("X-Lesson", "08")
            return response
    """
    return FunctionMiddleware(func)


# =============================================================================
# PATH-SCOPED MIDDLEWARE
# =============================================================================

class PathScopedMiddleware(Middleware):
    """
    Runs a middleware only for requests at or below a path prefix.

        app.use(AuthorizeMiddleware(), path="/api")

        GET /api/v1/products   → authorize runs
        GET /api               → authorize runs
        GET /apiary            → skipped (not a path segment match)
        GET /about             → skipped

    While it runs, request.base_url is the prefix, so the wrapped
    middleware sees request.mounted_url as "/v1/products". Everything
    after it in the chain sees the full URL again.
    """

    def __init__(self, prefix: str, middleware: MiddlewareLike):
        self.prefix = "/" + prefix.strip("/") if prefix.strip("/") else "/"
        if not isinstance(middleware, Middleware):
            middleware = FunctionMiddleware(middleware)
        self.middleware = middleware

    def applies_to(self, path: str) -> bool:
        if self.prefix == "/":
            return True
        return path == self.prefix or path.startswith(self.prefix + "/")

    def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        if not self.applies_to(request.path):
            return next(request)

        outer = request.base_url
        mounted = "" if self.prefix == "/" else self.prefix

        def leave_mount(req: HTTPRequest) -> HTTPResponse:
            req.base_url = outer
            try:
                return next(req)
            finally:
                req.base_url = mounted

        request.base_url = mounted
        try:
            return self.middleware(request, leave_mount)
        finally:
            request.base_url = outer

    @property
    def name(self) -> str:
        return f"{self.middleware.name}@{self.prefix}"
