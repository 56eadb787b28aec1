"""
=============================================================================
MIDDLEWARE
=============================================================================

Middleware is code that runs BETWEEN receiving a request and calling
the route handler:

    Incoming Request
         │
         ▼
    ┌──────────────────────┐
    │ ErrorHandlerMiddleware│ ──► turns exceptions into JSON errors
    └──────────┬───────────┘
               ▼
    ┌──────────────────────┐
    │ LoggingMiddleware     │ ──► "[2026] GET /about?user=john"
    └──────────┬───────────┘
               ▼
    ┌──────────────────────┐
    │ AuthorizeMiddleware   │ ──► 401 unless ?user= is present
    └──────────┬───────────┘
               ▼
    ┌──────────────────────┐
    │ Router → Handler      │ ──► the actual page
    └──────────────────────┘

Three ways to register one (see the middleware lesson):

    app.use(mw)                       every request
    app.use(mw, path="/api")          only /api and below
    @app.get("/x", middleware=[mw])   only this route

=============================================================================
"""

from .base import (
    Middleware,
    MiddlewareError,
    MiddlewarePipeline,
    FunctionMiddleware,
    PathScopedMiddleware,
    function_middleware,
)
from .logging import LoggingMiddleware
from .authorize import AuthorizeMiddleware
from .errors import ErrorHandlerMiddleware

__all__ = [
    # Base classes
    "Middleware",
    "MiddlewareError",
    "MiddlewarePipeline",
    "FunctionMiddleware",
    "PathScopedMiddleware",
    "function_middleware",

    # Built-in middleware
    "LoggingMiddleware",
    "AuthorizeMiddleware",
    "ErrorHandlerMiddleware",
]
