"""
=============================================================================
AUTHORIZE MIDDLEWARE
=============================================================================

A deliberately toy "authentication" check: the caller is authorised
when the query string names a user.

    GET /api/v1/products?user=john
        │
        ▼
    ┌───────────────────┐  ?user= present   ┌──────────────────────────────┐
    │ AuthorizeMiddleware│ ───────────────► │ request.context["user"] =    │
    └─────────┬─────────┘                   │   {"name": "john", "id": 3}  │
              │                             │ return next(request)         │
              │ ?user= missing or empty     └──────────────────────────────┘
              ▼
    401 Unauthorized (HTML), handler never runs

Real applications check a session cookie or a bearer token here; the
shape of the middleware stays the same.

=============================================================================
"""

import logging

from .base import Middleware, NextHandler
from ..http.request import HTTPRequest
from ..http.response import HTTPResponse, html_page
from ..http.status_codes import HTTPStatus


logger = logging.getLogger(__name__)


UNAUTHORIZED_PAGE = (
    "<h1 style='font-family: cursive; font-size: 28px; color: red'>Unauthorized Access</h1>"
    "<p style='font-family: cursive'>You are not authorized to access this resource.</p>"
    "<p style='font-family: cursive'>Please provide a valid {param} parameter. "
    "Example: ?{param}=yourname</p>"
)


class AuthorizeMiddleware(Middleware):
    """
    Attach a user from the query string, or stop the request with 401.

    Args:
        param: Query parameter that carries the user name
        user_id: Id given to every authorised user
    """

    def __init__(self, param: str = "user", user_id: int = 3):
        self.param = param
        self.user_id = user_id

    def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        name = request.get_query(self.param)

        if name:
            request.context["user"] = {"name": name, "id": self.user_id}
            logger.debug(f"Authorized user {name!r} for {request.path}")
            return next(request)

        logger.info(f"Unauthorized request: {request.method} {request.url}")
        return html_page(UNAUTHORIZED_PAGE.format(param=self.param), HTTPStatus.UNAUTHORIZED)
