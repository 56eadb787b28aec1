"""
Error-handling middleware.

Sits at the top of the pipeline and turns exceptions raised anywhere
below it into JSON error responses:

    HTTPError("Product not found", 404)  →  404 {"error": "Product not found"}
    KeyError("oops")                     →  500 {"error": "Internal Server Error"}

Unexpected exceptions are logged with their traceback. ``expose_details``
puts the exception text in the 500 body, which helps while learning and
should stay off for anything public.
"""

import logging

from .base import Middleware, NextHandler
from ..http.errors import HTTPError
from ..http.request import HTTPRequest
from ..http.response import HTTPResponse, json_response
from ..http.status_codes import HTTPStatus


logger = logging.getLogger(__name__)


class ErrorHandlerMiddleware(Middleware):

    def __init__(self, expose_details: bool = False):
        self.expose_details = expose_details

    def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        try:
            return next(request)
        except HTTPError as e:
            logger.warning(f"{request.method} {request.path} failed: {e.status_code} {e.message}")
            return json_response({"error": e.message}, e.status_code)
        except Exception as e:
            logger.exception(f"Unhandled error in {request.method} {request.path}")
            message = str(e) if self.expose_details and str(e) else "Internal Server Error"
            return json_response({"error": message}, HTTPStatus.INTERNAL_SERVER_ERROR)
