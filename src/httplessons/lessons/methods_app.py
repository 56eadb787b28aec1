"""
=============================================================================
LESSON: HTTP METHODS AND REQUEST BODIES
=============================================================================

    ┌────────────────────────────────────────────────────────────────────┐
    │ app.use(StaticFiles(methods-public/))     index.html, login form,  │
    │                                           javascript.html          │
    │ app.include("/api/people", people)        GET POST PUT DELETE      │
    │ app.post("/login")                        HTML form submission     │
    └────────────────────────────────────────────────────────────────────┘

Two kinds of request body arrive here:

    <form method="POST" action="/login">        axios.post("/api/people",
      name=john                                   {"name": "john"})

    Content-Type: application/x-www-form-       Content-Type:
                  urlencoded                      application/json
    request.form  → {"name": "john"}            request.json → {"name": "john"}

request.payload picks whichever one the Content-Type announces, so the
people handlers accept both.

=============================================================================
"""

import logging
from html import escape
from typing import Optional

from ..config import ServerConfig
from ..data import PEOPLE
from ..handlers import StaticFiles
from ..http import HTTPRequest, HTTPResponse, HTTPStatus, Router, html_page
from ..pages import cannot_page
from ..people import PeopleController, PeopleStore, register_routes
from ..server import HTTPServer


logger = logging.getLogger(__name__)

WELCOME_PAGE = (
    '<h1 style="font-family: cursive;"> Welcome dear '
    '<span style="color: green">{name}</span></h1>'
)
INVALID_LOGIN_PAGE = (
    '<h1 style="font-family: cursive; color: red">Please provide valid user info</h1>'
)


def login(request: HTTPRequest) -> HTTPResponse:
    logger.info(f"Post request body - FORM-ENCODED {request.form}")
    name = request.form.get("name")

    if name:
        return html_page(WELCOME_PAGE.format(name=escape(name)))

    return html_page(INVALID_LOGIN_PAGE, HTTPStatus.BAD_REQUEST)


def create_app(
    config: Optional[ServerConfig] = None,
    store: Optional[PeopleStore] = None,
) -> HTTPServer:
    """
    Args:
        config: Server configuration
        store: People store to serve; a fresh copy of PEOPLE by default
    """
    app = HTTPServer(config)
    app.use(StaticFiles(app.config.assets_path / "methods-public"))

    if store is None:
        store = PeopleStore(PEOPLE)

    people = register_routes(Router(), PeopleController(store))
    app.include("/api/people", people)
    app.post("/login", name="login")(login)

    @app.not_found
    def resource_not_found(request: HTTPRequest) -> HTTPResponse:
        return html_page(cannot_page(request.method, request.path), HTTPStatus.NOT_FOUND)

    return app
