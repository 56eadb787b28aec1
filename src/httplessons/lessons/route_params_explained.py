"""
=============================================================================
LESSON: ROUTE AND QUERY PARAMS, DONE CAREFULLY
=============================================================================

Same URLs as route_params.py, with the rough edges handled:

    ┌──────────────────────────────┬──────────────────┬─────────────────────┐
    │ Request                      │ Loose version    │ This version        │
    ├──────────────────────────────┼──────────────────┼─────────────────────┤
    │ /api/products/abc            │ 404 HTML         │ 400 JSON, "received"│
    │ /api/products/9999           │ 404 HTML         │ 404 JSON, searchedId│
    │ /api/v1/query?search=WOODEN  │ no match         │ same as "wooden"    │
    │ /api/v1/query?limit=-5       │ drops 5 items    │ limit ignored       │
    │ /api/v1/query?limit=abc      │ empty list       │ limit ignored       │
    │ no match                     │ {searchSuccess}  │ {success, message}  │
    └──────────────────────────────┴──────────────────┴─────────────────────┘

Try these:

    /api/products
    /api/products/1
    /api/products/abc                   (what error?)
    /api/v1/query?search=wooden
    /api/v1/query?search=WOODEN         (case test)
    /api/v1/query?search=xyz&limit=2
    /api/v1/query?limit=-5              (what happens?)

=============================================================================
"""

import logging
from typing import Optional

from ..catalog import (
    basic_info, find_product, json_number, parse_limit, parse_product_id, search_products,
)
from ..config import ServerConfig
from ..data import PRODUCTS
from ..http import HTTPRequest, HTTPResponse, HTTPStatus, html_page, json_response
from ..pages import not_found_page
from ..server import HTTPServer
from .route_params import ABOUT_PAGE, HOME_PAGE, MULTI_PARAM_PATH


logger = logging.getLogger(__name__)


def create_app(config: Optional[ServerConfig] = None) -> HTTPServer:
    app = HTTPServer(config)

    @app.get("/", name="home")
    def home(request: HTTPRequest) -> HTTPResponse:
        return html_page(HOME_PAGE)

    @app.get("/api/products", name="products")
    def products(request: HTTPRequest) -> HTTPResponse:
        return json_response(basic_info(PRODUCTS))

    @app.get("/api/products/:productId", name="product")
    def product(request: HTTPRequest) -> HTTPResponse:
        raw_id = request.path_params["productId"]

        try:
            product_id = parse_product_id(raw_id)
        except ValueError:
            return json_response(
                {"error": "Invalid product ID. Must be a number.", "received": raw_id},
                HTTPStatus.BAD_REQUEST,
            )

        selected = find_product(PRODUCTS, product_id)
        if selected is None:
            return json_response(
                {"error": "Product not found", "searchedId": json_number(product_id)},
                HTTPStatus.NOT_FOUND,
            )

        return json_response(selected)

    @app.get(MULTI_PARAM_PATH, name="product_review")
    def product_review(request: HTTPRequest) -> HTTPResponse:
        logger.info(f"All route params received: {request.path_params}")
        return json_response({
            "message": "Successfully processed all your route params",
            "params": dict(request.path_params),
            "note": "In real app, these would be validated and used to fetch data",
        })

    @app.get("/api/v1/query", name="query")
    def query(request: HTTPRequest) -> HTTPResponse:
        logger.info(f"Received query params: {request.query_params}")

        results = search_products(
            PRODUCTS,
            search=request.get_query("search"),
            limit=parse_limit(request.get_query("limit")),
        )

        if not results:
            return json_response({
                "success": True,
                "message": "No products matched your search criteria",
                "data": [],
            })

        return json_response({"success": True, "count": len(results), "data": results})

    @app.get("/about", name="about")
    def about(request: HTTPRequest) -> HTTPResponse:
        return html_page(ABOUT_PAGE)

    @app.not_found
    def resource_not_found(request: HTTPRequest) -> HTTPResponse:
        logger.info(f"404 - {request.method} {request.path} not found")
        return html_page(not_found_page(), HTTPStatus.NOT_FOUND)

    return app
