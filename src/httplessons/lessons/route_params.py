"""
=============================================================================
LESSON: ROUTE PARAMS AND QUERY PARAMS
=============================================================================

ROUTE PARAMS are placeholders inside the path:

    pattern   /api/products/:productId
    request   /api/products/3
    params    {"productId": "3"}          ← always a STRING

QUERY PARAMS come after the "?" as key=value pairs joined with "&":

    /api/v1/query?search=sofa&limit=2
    query     {"search": ["sofa"], "limit": ["2"]}

This is the first, loose take on both:

    - the id is coerced with coerce_number(); anything that isn't a
      known id, "abc" included, is simply "Product not found"
    - search is CASE-SENSITIVE: "WOODEN" finds nothing
    - limit is sliced as given: "abc" means 0 items, "-1" drops the
      last item

route_params_explained.py fixes each of these.

=============================================================================
"""

import logging
from typing import Optional

from ..catalog import basic_info, coerce_number, find_product, search_products, slice_limit
from ..config import ServerConfig
from ..data import PRODUCTS
from ..http import HTTPRequest, HTTPResponse, HTTPStatus, html_page, json_response
from ..pages import heading, not_found_page
from ..server import HTTPServer


logger = logging.getLogger(__name__)

HOME_PAGE = heading("Home page", size=36) + ' <a href="/api/products">products</a>'
ABOUT_PAGE = heading("About page", size=36)
MULTI_PARAM_PATH = "/api/products/:productId/userPreferences/:userPreferenceId/reviews/:reviewId"


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
        product_id = coerce_number(request.path_params["productId"])
        selected = find_product(PRODUCTS, product_id)

        if selected is None:
            return html_page(heading("Product not found", color="red"), HTTPStatus.NOT_FOUND)

        return json_response(selected)

    @app.get(MULTI_PARAM_PATH, name="product_review")
    def product_review(request: HTTPRequest) -> HTTPResponse:
        logger.info(f"params {request.path_params}")
        return html_page(heading("Hello, we have processed all your Route Params"))

    @app.get("/api/v1/query", name="query")
    def query(request: HTTPRequest) -> HTTPResponse:
        logger.info(f"query {request.query_params}")

        results = search_products(
            PRODUCTS,
            search=request.get_query("search"),
            case_sensitive=True,
        )
        results = slice_limit(results, request.get_query("limit"))

        if not results:
            return json_response({"searchSuccess": True, "data": []})

        return json_response(results)

    @app.get("/about", name="about")
    def about(request: HTTPRequest) -> HTTPResponse:
        return html_page(ABOUT_PAGE)

    @app.all("/*any")
    def resource_not_found(request: HTTPRequest) -> HTTPResponse:
        return html_page(not_found_page(), HTTPStatus.NOT_FOUND)

    return app
