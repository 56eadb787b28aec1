"""
Tests for the route and query params lessons, loose and careful.
"""

import pytest

from httplessons.data import PRODUCTS
from httplessons.http import HTTPStatus
from httplessons.lessons import route_params, route_params_explained


REVIEW_URL = "/api/products/1/userPreferences/7/reviews/42"


class TestRouteParams:
    """The loose version: JS-style number coercion, no validation."""

    @pytest.fixture
    def app(self, config):
        return route_params.create_app(config)

    def test_home_links_to_products(self, app, make_request):
        response = app.handle(make_request("GET", "/"))

        assert response.status == HTTPStatus.OK
        assert '<a href="/api/products">products</a>' in response.text

    def test_about(self, app, make_request):
        assert "About page" in app.handle(make_request("GET", "/about")).text

    def test_products_basic_info(self, app, make_request):
        data = app.handle(make_request("GET", "/api/products")).json()

        assert len(data) == len(PRODUCTS)
        assert all(set(p) == {"id", "name", "image"} for p in data)

    def test_single_product(self, app, make_request):
        response = app.handle(make_request("GET", "/api/products/1"))

        assert response.status == HTTPStatus.OK
        assert response.json() == PRODUCTS[0]

    @pytest.mark.parametrize("product_id", ["99", "abc", "1.5", "1..2"])
    def test_unknown_product(self, app, make_request, product_id: str):
        response = app.handle(make_request("GET", f"/api/products/{product_id}"))

        assert response.status == HTTPStatus.NOT_FOUND
        assert response.get_header("Content-Type").startswith("text/html")
        assert "Product not found" in response.text

    def test_hex_id_coerces(self, app, make_request):
        response = app.handle(make_request("GET", "/api/products/0x2"))

        assert response.json()["id"] == 2

    def test_multiple_params(self, app, make_request):
        response = app.handle(make_request("GET", REVIEW_URL))

        assert response.status == HTTPStatus.OK
        assert "Hello, we have processed all your Route Params" in response.text

    def test_query_without_params_returns_everything(self, app, make_request):
        assert app.handle(make_request("GET", "/api/v1/query")).json() == list(PRODUCTS)

    def test_search_is_case_sensitive(self, app, make_request):
        lower = app.handle(make_request("GET", "/api/v1/query?search=wooden")).json()
        upper = app.handle(make_request("GET", "/api/v1/query?search=WOODEN")).json()

        assert [p["name"] for p in lower] == ["wooden chair", "wooden table"]
        assert upper == {"searchSuccess": True, "data": []}

    def test_limit(self, app, make_request):
        data = app.handle(make_request("GET", "/api/v1/query?search=a&limit=2")).json()

        assert len(data) == 2

    def test_negative_limit_drops_from_end(self, app, make_request):
        data = app.handle(make_request("GET", "/api/v1/query?limit=-5")).json()

        assert data == list(PRODUCTS)[:1]

    def test_garbage_limit_finds_nothing(self, app, make_request):
        data = app.handle(make_request("GET", "/api/v1/query?limit=abc")).json()

        assert data == {"searchSuccess": True, "data": []}

    def test_wrong_method_hits_catch_all(self, app, make_request):
        response = app.handle(make_request("POST", "/about"))

        assert response.status == HTTPStatus.NOT_FOUND
        assert "Resource not found" in response.text

    def test_head_about(self, app, make_request):
        response = app.handle(make_request("HEAD", "/about"))

        assert response.status == HTTPStatus.OK
        assert response.body == b""
        assert int(response.get_header("Content-Length")) > 0


class TestRouteParamsExplained:
    """The careful version: 400 for bad ids, invalid limits ignored."""

    @pytest.fixture
    def app(self, config):
        return route_params_explained.create_app(config)

    def test_single_product(self, app, make_request):
        response = app.handle(make_request("GET", "/api/products/3"))

        assert response.json() == PRODUCTS[2]

    def test_invalid_id(self, app, make_request):
        response = app.handle(make_request("GET", "/api/products/abc"))

        assert response.status == HTTPStatus.BAD_REQUEST
        assert response.json() == {
            "error": "Invalid product ID. Must be a number.",
            "received": "abc",
        }

    def test_infinite_id_is_not_found(self, app, make_request):
        response = app.handle(make_request("GET", "/api/products/Infinity"))

        assert response.status == HTTPStatus.NOT_FOUND
        assert response.json() == {"error": "Product not found", "searchedId": None}
        assert b"Infinity" not in response.body


    def test_unknown_id(self, app, make_request):
        response = app.handle(make_request("GET", "/api/products/99"))

        assert response.status == HTTPStatus.NOT_FOUND
        assert response.json() == {"error": "Product not found", "searchedId": 99}

    def test_multiple_params(self, app, make_request):
        body = app.handle(make_request("GET", REVIEW_URL)).json()

        assert body["message"] == "Successfully processed all your route params"
        assert body["params"] == {
            "productId": "1",
            "userPreferenceId": "7",
            "reviewId": "42",
        }
        assert "note" in body

    def test_search_is_case_insensitive(self, app, make_request):
        body = app.handle(make_request("GET", "/api/v1/query?search=WOODEN")).json()

        assert body["success"] is True
        assert body["count"] == 2
        assert [p["name"] for p in body["data"]] == ["wooden chair", "wooden table"]

    def test_limit(self, app, make_request):
        body = app.handle(make_request("GET", "/api/v1/query?search=sofa&limit=1")).json()

        assert body["count"] == 1
        assert body["data"][0]["name"] == "albany sofa"

    @pytest.mark.parametrize("limit", ["-5", "0", "abc", ""])
    def test_invalid_limit_is_ignored(self, app, make_request, limit: str):
        body = app.handle(make_request("GET", f"/api/v1/query?limit={limit}")).json()

        assert body["count"] == len(PRODUCTS)

    def test_no_matches(self, app, make_request):
        response = app.handle(make_request("GET", "/api/v1/query?search=zzz"))

        assert response.status == HTTPStatus.OK
        assert response.json() == {
            "success": True,
            "message": "No products matched your search criteria",
            "data": [],
        }

    def test_unknown_path(self, app, make_request):
        response = app.handle(make_request("GET", "/nope"))

        assert response.status == HTTPStatus.NOT_FOUND
        assert "Resource not found" in response.text

    def test_wrong_method_is_not_found(self, app, make_request):
        response = app.handle(make_request("POST", "/about"))

        assert response.status == HTTPStatus.NOT_FOUND
        assert "Resource not found" in response.text

    def test_head_products(self, app, make_request):
        full = app.handle(make_request("GET", "/api/products"))
        response = app.handle(make_request("HEAD", "/api/products"))

        assert response.status == HTTPStatus.OK
        assert response.body == b""
        assert response.get_header("Content-Length") == str(len(full.body))

    def test_dotted_id_is_invalid_json(self, app, make_request):
        response = app.handle(make_request("GET", "/api/products/1..2"))

        assert response.status == HTTPStatus.BAD_REQUEST
        assert response.json()["received"] == "1..2"

    def test_encoded_slash_stays_in_one_param(self, app, make_request):
        response = app.handle(make_request("GET", "/api/products/a%2Fb"))

        assert response.status == HTTPStatus.BAD_REQUEST
        assert response.json()["received"] == "a/b"
