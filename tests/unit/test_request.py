"""
Unit tests for HTTP request parsing.
"""

import pytest

from httplessons.http.request import (
    HTTPRequest,
    RequestParser,
    HTTPParseError,
    parse_request,
)


class TestRequestParser:
    """Tests for RequestParser class."""

    def test_parse_simple_get(self, sample_get_request: bytes):
        parser = RequestParser()
        request = parser.parse(sample_get_request, ("127.0.0.1", 12345))

        assert request.method == "GET"
        assert request.path == "/api/v1/query"
        assert request.target == "/api/v1/query?search=sofa&limit=2"
        assert request.version == "HTTP/1.1"
        assert request.client_address == ("127.0.0.1", 12345)

    def test_url_keeps_query_string(self, sample_get_request: bytes):
        request = parse_request(sample_get_request)

        assert request.url == "/api/v1/query?search=sofa&limit=2"
        assert request.query_string == "search=sofa&limit=2"

    def test_parse_headers(self, sample_get_request: bytes):
        request = parse_request(sample_get_request)

        assert request.host == "localhost:5000"
        assert request.user_agent == "pytest"
        assert request.headers["accept"] == "application/json"

    def test_parse_query_params(self, sample_get_request: bytes):
        request = parse_request(sample_get_request)

        assert request.get_query("search") == "sofa"
        assert request.get_query("limit") == "2"
        assert request.get_query("missing") is None
        assert request.get_query("missing", "default") == "default"

    def test_blank_query_values_are_kept(self):
        request = parse_request(b"GET /api/v1/query?search=&limit= HTTP/1.1\r\n\r\n")

        assert request.get_query("search") == ""
        assert request.get_query("limit") == ""

    def test_parse_post_with_body(self, sample_post_request: bytes):
        request = parse_request(sample_post_request)

        assert request.method == "POST"
        assert request.path == "/api/people"
        assert request.content_type == "application/json"
        assert request.is_json is True
        assert request.json == {"name": "john"}
        assert request.payload == {"name": "john"}

    def test_parse_form_body(self):
        body = b"name=john&role=&name=peter"
        raw = (
            b"POST /login HTTP/1.1\r\n"
            b"Content-Type: application/x-www-form-urlencoded\r\n"
            + f"Content-Length: {len(body)}\r\n".encode()
            + b"\r\n"
        ) + body
        request = parse_request(raw)

        assert request.is_form is True
        assert request.form == {"name": "john", "role": ""}
        assert request.payload == request.form

    def test_invalid_json_body(self):
        body = b"{not json"
        raw = (
            b"POST /api/people HTTP/1.1\r\n"
            b"Content-Type: application/json\r\n"
            + f"Content-Length: {len(body)}\r\n".encode()
            + b"\r\n"
        ) + body
        request = parse_request(raw)

        with pytest.raises(HTTPParseError) as exc_info:
            request.json

        assert exc_info.value.status_code == 400

    def test_payload_without_body(self):
        request = parse_request(b"GET / HTTP/1.1\r\n\r\n")

        assert request.payload == {}

    def test_parse_path_with_special_chars(self):
        raw = b"GET /search?q=hello%20world HTTP/1.1\r\nHost: test\r\n\r\n"
        request = parse_request(raw)

        assert request.path == "/search"
        assert request.get_query("q") == "hello world"

    def test_parse_invalid_method(self):
        raw = b"INVALID /path HTTP/1.1\r\nHost: test\r\n\r\n"

        with pytest.raises(HTTPParseError) as exc_info:
            parse_request(raw)

        assert exc_info.value.status_code == 405

    def test_parse_unsupported_version(self):
        raw = b"GET / HTTP/2.0\r\nHost: test\r\n\r\n"

        with pytest.raises(HTTPParseError) as exc_info:
            parse_request(raw)

        assert exc_info.value.status_code == 505

    def test_parse_invalid_request_line(self):
        raw = b"GET\r\nHost: test\r\n\r\n"

        with pytest.raises(HTTPParseError) as exc_info:
            parse_request(raw)

        assert exc_info.value.status_code == 400

    def test_parse_missing_terminator(self):
        with pytest.raises(HTTPParseError):
            parse_request(b"GET / HTTP/1.1\r\nHost: test\r\n")

    def test_parse_missing_headers(self):
        request = parse_request(b"GET / HTTP/1.1\r\n\r\n")

        assert request.method == "GET"
        assert request.path == "/"
        assert len(request.headers) == 0

    def test_parse_path_traversal_blocked(self):
        raw = b"GET /../../../etc/passwd HTTP/1.1\r\nHost: test\r\n\r\n"

        with pytest.raises(HTTPParseError) as exc_info:
            parse_request(raw)

        assert "path" in str(exc_info.value).lower()

    @pytest.mark.parametrize("target", [b"/%2e%2e/secret", b"/static/%2E%2E/config.py"])
    def test_encoded_traversal_blocked(self, target: bytes):
        with pytest.raises(HTTPParseError) as exc_info:
            parse_request(b"GET " + target + b" HTTP/1.1\r\n\r\n")

        assert exc_info.value.status_code == 400

    def test_dots_inside_a_segment_are_allowed(self):
        request = parse_request(b"GET /api/products/1..2 HTTP/1.1\r\n\r\n")

        assert request.path == "/api/products/1..2"

    def test_path_keeps_percent_escapes(self):
        request = parse_request(b"GET /api/products/a%2Fb HTTP/1.1\r\n\r\n")

        assert request.path == "/api/products/a%2Fb"

    def test_parse_request_too_large(self):
        parser = RequestParser(max_request_size=100)
        raw = b"GET / HTTP/1.1\r\n" + b"X-Large: " + b"A" * 200 + b"\r\n\r\n"

        with pytest.raises(HTTPParseError) as exc_info:
            parser.parse(raw)

        assert exc_info.value.status_code == 413

    def test_content_length_handling(self):
        body = b"test body"
        raw = (
            b"POST / HTTP/1.1\r\n"
            b"Content-Length: 9\r\n"
            b"\r\n"
        ) + body

        request = parse_request(raw)
        assert request.content_length == 9
        assert request.body == body

    @pytest.mark.parametrize("value", [b"abc", b"-1"])
    def test_invalid_content_length(self, value: bytes):
        raw = b"POST / HTTP/1.1\r\nContent-Length: " + value + b"\r\n\r\n"

        with pytest.raises(HTTPParseError) as exc_info:
            parse_request(raw)

        assert exc_info.value.status_code == 400

    def test_short_body_rejected(self):
        raw = b"POST / HTTP/1.1\r\nContent-Length: 20\r\n\r\nshort"

        with pytest.raises(HTTPParseError):
            parse_request(raw)

    def test_case_insensitive_headers(self):
        raw = b"GET / HTTP/1.1\r\nCONTENT-TYPE: text/html\r\n\r\n"
        request = parse_request(raw)

        assert request.content_type == "text/html"
        assert request.get_header("Content-Type") == "text/html"
        assert request.get_header("content-type") == "text/html"

    def test_repeated_and_folded_headers(self):
        raw = (
            b"GET / HTTP/1.1\r\n"
            b"Accept: text/html\r\n"
            b"Accept: application/json\r\n"
            b"X-Note: first\r\n"
            b"  second\r\n"
            b"\r\n"
        )
        request = parse_request(raw)

        assert request.get_header("accept") == "text/html, application/json"
        assert request.get_header("x-note") == "first second"


class TestHTTPRequest:
    """Tests for HTTPRequest dataclass."""

    def test_get_header_default(self):
        request = HTTPRequest(method="GET", path="/")

        assert request.get_header("X-Missing") == ""
        assert request.get_header("X-Missing", "default") == "default"

    def test_query_list(self):
        request = HTTPRequest(
            method="GET",
            path="/",
            query_params={"tags": ["python", "http", "server"]},
        )

        assert request.get_query_list("tags") == ["python", "http", "server"]
        assert request.get_query("tags") == "python"  # First value
        assert request.get_query_list("missing") == []

    def test_user_comes_from_context(self):
        request = HTTPRequest(method="GET", path="/")
        assert request.user is None

        request.context["user"] = {"name": "john", "id": 3}
        assert request.user == {"name": "john", "id": 3}

    def test_url_falls_back_to_path(self):
        request = HTTPRequest(method="GET", path="/about")

        assert request.url == "/about"

    @pytest.mark.parametrize("base_url,expected", [
        ("", "/api/v1/products?user=john"),
        ("/api", "/v1/products?user=john"),
        ("/api/v1/products", "/?user=john"),
        ("/about", "/api/v1/products?user=john"),
    ])
    def test_mounted_url(self, base_url: str, expected: str):
        request = HTTPRequest(
            method="GET",
            path="/api/v1/products",
            target="/api/v1/products?user=john",
            base_url=base_url,
        )

        assert request.mounted_url == expected
