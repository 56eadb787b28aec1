"""
End-to-end tests over a real socket.
"""

import http.client
import json
import socket
import threading

from httplessons.lessons import methods_app, route_params_explained


def request(port: int, method: str, path: str, body=None, headers=None):
    conn = http.client.HTTPConnection("127.0.0.1", port, timeout=5)
    try:
        conn.request(method, path, body=body, headers=headers or {})
        response = conn.getresponse()
        return response, response.read()
    finally:
        conn.close()


def raw_exchange(port: int, payload: bytes) -> bytes:
    with socket.create_connection(("127.0.0.1", port), timeout=5) as sock:
        sock.sendall(payload)
        chunks = []
        while True:
            chunk = sock.recv(4096)
            if not chunk:
                break
            chunks.append(chunk)
    return b"".join(chunks)


class TestLiveServer:
    """The small app from the live_server fixture."""

    def test_get(self, live_server):
        response, body = request(live_server.port, "GET", "/test")

        assert response.status == 200
        assert json.loads(body) == {"status": "ok"}
        assert response.getheader("Connection") == "close"
        assert response.getheader("Server") == "HTTPLessons/1.0"
        assert response.getheader("Content-Length") == str(len(body))

    def test_post_json(self, live_server):
        response, body = request(
            live_server.port, "POST", "/echo",
            body=json.dumps({"name": "john"}),
            headers={"Content-Type": "application/json"},
        )

        assert response.status == 200
        assert json.loads(body) == {"received": {"name": "john"}}

    def test_post_body_split_from_headers(self, live_server):
        body = b'{"name": "john"}'
        with socket.create_connection(("127.0.0.1", live_server.port), timeout=5) as sock:
            sock.sendall(
                b"POST /echo HTTP/1.1\r\nHost: x\r\nContent-Type: application/json\r\n"
                + f"Content-Length: {len(body)}\r\n\r\n".encode()
            )
            sock.sendall(body)
            data = sock.makefile("rb").read()

        assert data.startswith(b"HTTP/1.1 200 OK\r\n")
        assert data.endswith(b'{"received": {"name": "john"}}')

    def test_head(self, live_server):
        _, full = request(live_server.port, "GET", "/test")
        response, body = request(live_server.port, "HEAD", "/test")

        assert response.status == 200
        assert body == b""
        assert response.getheader("Content-Length") == str(len(full))

    def test_unknown_route(self, live_server):
        response, body = request(live_server.port, "GET", "/missing")

        assert response.status == 404
        assert json.loads(body) == {"error": "No route matches /missing"}

    def test_server_closes_connection(self, live_server):
        data = raw_exchange(
            live_server.port,
            b"GET /test HTTP/1.1\r\nHost: localhost\r\nConnection: keep-alive\r\n\r\n",
        )

        assert data.startswith(b"HTTP/1.1 200 OK\r\n")
        assert b"Connection: close" in data

    def test_malformed_request_line(self, live_server):
        data = raw_exchange(live_server.port, b"NONSENSE\r\n\r\n")

        assert data.startswith(b"HTTP/1.1 400")

    def test_unsupported_method(self, live_server):
        data = raw_exchange(live_server.port, b"BREW /test HTTP/1.1\r\nHost: x\r\n\r\n")

        assert data.startswith(b"HTTP/1.1 405")

    def test_sequential_requests(self, live_server):
        for _ in range(5):
            response, _ = request(live_server.port, "GET", "/test")
            assert response.status == 200

    def test_concurrent_clients_are_served_in_turn(self, live_server):
        statuses = []
        lock = threading.Lock()

        def client():
            response, _ = request(live_server.port, "GET", "/test")
            with lock:
                statuses.append(response.status)

        threads = [threading.Thread(target=client) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=10)

        assert statuses == [200] * 4


def test_route_params_over_socket(serve_app):
    server = serve_app(route_params_explained.create_app)

    response, body = request(server.port, "GET", "/api/v1/query?search=sofa&limit=1")

    assert response.status == 200
    assert json.loads(body)["count"] == 1


def test_login_form_over_socket(serve_app):
    server = serve_app(methods_app.create_app)

    response, body = request(
        server.port, "POST", "/login",
        body="name=john",
        headers={"Content-Type": "application/x-www-form-urlencoded"},
    )

    assert response.status == 200
    assert b"Welcome dear" in body


def test_people_api_over_socket(serve_app):
    server = serve_app(methods_app.create_app)

    response, body = request(
        server.port, "POST", "/api/people/postman",
        body=json.dumps({"name": "zoe"}),
        headers={"Content-Type": "application/json"},
    )
    assert response.status == 201
    assert json.loads(body)["data"][-1] == {"id": 6, "name": "zoe"}

    response, body = request(
        server.port, "PUT", "/api/people/1",
        body=json.dumps({"name": "johnny"}),
        headers={"Content-Type": "application/json"},
    )
    assert response.status == 200

    response, body = request(server.port, "PATCH", "/api/people")
    assert response.status == 404
    assert b"Cannot PATCH /api/people" in body
