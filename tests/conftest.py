"""
pytest configuration and fixtures.
"""

import json
import socket
import threading
from typing import Callable, Generator, Optional
import pytest

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from httplessons import HTTPServer, ServerConfig
from httplessons.http import HTTPRequest, HTTPResponse, parse_request, json_response


def build_request(
    method: str,
    target: str,
    body: Optional[object] = None,
    headers: Optional[dict] = None,
) -> HTTPRequest:
    """
    Parse a request the way the server would receive it.

    ``body`` may be bytes, a str, or anything JSON-serializable (sent as
    application/json unless a Content-Type header says otherwise).
    """
    headers = dict(headers or {})
    headers.setdefault("Host", "localhost:5000")

    if body is None:
        payload = b""
    elif isinstance(body, bytes):
        payload = body
    elif isinstance(body, str):
        payload = body.encode("utf-8")
    else:
        payload = json.dumps(body).encode("utf-8")
        headers.setdefault("Content-Type", "application/json")

    if payload:
        headers["Content-Length"] = str(len(payload))

    head = f"{method} {target} HTTP/1.1\r\n"
    head += "".join(f"{name}: {value}\r\n" for name, value in headers.items())
    return parse_request(head.encode("utf-8") + b"\r\n" + payload, ("127.0.0.1", 50000))


@pytest.fixture
def make_request() -> Callable[..., HTTPRequest]:
    """``make_request("GET", "/about?user=john")`` → parsed HTTPRequest."""
    return build_request


@pytest.fixture
def sample_get_request() -> bytes:
    """Sample HTTP GET request."""
    return (
        b"GET /api/v1/query?search=sofa&limit=2 HTTP/1.1\r\n"
        b"Host: localhost:5000\r\n"
        b"User-Agent: pytest\r\n"
        b"Accept: application/json\r\n"
        b"\r\n"
    )


@pytest.fixture
def sample_post_request() -> bytes:
    """Sample HTTP POST request with JSON body."""
    body = b'{"name": "john"}'
    return (
        b"POST /api/people HTTP/1.1\r\n"
        b"Host: localhost:5000\r\n"
        b"Content-Type: application/json\r\n"
        + f"Content-Length: {len(body)}\r\n".encode()
        + b"\r\n"
    ) + body


@pytest.fixture
def config() -> ServerConfig:
    """Default test server configuration."""
    return ServerConfig(
        host="127.0.0.1",
        timeout=5.0,
        log_level="WARNING",
    )


@pytest.fixture
def free_port() -> int:
    """Get a free port for testing."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


class LiveServer:
    """Runs an HTTPServer in a background thread."""

    def __init__(self, server: HTTPServer, port: int):
        self.server = server
        self.port = port
        self._thread: Optional[threading.Thread] = None

    def start(self):
        self._thread = threading.Thread(
            target=self.server.run,
            kwargs={"port": self.port, "banner": False},
            daemon=True,
        )
        self._thread.start()

        if not self.server.wait_until_ready(timeout=5.0):
            raise RuntimeError("Server failed to start")

    def stop(self):
        self.server.stop()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)


@pytest.fixture
def live_server(free_port: int, config: ServerConfig) -> Generator[LiveServer, None, None]:
    """A small app on a real socket."""
    config.port = free_port
    server = HTTPServer(config)

    @server.get("/test")
    def test_route(request: HTTPRequest) -> HTTPResponse:
        return json_response({"status": "ok"})

    @server.post("/echo")
    def echo_route(request: HTTPRequest) -> HTTPResponse:
        return json_response({"received": request.json})

    srv = LiveServer(server, free_port)
    srv.start()

    yield srv

    srv.stop()


@pytest.fixture
def serve_app(free_port: int, config: ServerConfig) -> Generator[Callable[..., LiveServer], None, None]:
    """
    Start a lesson app on a real socket::

        server = serve_app(methods_app.create_app)
    """
    started = []

    def serve(factory: Callable[..., HTTPServer]) -> LiveServer:
        config.port = free_port
        srv = LiveServer(factory(config), free_port)
        srv.start()
        started.append(srv)
        return srv

    yield serve

    for srv in started:
        srv.stop()
