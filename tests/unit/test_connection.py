"""
Unit tests for reading requests off a client connection.
"""

import socket
import threading

import pytest

from httplessons.core.connection import Connection, ConnectionState, content_length_of


POST_HEAD = (
    b"POST /api/people HTTP/1.1\r\n"
    b"Host: localhost:5000\r\n"
    b"Content-Type: application/json\r\n"
    b"Content-Length: 16\r\n"
    b"\r\n"
)
POST_BODY = b'{"name": "john"}'
GET_REQUEST = b"GET /about HTTP/1.1\r\nHost: localhost:5000\r\n\r\n"


@pytest.fixture
def pair():
    """(server side, client side) of a connected socket pair."""
    server, client = socket.socketpair()
    yield server, client
    server.close()
    client.close()


def connect(sock: socket.socket, **kwargs) -> Connection:
    kwargs.setdefault("timeout", 2.0)
    return Connection(socket=sock, address=("127.0.0.1", 50000), **kwargs)


class TestContentLength:
    """Tests for content_length_of."""

    def test_crlf_headers(self):
        assert content_length_of(POST_HEAD) == 16

    def test_case_and_padding(self):
        head = b"PUT /api/people/1 HTTP/1.1\r\ncontent-LENGTH:   7 \r\n\r\n"

        assert content_length_of(head) == 7

    def test_bare_lf_headers(self):
        assert content_length_of(b"POST / HTTP/1.1\nContent-Length: 3\n\n") == 3

    @pytest.mark.parametrize("head", [
        GET_REQUEST,
        b"POST / HTTP/1.1\r\nContent-Length: abc\r\n\r\n",
        b"POST / HTTP/1.1\r\nX-Content-Length: 5\r\n\r\n",
    ])
    def test_absent_or_malformed(self, head: bytes):
        assert content_length_of(head) == 0


class TestReadRequest:
    """Tests for Connection.read_request."""

    def test_request_without_body(self, pair):
        server, client = pair
        client.sendall(GET_REQUEST)

        conn = connect(server)

        assert conn.read_request() == GET_REQUEST
        assert conn.state is ConnectionState.READING

    def test_body_in_one_chunk(self, pair):
        server, client = pair
        client.sendall(POST_HEAD + POST_BODY)

        assert connect(server).read_request() == POST_HEAD + POST_BODY

    def test_body_split_across_reads(self, pair):
        server, client = pair
        client.sendall(POST_HEAD + POST_BODY)

        conn = connect(server, buffer_size=7)

        assert conn.read_request() == POST_HEAD + POST_BODY

    def test_body_arrives_after_headers(self, pair):
        server, client = pair
        client.sendall(POST_HEAD)
        late = threading.Timer(0.05, client.sendall, args=(POST_BODY,))
        late.start()

        try:
            request = connect(server).read_request()
        finally:
            late.join()

        assert request == POST_HEAD + POST_BODY

    def test_stops_at_content_length(self, pair):
        server, client = pair
        client.sendall(POST_HEAD + POST_BODY + GET_REQUEST)

        assert connect(server).read_request() == POST_HEAD + POST_BODY

    def test_peer_closes_without_sending(self, pair):
        server, client = pair
        client.shutdown(socket.SHUT_WR)

        assert connect(server).read_request() is None

    def test_peer_closes_mid_headers(self, pair):
        server, client = pair
        client.sendall(b"GET /about HTTP/1.1\r\n")
        client.shutdown(socket.SHUT_WR)

        assert connect(server).read_request() == b"GET /about HTTP/1.1\r\n"

    def test_peer_closes_mid_body(self, pair):
        server, client = pair
        client.sendall(POST_HEAD + POST_BODY[:5])
        client.shutdown(socket.SHUT_WR)

        # the parser turns the short body into a 400
        assert connect(server).read_request() == POST_HEAD + POST_BODY[:5]

    def test_silent_client_times_out(self, pair):
        server, client = pair
        client.sendall(POST_HEAD)

        with pytest.raises(TimeoutError):
            connect(server, timeout=0.1).read_request()

    def test_request_too_large(self, pair):
        server, client = pair
        client.sendall(b"GET / HTTP/1.1\r\nX-Large: " + b"A" * 200 + b"\r\n\r\n")

        with pytest.raises(ValueError, match="Request too large"):
            connect(server, max_request_size=64).read_request()


class TestSendAndClose:
    """Tests for writing the response and closing."""

    def test_send_response(self, pair):
        server, client = pair
        conn = connect(server)

        assert conn.send_response(b"HTTP/1.1 200 OK\r\n\r\n") is True
        assert client.recv(1024) == b"HTTP/1.1 200 OK\r\n\r\n"
        assert conn.state is ConnectionState.WRITING

    def test_send_to_vanished_client(self, pair):
        server, client = pair
        client.close()

        assert connect(server).send_response(b"HTTP/1.1 200 OK\r\n\r\n") is False

    def test_close_sends_eof(self, pair):
        server, client = pair
        client.shutdown(socket.SHUT_WR)

        with connect(server) as conn:
            pass

        assert conn.state is ConnectionState.CLOSED
        assert client.recv(1024) == b""

    def test_close_is_idempotent(self, pair):
        server, client = pair
        client.shutdown(socket.SHUT_WR)
        conn = connect(server)

        conn.close()
        conn.close()

        assert conn.state is ConnectionState.CLOSED
