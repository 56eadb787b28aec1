"""
=============================================================================
HTTP SERVER
=============================================================================

Ties the layers together. Every lesson app is an HTTPServer:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                        REQUEST PIPELINE                             │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                     │
    │  SocketServer.accept()                                              │
    │        │                                                            │
    │        ▼                                                            │
    │  Connection.read_request()      raw bytes                           │
    │        │                                                            │
    │        ▼                                                            │
    │  RequestParser.parse()          HTTPRequest   (bad bytes → 4xx)     │
    │        │                                                            │
    │        ▼                                                            │
    │  MiddlewarePipeline             logger → authorize → static ...     │
    │        │                                                            │
    │        ▼                                                            │
    │  Router.handle()  or  listener  HTTPResponse  (exception → 500)     │
    │        │                                                            │
    │        ▼                                                            │
    │  Connection.send_response()     Connection: close                   │
    │                                                                     │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
TWO WAYS TO WRITE AN APP
=============================================================================

Framework style, routes and middleware:

    app = HTTPServer()

    @app.get("/about")
    def about(request):
        return html_page("<h1>About Page</h1>")

    app.run()

Raw listener style, one function sees every request and decides what
to do by looking at the URL itself:

    def listener(request, res):
        if request.path == "/":
            res.write_head(200, {"content-type": "text/html"})
            res.end("<h1>Home</h1>")
        ...

    create_server(listener).run()

=============================================================================
"""

import logging
from typing import Optional, Callable

from .config import ServerConfig
from .core import SocketServer, Connection
from .core.connection import ConnectionState
from .http import (
    HTTPError, HTTPRequest, RequestParser, HTTPParseError,
    HTTPResponse, ResponseBuilder, ResponseWriter, HTTPStatus,
    Router, internal_error, json_response,
)
from .middleware import MiddlewarePipeline, PathScopedMiddleware
from .middleware.base import MiddlewareLike


logger = logging.getLogger(__name__)


Handler = Callable[[HTTPRequest], HTTPResponse]
Listener = Callable[[HTTPRequest, ResponseWriter], None]


class HTTPServer:
    """
    Single-threaded HTTP/1.1 server with routing and middleware.

    Args:
        config: Server configuration (defaults: 127.0.0.1:5000).
        listener: Optional raw ``(request, writer)`` callback. When given,
                  it replaces the router as the end of the pipeline.

    ``handle(request)`` runs the full pipeline in-process without a
    socket, which is how the lesson tests exercise the apps.
    """

    def __init__(
        self,
        config: Optional[ServerConfig] = None,
        listener: Optional[Listener] = None,
    ):
        self.config = config or ServerConfig()
        self.config.validate()  # fail fast

        self._socket_server = SocketServer(self.config)
        self._parser = RequestParser(max_request_size=self.config.max_request_size)
        self._router = Router()
        self._middleware = MiddlewarePipeline()
        self._listener = listener
        self._handler: Optional[Handler] = None

    # =========================================================================
    # APP CONFIGURATION
    # =========================================================================

    def use(self, middleware: MiddlewareLike, path: Optional[str] = None) -> "HTTPServer":
        """
        Add middleware. Runs in the order added.

            app.use(LoggingMiddleware("simple"))            every request
            app.use(AuthorizeMiddleware(), path="/api")     /api and below
        """
        if path is not None:
            middleware = PathScopedMiddleware(path, middleware)
        self._middleware.add(middleware)
        self._handler = None  # rebuild the chain on next request
        return self

    @property
    def router(self) -> Router:
        return self._router

    @property
    def middleware(self) -> MiddlewarePipeline:
        return self._middleware

    def route(self, path: str, method: Optional[str] = None, **kwargs):
        return self._router.route(path, method, **kwargs)

    def get(self, path: str, **kwargs):
        """Register a GET route."""
        return self._router.get(path, **kwargs)

    def post(self, path: str, **kwargs):
        """Register a POST route."""
        return self._router.post(path, **kwargs)

    def put(self, path: str, **kwargs):
        """Register a PUT route."""
        return self._router.put(path, **kwargs)

    def delete(self, path: str, **kwargs):
        """Register a DELETE route."""
        return self._router.delete(path, **kwargs)

    def patch(self, path: str, **kwargs):
        """Register a PATCH route."""
        return self._router.patch(path, **kwargs)

    def all(self, path: str, **kwargs):
        """Register a route for every method."""
        return self._router.all(path, **kwargs)

    def not_found(self, handler: Handler) -> Handler:
        """Register the fallback for requests no route matches."""
        return self._router.not_found(handler)

    def include(self, prefix: str, router: Router) -> "HTTPServer":
        """Mount a sub-router at ``prefix``."""
        self._router.include(prefix, router)
        return self

    # =========================================================================
    # REQUEST HANDLING
    # =========================================================================

    def _endpoint(self, request: HTTPRequest) -> HTTPResponse:
        if self._listener is None:
            return self._router.handle(request)

        writer = ResponseWriter()
        self._listener(request, writer)

        if not writer.finished:
            logger.error(f"Listener never ended the response to {request.method} {request.url}")
            return internal_error("Response was never ended")

        return writer.to_response()

    def handle(self, request: HTTPRequest) -> HTTPResponse:
        """
        Run one request through middleware and router/listener.

        Never raises: HTTPError becomes its status with a JSON body, any
        other exception is logged and becomes a 500. Answers to HEAD
        carry no body, whichever layer produced them.
        """
        if self._handler is None:
            self._handler = self._middleware.wrap(self._endpoint)

        try:
            response = self._handler(request)
        except HTTPError as e:
            response = json_response({"error": e.message}, e.status_code)
        except Exception as e:
            logger.exception(f"Handler error for {request.method} {request.path}: {e}")
            response = internal_error()

        if request.method == "HEAD":
            response.drop_body()
        return response

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    @property
    def address(self) -> tuple[str, int]:
        return self._socket_server.address

    @property
    def is_running(self) -> bool:
        return self._socket_server.is_running

    def run(self, host: Optional[str] = None, port: Optional[int] = None, banner: bool = True):
        """
        Start the server. Blocks until Ctrl+C, SIGTERM or stop().
        """
        if host:
            self.config.host = host
        if port:
            self.config.port = port

        self._setup_logging()
        self._handler = self._middleware.wrap(self._endpoint)

        logger.info(f"Starting HTTP server on {self.config.host}:{self.config.port}")
        if banner:
            self._print_startup_banner()

        try:
            self._socket_server.start(self._process_connection)
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            logger.info("Server stopped")

    def stop(self):
        """Stop accepting connections (safe from any thread)."""
        self._socket_server.shutdown()

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        return self._socket_server.wait_until_ready(timeout)

    def _print_startup_banner(self):
        print()
        print("╔══════════════════════════════════════════════════════════════╗")
        print(f"║  {self.config.server_name} running")
        print(f"║  http://{self.config.host}:{self.config.port}")
        print("║  Press Ctrl+C to stop")
        print("╚══════════════════════════════════════════════════════════════╝")
        print()
        if self._listener is None:
            self._router.print_routes()

    def _setup_logging(self):
        level = self.config.numeric_log_level
        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        logging.getLogger("httplessons").setLevel(level)

    def _process_connection(self, conn: Connection):
        """
        Serve exactly one request on ``conn``, then close it.

        Runs inline in the accept loop: the next connection waits until
        this one is done.
        """
        with conn:
            try:
                raw_request = conn.read_request()
            except TimeoutError:
                self._send_error(conn, HTTPStatus.REQUEST_TIMEOUT, "Request timeout")
                return
            except ValueError as e:
                self._send_error(conn, HTTPStatus.PAYLOAD_TOO_LARGE, str(e))
                return

            if raw_request is None:
                return  # client went away without sending anything

            try:
                request = self._parser.parse(raw_request, conn.address)
            except HTTPParseError as e:
                logger.info(f"[{conn.id}] Bad request: {e}")
                self._send_error(conn, e.status_code, e.message)
                return

            conn.state = ConnectionState.PROCESSING
            response = self.handle(request)
            response.headers["Connection"] = "close"

            conn.send_response(response.to_bytes(self.config.server_name))

    def _send_error(self, conn: Connection, status: int, message: str):
        """Error response for failures before a request could be handled."""
        response = (ResponseBuilder()
            .status(status)
            .json({"error": message})
            .close_connection()
            .build())
        conn.send_response(response.to_bytes(self.config.server_name))


def create_app(config: Optional[ServerConfig] = None) -> HTTPServer:
    """
    Create a framework-style app.

        app = create_app(ServerConfig(port=3000))

        @app.get("/")
        def index(request):
            return html_page("<h1>Home Page</h1>")

        app.run()
    """
    return HTTPServer(config)


def create_server(listener: Listener, config: Optional[ServerConfig] = None) -> HTTPServer:
    """
    Create a raw server around a single ``(request, writer)`` listener.
    """
    return HTTPServer(config, listener=listener)
