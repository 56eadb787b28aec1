"""
HTTP error types.

Anything inside request handling may raise ``HTTPError`` to abort with a
specific status code. The server (or ``ErrorHandlerMiddleware``) turns
it into a ``{"error": message}`` JSON response:

    raise HTTPError("Invalid product ID. Must be a number.", 400)

        ──►  HTTP/1.1 400 Bad Request
             {"error": "Invalid product ID. Must be a number."}
"""


class HTTPError(Exception):
    """
    An error that maps to an HTTP status code.

    Custom exceptions with metadata (like status_code) keep error handling
    in one place instead of every handler building its own error response.
    """

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code  # HTTP status to return

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, status_code={self.status_code})"
