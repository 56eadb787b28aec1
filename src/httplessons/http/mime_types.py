"""
=============================================================================
MIME TYPE DETECTION
=============================================================================

The browser decides what to do with a response body by its Content-Type,
not by the file extension in the URL. The navbar app is the classic
demonstration: serve ``styles.css`` as ``text/html`` and the page loads
with no styling at all.

    ┌──────────────────┬──────────────────────────────────────────────┐
    │ Extension        │ Content-Type                                 │
    ├──────────────────┼──────────────────────────────────────────────┤
    │ .html            │ text/html                                    │
    │ .css             │ text/css                                     │
    │ .js              │ text/javascript                              │
    │ .svg             │ image/svg+xml                                │
    │ .json            │ application/json                             │
    │ (unknown)        │ application/octet-stream                     │
    └──────────────────┴──────────────────────────────────────────────┘

=============================================================================
"""

from pathlib import Path
from typing import Optional


MIME_TYPES = {
    # Documents and code
    ".html": "text/html",
    ".htm": "text/html",
    ".css": "text/css",
    ".js": "text/javascript",
    ".mjs": "text/javascript",
    ".txt": "text/plain",
    ".md": "text/markdown",
    ".csv": "text/csv",
    ".json": "application/json",
    ".xml": "application/xml",
    ".map": "application/json",

    # Images
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".svg": "image/svg+xml",
    ".ico": "image/x-icon",
    ".webp": "image/webp",

    # Fonts
    ".woff": "font/woff",
    ".woff2": "font/woff2",
    ".ttf": "font/ttf",

    # Other
    ".pdf": "application/pdf",
    ".zip": "application/zip",
}

DEFAULT_MIME_TYPE = "application/octet-stream"

_TEXT_LIKE = {
    "application/json",
    "application/xml",
    "application/javascript",
    "image/svg+xml",
}


def get_mime_type(path: str | Path, default: Optional[str] = None) -> str:
    """
    Look up the MIME type for a file by its extension.

    Examples:
        >>> get_mime_type("styles.css")
        'text/css'
        >>> get_mime_type("unknown.xyz")
        'application/octet-stream'
    """
    if isinstance(path, str):
        path = Path(path)

    return MIME_TYPES.get(path.suffix.lower(), default or DEFAULT_MIME_TYPE)


def is_text_type(mime_type: str) -> bool:
    """Check whether a MIME type is text and should carry a charset."""
    return mime_type.startswith("text/") or mime_type in _TEXT_LIKE


def get_content_type(path: str | Path, charset: str = "utf-8") -> str:
    """
    Full Content-Type header value for a file.

        >>> get_content_type("index.html")
        'text/html; charset=utf-8'
        >>> get_content_type("logo.png")
        'image/png'
    """
    mime_type = get_mime_type(path)
    if is_text_type(mime_type):
        return f"{mime_type}; charset={charset}"
    return mime_type
