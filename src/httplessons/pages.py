"""HTML snippets the lessons answer with."""

from html import escape
from typing import Optional


def heading(text: str, size: Optional[int] = 28, color: Optional[str] = None) -> str:
    """
    The cursive ``<h1>`` every lesson page is made of.

        heading("Home Page")
        <h1 style='font-family: cursive; font-size: 28px'>Home Page</h1>

    ``size=None`` leaves the font size to the browser.
    """
    style = "font-family: cursive"
    if size is not None:
        style += f"; font-size: {size}px"
    if color:
        style += f"; color: {color}"
    return f"<h1 style='{style}'>{text}</h1>"


def not_found_page(text: str = "Resource not found") -> str:
    return heading(text, color="red")


def cannot_page(method: str, path: str) -> str:
    """
    The bare 404 document for apps that register no fallback of their own.

        cannot_page("PATCH", "/api/people")
        ... <pre>Cannot PATCH /api/people</pre> ...
    """
    return (
        "<!DOCTYPE html>\n"
        '<html lang="en">\n'
        "<head>\n"
        '<meta charset="utf-8">\n'
        "<title>Error</title>\n"
        "</head>\n"
        "<body>\n"
        f"<pre>Cannot {escape(method)} {escape(path)}</pre>\n"
        "</body>\n"
        "</html>\n"
    )
