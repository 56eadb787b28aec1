"""
=============================================================================
PRODUCT CATALOG
=============================================================================

Pure functions over the product list. Route and query parameters always
arrive as TEXT, so every lesson that looks at ``:productId`` or
``?limit=`` first has to turn a string into a number:

    "/api/products/3"            → "3"      → 3
    "/api/products/abc"          → "abc"    → not a number
    "/api/v1/query?limit=2.9"    → "2.9"    → 2 items

The coercion rules below are the loose "anything number-like" rules a
browser-side developer expects: surrounding whitespace is ignored, an
empty string means 0, hex/octal/binary literals and exponents work,
everything else is NaN.

=============================================================================
"""

import math
import re
from typing import Any, Iterable, Optional, Sequence


_DECIMAL_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")
_RADIX_RE = re.compile(r"^0([xXoObB])([0-9a-fA-F]+)$")
_INFINITY_RE = re.compile(r"^[+-]?Infinity$")

_RADIX_BASES = {"x": 16, "o": 8, "b": 2}


def coerce_number(raw: Optional[str]) -> float:
    """
    Loose numeric coercion of a parameter value.

        coerce_number("42")      42.0
        coerce_number(" 7 ")     7.0
        coerce_number("")        0.0
        coerce_number("0x10")    16.0
        coerce_number("abc")     nan
    """
    if raw is None:
        return math.nan

    text = raw.strip()
    if not text:
        return 0.0

    if _DECIMAL_RE.match(text):
        return float(text)

    if _INFINITY_RE.match(text):
        return -math.inf if text.startswith("-") else math.inf

    radix = _RADIX_RE.match(text)
    if radix:
        try:
            return float(int(radix.group(2), _RADIX_BASES[radix.group(1).lower()]))
        except ValueError:
            return math.nan  # e.g. "0b12"

    return math.nan


def parse_product_id(raw: Optional[str]) -> int | float:
    """
    Turn a ``:productId`` route parameter into a number.

    Only NaN is rejected. ``"Infinity"`` is a number, it just never
    matches a product.

    Raises:
        ValueError: If the text is not a number at all.
    """
    number = coerce_number(raw)
    if math.isnan(number):
        raise ValueError(f"Not a number: {raw!r}")
    if math.isinf(number):
        return number
    return int(number) if number.is_integer() else number


def json_number(number: int | float) -> Optional[int | float]:
    """``number`` as JSON can carry it: infinities become None (``null``)."""
    if isinstance(number, float) and not math.isfinite(number):
        return None
    return number


def find_product(products: Iterable[dict], product_id: Any) -> Optional[dict]:
    """First product whose id equals ``product_id``, or None."""
    for product in products:
        if product["id"] == product_id:
            return product
    return None


def basic_info(products: Iterable[dict]) -> list[dict]:
    """Products without price and description: ``{id, name, image}``."""
    return [
        {"id": p["id"], "name": p["name"], "image": p["image"]}
        for p in products
    ]


def parse_limit(raw: Optional[str]) -> Optional[int]:
    """
    Forgiving ``?limit=`` parsing.

    Missing, non-numeric, zero and negative limits give None (no limit).
    Fractions truncate toward zero, so ``"0.5"`` limits to nothing.
    """
    if not raw:
        return None

    number = coerce_number(raw)
    if math.isnan(number) or number <= 0 or math.isinf(number):
        return None
    return int(number)


def slice_limit(items: Sequence[dict], raw: Optional[str]) -> list[dict]:
    """
    Loose ``?limit=`` slicing: ``items[:n]`` with ``n`` coerced from text.

        "2"     first two items
        "abc"   nothing (NaN counts as 0)
        "-1"    everything but the last item
        ""      everything (no limit given)
    """
    if not raw:
        return list(items)

    number = coerce_number(raw)
    if math.isnan(number):
        return []
    if math.isinf(number):
        return list(items) if number > 0 else []
    return list(items[:int(number)])


def search_products(
    products: Iterable[dict],
    search: Optional[str] = None,
    limit: Optional[int] = None,
    case_sensitive: bool = False,
) -> list[dict]:
    """
    Products whose name contains ``search``, at most ``limit`` of them.

    An empty or missing ``search`` matches every product. ``limit`` is an
    already-parsed count (see parse_limit); None means no limit.
    """
    results = list(products)

    if search:
        if case_sensitive:
            results = [p for p in results if search in p["name"]]
        else:
            needle = search.lower()
            results = [p for p in results if needle in p["name"].lower()]

    if limit is not None:
        results = results[:limit]

    return results
