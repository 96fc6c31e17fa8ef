"""URL Composer - Merges a path's own query string with explicit query pairs.

The merge is a multiset union: a key supplied both in the path and through
Request.query() keeps every value. The combined query is re-encoded with keys
sorted and equal keys left in insertion order, so the final request URI is
deterministic.
"""

from __future__ import annotations

import re
from urllib.parse import parse_qsl, urlencode, urlsplit

from htest.errors import ParseError

# A '%' not followed by two hex digits.
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def parse_query(raw: str) -> list[tuple[str, str]]:
    """Parse a raw query string into ordered (key, value) pairs.

    Blank values are kept ("a=&b" gives [("a", ""), ("b", "")]).

    Raises:
        ParseError: On an invalid percent escape or a ';' separator.
    """
    if ";" in raw:
        raise ParseError(f"invalid semicolon separator in query: {raw!r}")

    match = _BAD_ESCAPE.search(raw)
    if match:
        raise ParseError(
            f"invalid URL escape {raw[match.start():match.start() + 3]!r} in query: {raw!r}"
        )

    return parse_qsl(raw, keep_blank_values=True)


def encode_query(pairs: list[tuple[str, str]]) -> str:
    """Percent-encode pairs sorted by key.

    sorted() is stable, so repeated keys keep their relative order.
    """
    return urlencode(sorted(pairs, key=lambda pair: pair[0]))


def compose_path(path: str, query: list[tuple[str, str]]) -> str:
    """Return the request URI for path with the explicit query pairs merged in.

    Args:
        path: Origin-form path, optionally carrying a query string.
        query: Explicit query pairs. When empty, path is returned untouched.

    Returns:
        "<path>?<query>" with both sources of pairs combined.

    Raises:
        ParseError: If path is not origin-form, or if query is non-empty and
            the path's own query is malformed.
    """
    if not path.startswith("/"):
        raise ParseError(f"path must start with '/': {path!r}")

    if not query:
        return path

    parts = urlsplit(path)
    pairs = parse_query(parts.query)
    pairs.extend(query)

    return f"{parts.path}?{encode_query(pairs)}"
