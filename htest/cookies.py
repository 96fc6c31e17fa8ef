"""Cookie helpers: the outgoing Cookie header and incoming Set-Cookie parsing."""

from __future__ import annotations

from htest.models import ResponseCookie

# Values containing these are wrapped in double quotes.
_QUOTE_CHARS = (" ", ",")


def _cookie_pair(name: str, value: str) -> str:
    if any(ch in value for ch in _QUOTE_CHARS):
        value = f'"{value}"'
    return f"{name}={value}"


def format_cookie_header(cookies: dict[str, str], existing: str = "") -> str:
    """Build a Cookie request header value from a name -> value mapping.

    Pairs are appended to existing (an explicit Cookie header) when given.
    No attributes are emitted on the outgoing side.
    """
    pairs = [_cookie_pair(name, value) for name, value in cookies.items()]
    if existing:
        pairs.insert(0, existing)
    return "; ".join(pairs)


def _unquote(value: str) -> str:
    if len(value) > 1 and value[0] == value[-1] == '"':
        return value[1:-1]
    return value


def _parse_max_age(raw: str) -> int | None:
    try:
        return int(raw)
    except ValueError:
        return None


def parse_set_cookie(raw: str) -> ResponseCookie | None:
    """Parse one Set-Cookie header value (RFC 6265 section 5.2).

    The first "name=value" pair is the cookie; every later ';' segment is an
    attribute, matched case-insensitively. Unknown attributes and attributes
    with unusable values are ignored.

    Returns:
        The cookie, or None when the first pair has no '=' or no name.
    """
    first, *attributes = raw.split(";")
    name, sep, value = first.partition("=")
    name = name.strip()
    if not sep or not name:
        return None

    fields: dict[str, object] = {}
    for attribute in attributes:
        key, _, attr_value = attribute.partition("=")
        key = key.strip().lower()
        attr_value = attr_value.strip()

        if key == "path" and attr_value:
            fields["path"] = attr_value
        elif key == "domain" and attr_value:
            fields["domain"] = attr_value.lstrip(".")
        elif key == "expires" and attr_value:
            fields["expires"] = attr_value
        elif key == "max-age" and attr_value:
            max_age = _parse_max_age(attr_value)
            if max_age is not None:
                fields["max_age"] = max_age
        elif key == "secure":
            fields["secure"] = True
        elif key == "httponly":
            fields["http_only"] = True
        elif key == "samesite" and attr_value:
            fields["same_site"] = attr_value

    return ResponseCookie(name=name, value=_unquote(value.strip()), raw=raw, **fields)


def parse_set_cookies(header_values: list[str]) -> list[ResponseCookie]:
    """Parse Set-Cookie header values into ResponseCookie objects.

    Each header value is parsed on its own, so two Set-Cookie headers for the
    same name yield two cookies. Headers without a "name=value" pair are
    skipped.

    Returns:
        Cookies in header order; empty when there are no Set-Cookie headers.
    """
    cookies: list[ResponseCookie] = []
    for raw in header_values:
        cookie = parse_set_cookie(raw)
        if cookie is not None:
            cookies.append(cookie)
    return cookies
