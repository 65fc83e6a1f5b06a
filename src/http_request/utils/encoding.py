# src/http_request/utils/encoding.py
"""
URL encoding helpers used to build query strings and form bodies.
"""

import re
from typing import Mapping, Optional
from urllib.parse import quote, unquote

ENCODING = "utf-8"

_CONTENT_LENGTH_RE = re.compile(r"^[0-9]+$")


def url_encode(value: str) -> str:
    """
    Percent-encode a string using UTF-8.

    Only RFC 3986 unreserved characters stay as they are, so a space becomes
    ``%20`` rather than ``+``.

    Examples:
        >>> url_encode("x y")
        'x%20y'
        >>> url_encode("a&b=c")
        'a%26b%3Dc'
    """
    return quote(str(value), safe="", encoding=ENCODING)


def url_decode(value: str) -> str:
    """
    Decode a percent-encoded UTF-8 string. ``+`` is treated as a space.

    Examples:
        >>> url_decode("x%20y")
        'x y'
        >>> url_decode("x+y")
        'x y'
    """
    return unquote(value.replace("+", " "), encoding=ENCODING)


def encode_params(params: Mapping[str, str]) -> str:
    """
    Encode parameters as ``name=value`` pairs joined by ``&``.

    Insertion order of the mapping is kept.

    Example:
        >>> encode_params({"a": "1", "b": "x y"})
        'a=1&b=x%20y'
    """
    return "&".join(f"{url_encode(name)}={url_encode(value)}" for name, value in params.items())


def append_query(url: str, query: str) -> str:
    """
    Append an encoded query string to a URL.

    Examples:
        >>> append_query("http://h/p", "a=1")
        'http://h/p?a=1'
        >>> append_query("http://h/p?x=0", "a=1")
        'http://h/p?x=0&a=1'
    """
    if not query:
        return url
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{query}"


def parse_content_length(value: Optional[str]) -> int:
    """
    Parse a Content-Length header value.

    Anything that is not a plain non-negative integer counts as unknown.

    Returns:
        The length, or -1 when missing or not numeric

    Examples:
        >>> parse_content_length("1024")
        1024
        >>> parse_content_length("12, 12")
        -1
        >>> parse_content_length(None)
        -1
    """
    if value is not None and _CONTENT_LENGTH_RE.match(value.strip()):
        return int(value.strip())
    return -1
