"""
Factories reading plain request data out of a WSGI ``environ``:
headers, method, protocol version, cookies, query parameters and body.
"""

from http.cookies import CookieError, SimpleCookie
from typing import Any, Dict, Mapping
from urllib.parse import parse_qs
import logging
import re

from ..http.stream import Stream


logger = logging.getLogger(__name__)

# CGI variables that carry a header without the HTTP_ prefix
_CONTENT_HEADERS = {
    "CONTENT_TYPE": "Content-Type",
    "CONTENT_LENGTH": "Content-Length",
    "CONTENT_MD5": "Content-Md5",
}

_PROTOCOL = re.compile(r"\A(?:HTTP/)?(\d\.\d+)\Z")

_CHUNK_SIZE = 64 * 1024


def make_headers(environ: Mapping[str, Any]) -> Dict[str, str]:
    """
    Collect request headers from the environ.

    ``HTTP_ACCEPT_LANGUAGE`` becomes ``Accept-Language``. The content
    headers come from their CGI names; an ``HTTP_CONTENT_TYPE`` duplicate
    is ignored when ``CONTENT_TYPE`` is present. Empty values are
    skipped.
    """
    headers: Dict[str, str] = {}
    for key, value in environ.items():
        if not isinstance(value, str) or not value.strip():
            continue
        if key.startswith("HTTP_"):
            name = key[5:]
            if name in _CONTENT_HEADERS and name in environ:
                continue
            headers["-".join(part.capitalize() for part in name.split("_"))] = value
        elif key in _CONTENT_HEADERS:
            headers[_CONTENT_HEADERS[key]] = value
    return headers


def make_method(environ: Mapping[str, Any]) -> str:
    return environ.get("REQUEST_METHOD") or "GET"


def make_protocol_version(environ: Mapping[str, Any]) -> str:
    """
    "HTTP/1.0" or "1.0" → "1.0"; "1.1" when the environ has nothing.

    Raises:
        ValueError: For anything else.
    """
    protocol = environ.get("SERVER_PROTOCOL") or "HTTP/1.1"
    match = _PROTOCOL.match(protocol)
    if match is None:
        raise ValueError(f'Unrecognized protocol version "{protocol}".')
    return match.group(1)


def make_cookie_params(environ: Mapping[str, Any]) -> Dict[str, str]:
    """Cookie name → value from ``HTTP_COOKIE``; a malformed header gives {}."""
    raw = environ.get("HTTP_COOKIE")
    if not raw:
        return {}
    cookie = SimpleCookie()
    try:
        cookie.load(raw)
    except CookieError as e:
        logger.warning(f"Ignoring malformed Cookie header: {e}")
        return {}
    return {name: morsel.value for name, morsel in cookie.items()}


def make_query_params(environ: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Parameters of ``QUERY_STRING``.

    A name given once maps to its value, a repeated name to the list of
    its values.
    """
    parsed = parse_qs(environ.get("QUERY_STRING", ""), keep_blank_values=True)
    return {name: values[0] if len(values) == 1 else values for name, values in parsed.items()}


def make_body(environ: Mapping[str, Any]) -> Stream:
    """
    Copy the request body from ``wsgi.input`` into a fresh Stream.

    At most ``CONTENT_LENGTH`` bytes are read; without a length the
    body is considered empty, since reading further could block.
    """
    stream = Stream()
    source = environ.get("wsgi.input")
    try:
        remaining = int(environ.get("CONTENT_LENGTH") or 0)
    except ValueError:
        remaining = 0
    if source is None or remaining <= 0:
        return stream

    while remaining > 0:
        chunk = source.read(min(remaining, _CHUNK_SIZE))
        if not chunk:
            break
        stream.write(chunk)
        remaining -= len(chunk)
    stream.rewind()
    return stream
