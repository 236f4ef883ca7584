"""
=============================================================================
HTTP REQUEST
=============================================================================

An outgoing or incoming request: method, URI and request target on top
of the Message basics.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                        REQUEST LINE                                 │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   GET /users?page=2 HTTP/1.1                                        │
    │   ─┬─ ──────┬────── ────┬───                                        │
    │    │        │           └── protocol_version                         │
    │    │        └── request_target (path + query of the URI by default) │
    │    └── method                                                        │
    │   Host: example.com:8080            ← synchronised from the URI      │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
HOST HEADER
=============================================================================

Setting a URI with a host rewrites the Host header to ``host[:port]``.
Pass ``preserve_host=True`` to keep a Host header that is already there:

    req = Request(uri="http://a.example/")          # Host: a.example
    req.with_uri(Uri("http://b.example/"))          # Host: b.example
    req.with_uri(Uri("http://b.example/"), True)    # Host: a.example

Constructor headers win over the constructor URI.

=============================================================================
"""

from copy import copy
from typing import Any, Mapping, Optional, Union

from .message import HeaderValue, Message
from .uri import Uri


class Request(Message):
    """
    Immutable HTTP request.

    Args:
        body: Message body, see Message.
        headers: Initial headers.
        uri: Target URI as a string or Uri; empty by default.
        method: Request method, "GET" by default.
        protocol: Protocol version.
    """

    METHOD_CONNECT = "CONNECT"
    METHOD_DELETE = "DELETE"
    METHOD_GET = "GET"
    METHOD_HEAD = "HEAD"
    METHOD_OPTIONS = "OPTIONS"
    METHOD_PATCH = "PATCH"
    METHOD_POST = "POST"
    METHOD_PUT = "PUT"
    METHOD_TRACE = "TRACE"

    # Known methods are normalised to upper case; anything else is kept
    # verbatim (extension methods are case-sensitive).
    KNOWN_METHODS = frozenset({
        METHOD_CONNECT, METHOD_DELETE, METHOD_GET, METHOD_HEAD, METHOD_OPTIONS,
        METHOD_PATCH, METHOD_POST, METHOD_PUT, METHOD_TRACE,
    })

    def __init__(
        self,
        body: Any = None,
        headers: Optional[Mapping[str, HeaderValue]] = None,
        uri: Union[str, Uri, None] = None,
        method: Optional[str] = None,
        protocol: Optional[str] = None,
    ):
        super().__init__(body, headers, protocol)
        self._method = self.METHOD_GET
        self._target: Optional[str] = None

        # after the headers, so an explicit Host header survives
        self._set_uri("" if uri is None else uri, preserve_host=True)
        if method is not None:
            self._set_method(method)

    # =========================================================================
    # METHOD
    # =========================================================================

    @property
    def method(self) -> str:
        return self._method

    def with_method(self, method: str) -> "Request":
        new = copy(self)
        new._set_method(method)
        return new

    # =========================================================================
    # URI
    # =========================================================================

    @property
    def uri(self) -> Uri:
        return self._uri

    def with_uri(self, uri: Uri, preserve_host: bool = False) -> "Request":
        if not isinstance(uri, Uri):
            raise TypeError(f'Invalid URI provided; must be a Uri, "{type(uri).__name__}" received.')
        new = copy(self)
        new._set_uri(uri, preserve_host)
        return new

    # =========================================================================
    # REQUEST TARGET
    # =========================================================================

    @property
    def request_target(self) -> str:
        """
        The target as it would appear in the request line.

        An explicit target set through with_request_target() wins;
        otherwise the URI path (or "/") plus "?query" when present.
        """
        if self._target:
            return self._target
        target = self._uri.path or "/"
        if self._uri.query:
            target += "?" + self._uri.query
        return target

    def with_request_target(self, target: Union[str, Uri]) -> "Request":
        """
        Copy with an explicit request target.

        Accepts "*" (asterisk form), a string parsed as URI or a Uri.
        The fragment is never part of a request target and is dropped.
        """
        new = copy(self)
        new._set_target(target)
        return new

    # =========================================================================
    # INTERNALS
    # =========================================================================

    def _set_method(self, method: Any) -> None:
        if not isinstance(method, str):
            raise TypeError(
                f'Invalid HTTP method provided. Must be a string; "{type(method).__name__}" received.'
            )
        upper = method.upper()
        self._method = upper if upper in self.KNOWN_METHODS else method

    def _set_uri(self, uri: Any, preserve_host: bool = False) -> None:
        if isinstance(uri, str):
            uri = Uri(uri)
        if not isinstance(uri, Uri):
            raise TypeError(
                f"Invalid URI provided. Must be None, a string or a Uri; "
                f'"{type(uri).__name__}" received.'
            )
        self._uri = uri

        if preserve_host and self.has_header("Host"):
            return
        if not uri.host:
            return

        host = uri.host
        if uri.port:
            host += f":{uri.port}"
        self._set_header("Host", host)

    def _set_target(self, target: Any) -> None:
        if target == "*":
            self._target = target
            return
        if isinstance(target, str):
            target = Uri(target)
        if not isinstance(target, Uri):
            raise TypeError(
                f'Invalid target provided; must be a string or a Uri, "{type(target).__name__}" received.'
            )
        self._target = str(target.with_fragment(""))
