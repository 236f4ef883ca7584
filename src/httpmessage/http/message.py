"""
=============================================================================
HTTP MESSAGE BASE
=============================================================================

What requests and responses have in common: a protocol version, headers
and a body.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                         MESSAGE ANATOMY                             │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   HTTP/1.1                          ← protocol_version "1.1"         │
    │   Content-Type: text/html           ← headers                        │
    │   Accept: text/html, */*                                             │
    │                                                                      │
    │   <html>...</html>                  ← body (a Stream)                │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
HEADERS
=============================================================================

Names are case-insensitive; the first spelling seen is the one kept:

    msg = Message().with_header("Content-Type", "text/html")
    msg.get_header("content-type")        # ["text/html"]
    msg.headers                           # {"Content-Type": ["text/html"]}

Values are always lists of strings. Each value is trimmed and runs of
whitespace, line breaks included, are folded into one space. Other
control characters are rejected.

Messages are immutable: every ``with_*`` method returns a modified copy.

=============================================================================
"""

from copy import copy
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union
import re

from ..exceptions import UnsupportedProtocolError
from .stream import Stream


HeaderValue = Union[str, List[str]]

# RFC 7230 token characters
_HEADER_NAME = re.compile(r"^[a-zA-Z0-9'!#$%&*+\-.^_`|~]+$")
_ILLEGAL_VALUE_CHARS = re.compile(r"[^\x09\x0a\x0d\x20-\x7e\x80-\xfe]")
_WHITESPACE = re.compile(r"\s+")


class Message:
    """
    Immutable HTTP message.

    Args:
        body: A Stream, an open binary file object or a path. Defaults
              to an empty temporary stream.
        headers: Mapping of header names to a value or list of values.
        protocol: Protocol version, "1.1" by default.
    """

    def __init__(
        self,
        body: Any = None,
        headers: Optional[Mapping[str, HeaderValue]] = None,
        protocol: Optional[str] = None,
    ):
        self._headers: Dict[str, List[str]] = {}
        # lowercase name -> spelling used as key of _headers
        self._header_names: Dict[str, str] = {}
        self._protocol = "1.1"

        self._set_body(Stream() if body is None else body)
        if headers is not None:
            for name, value in headers.items():
                self._add_header(name, value)
        if protocol is not None:
            self._set_protocol(protocol)

    def __copy__(self) -> "Message":
        new = self.__class__.__new__(self.__class__)
        new.__dict__.update(self.__dict__)
        new._headers = {name: list(values) for name, values in self._headers.items()}
        new._header_names = dict(self._header_names)
        return new

    # =========================================================================
    # PROTOCOL VERSION
    # =========================================================================

    @property
    def protocol_version(self) -> str:
        return self._protocol

    def with_protocol_version(self, version: str) -> "Message":
        new = copy(self)
        try:
            new._set_protocol(version)
        except UnsupportedProtocolError:
            raise
        except (TypeError, ValueError) as e:
            raise UnsupportedProtocolError(str(version)) from e
        return new

    # =========================================================================
    # HEADERS
    # =========================================================================

    @property
    def headers(self) -> Dict[str, List[str]]:
        """All headers, keyed by their original spelling."""
        return {name: list(values) for name, values in self._headers.items()}

    def has_header(self, name: str) -> bool:
        return name.strip().lower() in self._header_names

    def get_header(self, name: str) -> List[str]:
        """Values of the header, or an empty list."""
        key = self._header_names.get(name.strip().lower())
        if key is None:
            return []
        return list(self._headers[key])

    def get_header_line(self, name: str) -> str:
        """Values of the header joined by commas, or ""."""
        return ",".join(self.get_header(name))

    def with_header(self, name: str, value: HeaderValue) -> "Message":
        """Copy with the header replaced."""
        new = copy(self)
        try:
            new._set_header(name, value)
        except (TypeError, ValueError) as e:
            raise ValueError("Invalid header provided.") from e
        return new

    def with_added_header(self, name: str, value: HeaderValue) -> "Message":
        """Copy with the values appended to the header."""
        new = copy(self)
        try:
            new._add_header(name, value)
        except (TypeError, ValueError) as e:
            raise ValueError("Invalid header provided.") from e
        return new

    def without_header(self, name: str) -> "Message":
        new = copy(self)
        new._remove_header(name)
        return new

    # =========================================================================
    # BODY
    # =========================================================================

    @property
    def body(self) -> Stream:
        return self._body

    def with_body(self, body: Stream) -> "Message":
        if not isinstance(body, Stream):
            raise TypeError(f'Invalid body provided; must be a Stream, "{type(body).__name__}" received.')
        new = copy(self)
        new._body = body
        return new

    # =========================================================================
    # INTERNALS
    # =========================================================================

    def _set_body(self, body: Any) -> None:
        if not isinstance(body, Stream):
            try:
                body = Stream(body, "w+b")
            except TypeError as e:
                raise TypeError(
                    f"Invalid body provided; must be a path, a file object or a Stream, "
                    f'"{type(body).__name__}" received.'
                ) from e
        self._body = body

    def _set_protocol(self, version: Any) -> None:
        if not isinstance(version, str):
            raise TypeError(
                f'The HTTP protocol version must be a string, "{type(version).__name__}" received.'
            )
        version = version.strip()
        if not version:
            raise ValueError("The version of HTTP protocol can not be empty.")

        parsed = _version_tuple(version)
        if parsed < (1, 0):
            raise UnsupportedProtocolError(version, "is already not supported")
        if parsed >= (2, 0):
            raise UnsupportedProtocolError(version, "is not yet supported")
        self._protocol = version

    def _set_header(self, name: Any, value: Any) -> None:
        name = _prepare_header_name(name)
        values = _prepare_header_value(value)
        key = self._header_names.setdefault(name.lower(), name)
        self._headers[key] = values

    def _add_header(self, name: Any, value: Any) -> None:
        name = _prepare_header_name(name)
        values = _prepare_header_value(value)
        key = self._header_names.setdefault(name.lower(), name)
        self._headers.setdefault(key, []).extend(values)

    def _remove_header(self, name: str) -> None:
        key = self._header_names.pop(name.strip().lower(), None)
        if key is not None:
            del self._headers[key]


def _version_tuple(version: str) -> Tuple[int, ...]:
    try:
        return tuple(int(part) for part in version.split("."))
    except ValueError:
        raise UnsupportedProtocolError(version) from None


def _prepare_header_name(name: Any) -> str:
    if not isinstance(name, str):
        raise TypeError(f'Invalid header name "{name!r}" provided; must be a string.')
    name = name.strip()
    if not name:
        raise ValueError("Header name is empty.")
    if not _HEADER_NAME.match(name):
        raise ValueError(f'Header name "{name}" contains illegal characters.')
    return name


def _prepare_header_value(value: Any) -> List[str]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        raise TypeError(
            f'Invalid header value "{type(value).__name__}"; '
            f"must be a string or list of strings."
        )

    prepared = []
    for item in value:
        if not isinstance(item, str):
            raise TypeError(f'Invalid header value "{type(item).__name__}"; must be a string.')
        item = item.strip()
        if not item:
            raise ValueError("Empty header value provided.")
        if _ILLEGAL_VALUE_CHARS.search(item):
            raise ValueError(f'The header value "{item!r}" contains illegal characters.')
        prepared.append(_WHITESPACE.sub(" ", item))
    return prepared
