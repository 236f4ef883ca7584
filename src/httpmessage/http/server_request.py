"""
=============================================================================
SERVER REQUEST
=============================================================================

The request as the application sees it on the server side. On top of a
Request it carries everything the server derived from the environment:

    ┌─────────────────────────────────────────────────────────────────────┐
    │   server_params     the WSGI environ (REMOTE_ADDR, SERVER_NAME ...)  │
    │   cookie_params     parsed Cookie header                             │
    │   query_params      parsed query string                              │
    │   uploaded_files    tree of UploadedFile                             │
    │   parsed_body       decoded body (form fields, JSON ...)             │
    │   attributes        anything the application derives (route args)   │
    └─────────────────────────────────────────────────────────────────────┘

None of these are parsed here; the factory (or the application) supplies
them. A body given as a path is opened read-only.

=============================================================================
"""

from copy import copy
from typing import Any, Dict, Mapping, Optional, Union

from .message import HeaderValue
from .request import Request
from .stream import Stream
from .uploaded_file import UploadNode, is_upload_node
from .uri import Uri


_SCALARS = (str, bytes, bytearray, int, float, complex)


class ServerRequest(Request):
    """Immutable server-side request."""

    def __init__(
        self,
        server_params: Optional[Mapping[str, Any]] = None,
        cookie_params: Optional[Mapping[str, Any]] = None,
        query_params: Optional[Mapping[str, Any]] = None,
        uploaded_files: Optional[Dict[Any, UploadNode]] = None,
        attributes: Optional[Mapping[str, Any]] = None,
        parsed_body: Any = None,
        body: Any = None,
        headers: Optional[Mapping[str, HeaderValue]] = None,
        uri: Union[str, Uri, None] = None,
        method: Optional[str] = None,
        protocol: Optional[str] = None,
    ):
        self._server_params = dict(server_params or {})
        self._cookie_params = dict(cookie_params or {})
        self._query_params = dict(query_params or {})
        self._attributes = dict(attributes or {})
        self._set_parsed_body(parsed_body)
        self._set_uploaded_files(uploaded_files or {})

        super().__init__(body, headers, uri, method, protocol)

    def __copy__(self) -> "ServerRequest":
        new = super().__copy__()
        new._attributes = dict(self._attributes)
        return new

    # =========================================================================
    # SERVER / COOKIE / QUERY PARAMETERS
    # =========================================================================

    @property
    def server_params(self) -> Dict[str, Any]:
        return dict(self._server_params)

    def get_server_param(self, name: str, default: Any = None) -> Any:
        return self._server_params.get(name, default)

    @property
    def cookie_params(self) -> Dict[str, Any]:
        return dict(self._cookie_params)

    def get_cookie_param(self, name: str, default: Any = None) -> Any:
        return self._cookie_params.get(name, default)

    def with_cookie_params(self, cookies: Mapping[str, Any]) -> "ServerRequest":
        new = copy(self)
        new._cookie_params = dict(cookies)
        return new

    @property
    def query_params(self) -> Dict[str, Any]:
        return dict(self._query_params)

    def get_query_param(self, name: str, default: Any = None) -> Any:
        return self._query_params.get(name, default)

    def with_query_params(self, query: Mapping[str, Any]) -> "ServerRequest":
        new = copy(self)
        new._query_params = dict(query)
        return new

    # =========================================================================
    # UPLOADED FILES / PARSED BODY
    # =========================================================================

    @property
    def uploaded_files(self) -> Dict[Any, UploadNode]:
        return self._uploaded_files

    def with_uploaded_files(self, files: Dict[Any, UploadNode]) -> "ServerRequest":
        new = copy(self)
        new._set_uploaded_files(files)
        return new

    @property
    def parsed_body(self) -> Any:
        return self._parsed_body

    def with_parsed_body(self, data: Any) -> "ServerRequest":
        new = copy(self)
        new._set_parsed_body(data)
        return new

    # =========================================================================
    # ATTRIBUTES
    # =========================================================================

    @property
    def attributes(self) -> Dict[str, Any]:
        return dict(self._attributes)

    def get_attribute(self, name: str, default: Any = None) -> Any:
        return self._attributes.get(name, default)

    def with_attribute(self, name: str, value: Any) -> "ServerRequest":
        new = copy(self)
        new._attributes[name] = value
        return new

    def with_attributes(self, attributes: Mapping[str, Any]) -> "ServerRequest":
        """Copy with the attributes replaced."""
        new = copy(self)
        new._attributes = dict(attributes)
        return new

    def with_added_attributes(self, attributes: Mapping[str, Any]) -> "ServerRequest":
        """Copy with the attributes merged in; the new values win."""
        new = copy(self)
        new._attributes.update(attributes)
        return new

    def without_attribute(self, name: str) -> "ServerRequest":
        new = copy(self)
        new._attributes.pop(name, None)
        return new

    # =========================================================================
    # INTERNALS
    # =========================================================================

    def _set_body(self, body: Any) -> None:
        if not isinstance(body, Stream):
            try:
                body = Stream(body, "rb")
            except TypeError as e:
                raise TypeError(
                    f"Invalid body provided; must be a path, a file object or a Stream, "
                    f'"{type(body).__name__}" received.'
                ) from e
        self._body = body

    def _set_uploaded_files(self, files: Any) -> None:
        if not isinstance(files, dict) or not is_upload_node(files):
            raise ValueError("Invalid structure of uploaded files provided.")
        self._uploaded_files = files

    def _set_parsed_body(self, data: Any) -> None:
        if isinstance(data, _SCALARS):
            raise TypeError(
                f"Invalid parsed body provided; must be None, a mapping, a list or an object, "
                f'"{type(data).__name__}" provided.'
            )
        self._parsed_body = data
