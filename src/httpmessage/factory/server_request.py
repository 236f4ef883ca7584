"""
Build a ServerRequest from a WSGI environ.

    def application(environ, start_response):
        request = make_server_request(environ)
        ...

Every part can be supplied explicitly; only the missing ones are derived
from the environ.
"""

from typing import Any, Dict, Mapping, Optional, Union
import logging

from ..config import RequestFactoryConfig
from ..http.server_request import ServerRequest
from ..http.uri import Uri
from .environ import (
    make_body,
    make_cookie_params,
    make_headers,
    make_method,
    make_protocol_version,
    make_query_params,
)
from .uploaded_files import make_uploaded_files
from .uri import make_uri


logger = logging.getLogger(__name__)


def make_server_request(
    environ: Mapping[str, Any],
    cookie_params: Optional[Mapping[str, Any]] = None,
    query_params: Optional[Mapping[str, Any]] = None,
    uploaded_files: Optional[Mapping[Any, Any]] = None,
    attributes: Optional[Mapping[str, Any]] = None,
    parsed_body: Any = None,
    body: Any = None,
    headers: Optional[Mapping[str, Any]] = None,
    uri: Union[str, Uri, None] = None,
    method: Optional[str] = None,
    protocol: Optional[str] = None,
    config: Optional[RequestFactoryConfig] = None,
) -> ServerRequest:
    """
    Assemble a ServerRequest.

    Args:
        environ: The WSGI environ; also becomes the server params.
        uploaded_files: A files specification, normalized with
                        make_uploaded_files().
        config: Forced URI parts; defaults to no overrides.
        Others: Used as given instead of being derived from ``environ``.

    Raises:
        ValueError: For an unrecognized SERVER_PROTOCOL or an invalid
                    files specification.
    """
    server: Dict[str, Any] = dict(environ)

    request = ServerRequest(
        server_params=server,
        cookie_params=cookie_params if cookie_params is not None else make_cookie_params(server),
        query_params=query_params if query_params is not None else make_query_params(server),
        uploaded_files=make_uploaded_files(uploaded_files),
        attributes=attributes,
        parsed_body=parsed_body,
        body=body if body is not None else make_body(server),
        headers=headers if headers is not None else make_headers(server),
        uri=uri if uri is not None else make_uri(server, config),
        method=method if method is not None else make_method(server),
        protocol=protocol if protocol is not None else make_protocol_version(server),
    )
    logger.debug(f"Built server request {request.method} {request.uri}")
    return request
