"""
Factories turning a WSGI environ into message objects.
"""

from .environ import (
    make_body,
    make_cookie_params,
    make_headers,
    make_method,
    make_protocol_version,
    make_query_params,
)
from .server_request import make_server_request
from .uploaded_files import make_uploaded_files
from .uri import make_host, make_path, make_port, make_query, make_scheme, make_uri

__all__ = [
    "make_body",
    "make_cookie_params",
    "make_headers",
    "make_host",
    "make_method",
    "make_path",
    "make_port",
    "make_protocol_version",
    "make_query",
    "make_query_params",
    "make_scheme",
    "make_server_request",
    "make_uploaded_files",
    "make_uri",
]
