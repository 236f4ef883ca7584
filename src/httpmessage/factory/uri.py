"""
=============================================================================
URI FROM A WSGI ENVIRON
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                       WHERE EACH PART COMES FROM                    │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   scheme   forced_scheme │ "https" if HTTPS is set and not "off"    │
    │                          │ else "http"                              │
    │   host     forced_host   │ SERVER_NAME │ SERVER_ADDR / LOCAL_ADDR   │
    │                          │ (IPv6 addresses get brackets)            │
    │   port     forced_port   │ SERVER_PORT │ default_port (80)          │
    │   path     REQUEST_URI path │ SCRIPT_NAME + PATH_INFO               │
    │   query    REQUEST_URI query │ QUERY_STRING                         │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Forced values come from RequestFactoryConfig, never from globals.

=============================================================================
"""

from typing import Any, Mapping, Optional
from urllib.parse import quote, urlsplit

from ..config import RequestFactoryConfig
from ..http.uri import Uri


# Characters PATH_INFO may hold that must stay literal in a path
_PATH_SAFE = "/:@!$&'()*+,;="


def _config(config: Optional[RequestFactoryConfig]) -> RequestFactoryConfig:
    return config if config is not None else RequestFactoryConfig()


def make_scheme(environ: Mapping[str, Any], config: Optional[RequestFactoryConfig] = None) -> str:
    config = _config(config)
    if config.forced_scheme:
        return config.forced_scheme
    https = environ.get("HTTPS")
    if https and https != "off":
        return "https"
    return "http"


def make_host(environ: Mapping[str, Any], config: Optional[RequestFactoryConfig] = None) -> str:
    """Host of the request, or "" when the environ does not know it."""
    config = _config(config)
    if config.forced_host:
        return config.forced_host
    if environ.get("SERVER_NAME"):
        return environ["SERVER_NAME"]

    address = environ.get("LOCAL_ADDR") or environ.get("SERVER_ADDR") or ""
    if ":" in address:
        address = f"[{address}]"
    return address


def make_port(environ: Mapping[str, Any], config: Optional[RequestFactoryConfig] = None) -> int:
    config = _config(config)
    if config.forced_port:
        return config.forced_port
    port = environ.get("SERVER_PORT")
    if not port:
        return config.default_port
    return int(port)


def make_path(environ: Mapping[str, Any]) -> str:
    request_uri = environ.get("REQUEST_URI")
    if request_uri:
        return urlsplit(request_uri).path
    path = environ.get("SCRIPT_NAME", "") + environ.get("PATH_INFO", "")
    return quote(path, safe=_PATH_SAFE)


def make_query(environ: Mapping[str, Any]) -> str:
    request_uri = environ.get("REQUEST_URI")
    if request_uri:
        return urlsplit(request_uri).query
    return environ.get("QUERY_STRING", "")


def make_uri(environ: Mapping[str, Any], config: Optional[RequestFactoryConfig] = None) -> Uri:
    """
    Assemble the request URI.

    With a host the result is absolute and always carries the port (the
    Uri hides it again when it is the scheme's standard port). Without a
    host only scheme, port, path and query are set.
    """
    scheme = make_scheme(environ, config)
    host = make_host(environ, config)
    port = make_port(environ, config)
    path = make_path(environ)
    query = make_query(environ)

    url = ""
    if host:
        url = f"{scheme}://{host}:{port}"
        path = "/" + path.lstrip("/")
    url += path
    if query:
        url += "?" + query

    uri = Uri(url)
    if host:
        return uri
    return uri.with_scheme(scheme).with_port(port)
