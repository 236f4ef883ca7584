"""
=============================================================================
RESPONSE EMITTERS
=============================================================================

An emitter hands a finished Response to whatever sits below the
application.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   StreamEmitter(output)      raw HTTP/1.x onto a binary file object  │
    │                                                                      │
    │       HTTP/1.1 200 OK\\r\\n                                            │
    │       Content-Type: text/plain\\r\\n     one line per header value     │
    │       Set-Cookie: a=1\\r\\n                                            │
    │       Set-Cookie: b=2\\r\\n                                            │
    │       \\r\\n                                                            │
    │       Lorem ipsum...                  only if the body is not empty  │
    │                                                                      │
    │   WSGIEmitter(start_response)  status + header list to the server,  │
    │                                body returned as the WSGI iterable    │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Header names are written Title-Cased per dash-separated word
("content-type" → "Content-Type"). An emitter sends one response only;
a second emit() raises HeadersAlreadySentError.

=============================================================================
"""

from abc import ABC, abstractmethod
from typing import Any, BinaryIO, Callable, Iterable, List, Tuple
import logging

from .exceptions import HeadersAlreadySentError
from .http.response import Response


logger = logging.getLogger(__name__)


def normalize_header_name(name: str) -> str:
    """Upper-case the first letter of every dash-separated word."""
    return "-".join(part[:1].upper() + part[1:] for part in name.split("-"))


def status_line(response: Response) -> str:
    """``HTTP/<version> <code>[ <phrase>]``"""
    line = f"HTTP/{response.protocol_version} {response.status_code}"
    if response.reason_phrase:
        line += f" {response.reason_phrase}"
    return line


class Emitter(ABC):
    """Sends a response to the client."""

    def __init__(self):
        self._sent = False

    @property
    def headers_sent(self) -> bool:
        return self._sent

    def emit(self, response: Response) -> Any:
        if self._sent:
            raise HeadersAlreadySentError()
        self._sent = True
        logger.debug(f"Emitting {status_line(response)}")
        return self._emit(response)

    @abstractmethod
    def _emit(self, response: Response) -> Any:
        """Write the response."""


class StreamEmitter(Emitter):
    """Writes the response as HTTP/1.x bytes to ``output``."""

    def __init__(self, output: BinaryIO):
        super().__init__()
        self.output = output

    def _emit(self, response: Response) -> None:
        lines = [status_line(response)]
        for name, values in response.headers.items():
            name = normalize_header_name(name)
            lines.extend(f"{name}: {value}" for value in values)

        head = "\r\n".join(lines) + "\r\n\r\n"
        self.output.write(head.encode("latin-1"))

        body = response.body
        if body.get_size():
            self.output.write(bytes(body))
        self.output.flush()


class WSGIEmitter(Emitter):
    """
    Emits through a WSGI ``start_response`` callable.

        def application(environ, start_response):
            response = handle(make_server_request(environ))
            return WSGIEmitter(start_response).emit(response)
    """

    def __init__(self, start_response: Callable[..., Any]):
        super().__init__()
        self.start_response = start_response

    def _emit(self, response: Response) -> Iterable[bytes]:
        status = f"{response.status_code} {response.reason_phrase}".rstrip()
        headers: List[Tuple[str, str]] = [
            (normalize_header_name(name), value)
            for name, values in response.headers.items()
            for value in values
        ]
        self.start_response(status, headers)

        body = response.body
        if not body.get_size():
            return []
        return [bytes(body)]
