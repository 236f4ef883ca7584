"""
=============================================================================
HTTPMESSAGE - HTTP Message Value Objects and Upload Strategies
=============================================================================

Immutable objects for HTTP requests, responses, URIs and bodies, plus a
pluggable pipeline for relocating uploaded files. Application code works
with HTTP semantics; the transport stays somewhere else.

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    httpmessage/
    ├── __init__.py           # This file - package exports
    ├── config.py             # RequestFactoryConfig, UploadConfig, logging
    ├── exceptions.py         # Project exceptions
    ├── emitter.py            # StreamEmitter, WSGIEmitter
    ├── http/                 # Value objects
    │   ├── uri.py            # Uri
    │   ├── stream.py         # Stream (message body)
    │   ├── message.py        # Message (headers, protocol, body)
    │   ├── request.py        # Request
    │   ├── server_request.py # ServerRequest
    │   ├── response.py       # Response
    │   ├── status_codes.py   # HTTPStatus + reason phrases
    │   └── uploaded_file.py  # UploadedFile, UploadNode
    ├── uploading/            # Upload strategies
    │   ├── base.py           # State, UploadStrategy, AbstractUploadStrategy
    │   ├── options.py        # UploadOptions
    │   ├── target.py         # UploadTarget
    │   ├── filesystem.py     # Filesystem, LocalFilesystem
    │   ├── directory.py      # DirectoryStrategy
    │   ├── move.py           # MoveStrategy
    │   ├── queue.py          # StrategiesQueue
    │   └── default.py        # DefaultUploadStrategy
    └── factory/              # WSGI environ → ServerRequest

=============================================================================
QUICK START
=============================================================================

    from httpmessage import UploadConfig, make_server_request, setup_logging

    config = UploadConfig(target_directory="/var/uploads", log_level="DEBUG")
    config.validate()
    setup_logging(config.log_level)
    options = config.to_options()

    def application(environ, start_response):
        request = make_server_request(environ, uploaded_files=parse_files(environ))
        avatar = request.uploaded_files["avatar"]

        strategy = avatar.move_to("user-42.png", options)
        if strategy.has_operation_error():
            response = Response(500).with_header("X-Error", strategy.operation_error)
        else:
            response = Response(201)
        return WSGIEmitter(start_response).emit(response)

=============================================================================
"""

__version__ = "1.0.0"

from .config import RequestFactoryConfig, UploadConfig, setup_logging
from .emitter import Emitter, StreamEmitter, WSGIEmitter
from .exceptions import (
    FileAlreadyMovedError,
    HeadersAlreadySentError,
    QueueLockedError,
    UnknownOperationError,
    UnsupportedProtocolError,
)
from .factory import make_server_request
from .http import (
    HTTPStatus,
    Message,
    Request,
    Response,
    ServerRequest,
    Stream,
    UploadedFile,
    UploadError,
    Uri,
)
from .uploading import (
    DefaultUploadStrategy,
    DirectoryStrategy,
    MoveStrategy,
    State,
    StrategiesQueue,
    UploadOptions,
    UploadTarget,
)

__all__ = [
    "DefaultUploadStrategy",
    "DirectoryStrategy",
    "Emitter",
    "FileAlreadyMovedError",
    "HTTPStatus",
    "HeadersAlreadySentError",
    "Message",
    "MoveStrategy",
    "QueueLockedError",
    "Request",
    "RequestFactoryConfig",
    "Response",
    "ServerRequest",
    "State",
    "StrategiesQueue",
    "Stream",
    "StreamEmitter",
    "UnknownOperationError",
    "UnsupportedProtocolError",
    "UploadConfig",
    "UploadError",
    "UploadOptions",
    "UploadTarget",
    "UploadedFile",
    "Uri",
    "WSGIEmitter",
    "make_server_request",
    "setup_logging",
    "__version__",
]
