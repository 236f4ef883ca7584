"""
=============================================================================
HTTP MESSAGE VALUE OBJECTS
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   Message ──► Request ──► ServerRequest                             │
    │          └──► Response                                              │
    │                                                                      │
    │   Uri             URI components, immutable                         │
    │   Stream          body wrapper over a binary file object            │
    │   UploadedFile    uploaded file + upload strategy                   │
    │   HTTPStatus      status codes with reason phrases                  │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

All of them are immutable except Stream (a body is read and written in
place) and UploadedFile (which is consumed by move_to()).

=============================================================================
"""

from .message import Message
from .request import Request
from .response import Response
from .server_request import ServerRequest
from .status_codes import HTTPStatus, reason_phrase
from .stream import Stream
from .uploaded_file import UploadError, UploadNode, UploadedFile, is_upload_node
from .uri import Uri

__all__ = [
    "HTTPStatus",
    "Message",
    "Request",
    "Response",
    "ServerRequest",
    "Stream",
    "UploadError",
    "UploadNode",
    "UploadedFile",
    "Uri",
    "is_upload_node",
    "reason_phrase",
]
