"""
=============================================================================
UPLOADED FILE
=============================================================================

A file received with a request. The server has already stored it under a
temporary name; the application decides where it finally goes.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                       UPLOADED FILE LIFECYCLE                        │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   UploadedFile("avatar.png", "/tmp/upl_x1", "image/png", 1024, 0)   │
    │        │                                                             │
    │        ├──► get_stream()          read it in place                   │
    │        │                                                             │
    │        └──► move_to("u42.png", {"target_directory": "/srv/up"})     │
    │                  │                                                   │
    │                  ├──► upload_strategy(file, target)                 │
    │                  └──► moved = True   (stream and move now refused)   │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

move_to() returns the strategy; check ``strategy.has_operation_error()``
to learn whether the relocation worked. The file counts as moved even
when it did not, so a failed upload cannot be retried on the same
object.

=============================================================================
"""

from enum import IntEnum
from typing import Any, Dict, List, Optional, Union
import logging

from ..exceptions import FileAlreadyMovedError
from ..uploading.base import UploadStrategy
from ..uploading.default import DefaultUploadStrategy
from ..uploading.options import UploadOptions
from ..uploading.target import UploadTarget
from .stream import Stream


logger = logging.getLogger(__name__)


class UploadError(IntEnum):
    """The classic upload error codes."""

    OK = 0
    INI_SIZE = 1
    FORM_SIZE = 2
    PARTIAL = 3
    NO_FILE = 4
    NO_TMP_DIR = 6
    CANT_WRITE = 7
    EXTENSION = 8


class UploadedFile:
    """
    Value object for one uploaded file.

    Args:
        client_filename: Name of the file on the client machine.
        temp_name: Path of the temporary file on the server.
        client_media_type: Media type announced by the client.
        size: Size in bytes.
        error: Upload error code, 0..8.

    Raises:
        TypeError: If an argument has the wrong type.
        ValueError: If ``error`` is out of range.
    """

    def __init__(
        self,
        client_filename: Optional[str] = None,
        temp_name: Optional[str] = None,
        client_media_type: Optional[str] = None,
        size: Optional[int] = None,
        error: Optional[int] = 0,
    ):
        self._client_filename = _optional(client_filename, str, "file name")
        self._temp_name = _optional(temp_name, str, "file path")
        self._client_media_type = _optional(client_media_type, str, "media type")
        self._size = _optional(size, int, "file size")

        error = _optional(error, int, "error status") or 0
        if not 0 <= error <= 8:
            raise ValueError("Invalid error status provided; must be an upload error code 0..8.")
        self._error = error

        self._stream: Optional[Stream] = None
        self._strategy: Optional[UploadStrategy] = None
        self._moved = False

    @property
    def client_filename(self) -> Optional[str]:
        return self._client_filename

    @property
    def temp_name(self) -> Optional[str]:
        return self._temp_name

    @property
    def client_media_type(self) -> Optional[str]:
        return self._client_media_type

    @property
    def size(self) -> Optional[int]:
        return self._size

    @property
    def error(self) -> int:
        return self._error

    @property
    def moved(self) -> bool:
        return self._moved

    # =========================================================================
    # STREAM
    # =========================================================================

    def set_stream(self, stream: Stream) -> None:
        if not isinstance(stream, Stream):
            raise TypeError(f'Invalid stream provided; "{type(stream).__name__}" received.')
        self._stream = stream

    def get_stream(self) -> Stream:
        """
        Stream over the uploaded content.

        A temporary file, when known, is (re)opened read-only on every
        call; otherwise the stream given to set_stream() is returned.

        Raises:
            FileAlreadyMovedError: After move_to().
            RuntimeError: If there is neither a temporary file nor a stream.
        """
        if self._moved:
            raise FileAlreadyMovedError()
        if self._temp_name:
            self._stream = Stream(self._temp_name, "rb")
        if self._stream is None:
            raise RuntimeError("The stream was not set.")
        return self._stream

    # =========================================================================
    # MOVING
    # =========================================================================

    @property
    def upload_strategy(self) -> UploadStrategy:
        """The strategy used by move_to(); a DefaultUploadStrategy unless set."""
        if self._strategy is None:
            self._strategy = DefaultUploadStrategy()
        return self._strategy

    def set_upload_strategy(self, strategy: UploadStrategy) -> "UploadedFile":
        if not isinstance(strategy, UploadStrategy):
            raise TypeError(
                f'Invalid upload strategy provided; "{type(strategy).__name__}" received.'
            )
        self._strategy = strategy
        return self

    def move_to(
        self,
        target: Union[str, UploadTarget],
        options: Optional[Any] = None,
    ) -> UploadStrategy:
        """
        Relocate the file through the upload strategy.

        Args:
            target: Target name, or an UploadTarget.
            options: UploadOptions, or anything UploadOptions accepts.
                     Applied to the strategy only when given.

        Returns:
            The strategy, for inspecting the outcome.

        Raises:
            FileAlreadyMovedError: If move_to() was already called.
        """
        if self._moved:
            raise FileAlreadyMovedError()

        strategy = self.upload_strategy
        if not isinstance(target, UploadTarget):
            target = UploadTarget(target)
        if options is not None:
            if not isinstance(options, UploadOptions):
                options = UploadOptions(options)
            strategy.set_options(options)

        logger.debug(f"Moving upload {self._client_filename!r} to {target} via {strategy.name}")
        strategy(self, target)

        self._moved = True
        return strategy

    def __repr__(self) -> str:
        return (
            f"UploadedFile(client_filename={self._client_filename!r}, "
            f"temp_name={self._temp_name!r}, error={self._error})"
        )


# Uploaded files as found in a request: a file, a mapping of field names
# (or indexes) to further nodes, or a list of them.
UploadNode = Union[UploadedFile, Dict[Union[str, int], Any], List[Any]]


def _optional(value: Any, expected: type, what: str) -> Any:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, expected):
        article = "an" if expected is int else "a"
        kind = "integer" if expected is int else "string"
        raise TypeError(f"Invalid {what} provided; must be {article} {kind}.")
    return value


def is_upload_node(value: Any) -> bool:
    """True if ``value`` is an UploadedFile or a tree of them."""
    if isinstance(value, UploadedFile):
        return True
    if isinstance(value, dict):
        return all(
            isinstance(key, (str, int)) and is_upload_node(item)
            for key, item in value.items()
        )
    if isinstance(value, list):
        return all(is_upload_node(item) for item in value)
    return False
