"""
=============================================================================
STREAM: A MESSAGE BODY
=============================================================================

Message bodies can be big (file uploads, downloads), so they are never
held as one ``bytes`` value. A Stream wraps a binary file object and
exposes the few operations a body needs.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                        WHERE BODIES COME FROM                       │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Stream()                     anonymous temporary file (w+b)        │
    │   Stream("/tmp/upl3xAb", "rb") a file on disk                        │
    │   Stream(environ["wsgi.input"]) an existing file object              │
    │   Stream(None)                 no resource at all                    │
    │   Stream.make(b"hello")        temporary file holding the bytes      │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
MISSING RESOURCE BEHAVIOUR
=============================================================================

Queries answer conservatively without a resource:

    get_size() → None     eof() → True      is_readable() → False
    is_seekable() → False is_writable() → False
    get_contents() → b""  get_metadata() → None   bytes(stream) → b""

Operations that need one (tell, seek, read, write, copy) raise
RuntimeError.

=============================================================================
"""

from typing import Any, BinaryIO, Dict, Optional, Union
import io
import os
import shutil
import tempfile


_TEMPORARY = object()

Source = Union[str, "os.PathLike[str]", BinaryIO, "Stream"]


def _is_file_object(value: Any) -> bool:
    return hasattr(value, "read") or hasattr(value, "write")


class Stream:
    """
    Binary stream wrapper used as a message body.

    Args:
        resource: A path, an open binary file object, None for no
                  resource, or omitted for a fresh temporary file.
        mode: Mode used when ``resource`` is a path or omitted.
    """

    def __init__(self, resource: Any = _TEMPORARY, mode: str = "w+b"):
        self._resource: Optional[BinaryIO] = None
        if resource is _TEMPORARY:
            self._resource = tempfile.TemporaryFile(mode=mode)
        elif resource is not None:
            self.attach(resource, mode)

    @classmethod
    def make(cls, body: Any = b"", mode: str = "w+b") -> "Stream":
        """
        Build a stream from a body.

        Bytes and strings (UTF-8) are written to a temporary file which
        is then rewound. A Stream is returned unchanged. A file object
        is wrapped.

        Raises:
            TypeError: For any other type.
        """
        if isinstance(body, Stream):
            return body
        if isinstance(body, (bytes, bytearray, str)):
            stream = cls(mode=mode)
            if body:
                stream.write(body)
                stream.rewind()
            return stream
        if _is_file_object(body):
            return cls(body)
        raise TypeError(f'Invalid resource "{type(body).__name__}" provided.')

    # =========================================================================
    # RESOURCE MANAGEMENT
    # =========================================================================

    @property
    def resource(self) -> Optional[BinaryIO]:
        """The wrapped file object, or None."""
        return self._resource

    def attach(self, resource: Any, mode: str = "r+b") -> None:
        """
        Wrap a new resource, replacing the current one.

        The previous resource is detached, not closed.

        Raises:
            ValueError: If a path cannot be opened.
            TypeError: If ``resource`` is neither a path nor a file object.
        """
        if isinstance(resource, (str, os.PathLike)):
            try:
                self._resource = open(resource, mode)
            except OSError as e:
                raise ValueError(f'Invalid path "{os.fspath(resource)}" specified.') from e
        elif _is_file_object(resource):
            self._resource = resource
        else:
            raise TypeError(f'Invalid resource "{type(resource).__name__}" provided.')

    def detach(self) -> Optional[BinaryIO]:
        """Forget the resource and hand it back to the caller."""
        resource, self._resource = self._resource, None
        return resource

    def close(self) -> None:
        resource = self.detach()
        if resource is not None:
            resource.close()

    def _require(self, action: str) -> BinaryIO:
        if self._resource is None:
            raise RuntimeError(f"No resource available; cannot {action}.")
        return self._resource

    # =========================================================================
    # QUERIES
    # =========================================================================

    def get_size(self) -> Optional[int]:
        if self._resource is None:
            return None
        try:
            if self.is_writable():
                self._resource.flush()
            return os.fstat(self._resource.fileno()).st_size
        except (AttributeError, OSError, ValueError, io.UnsupportedOperation):
            pass
        if not self.is_seekable():
            return None
        position = self._resource.tell()
        size = self._resource.seek(0, os.SEEK_END)
        self._resource.seek(position)
        return size

    def tell(self) -> int:
        resource = self._require("tell position")
        try:
            return resource.tell()
        except (OSError, ValueError) as e:
            raise RuntimeError("Error occurred during tell operation.") from e

    def eof(self) -> bool:
        if self._resource is None:
            return True
        try:
            size = self.get_size()
            return size is None or self._resource.tell() >= size
        except (OSError, ValueError):
            return True

    def is_seekable(self) -> bool:
        if self._resource is None:
            return False
        try:
            return bool(self._resource.seekable())
        except (AttributeError, ValueError):
            return False

    def is_writable(self) -> bool:
        if self._resource is None:
            return False
        try:
            return bool(self._resource.writable())
        except (AttributeError, ValueError):
            return False

    def is_readable(self) -> bool:
        if self._resource is None:
            return False
        try:
            return bool(self._resource.readable())
        except (AttributeError, ValueError):
            return False

    def get_metadata(self, key: Optional[str] = None) -> Any:
        """
        Describe the resource.

        Without ``key`` returns a dict with ``uri``, ``mode``,
        ``seekable`` and ``closed``; with ``key`` returns that entry or
        None. Returns None when there is no resource.
        """
        if self._resource is None:
            return None
        metadata: Dict[str, Any] = {
            "uri": getattr(self._resource, "name", None),
            "mode": getattr(self._resource, "mode", None),
            "seekable": self.is_seekable(),
            "closed": getattr(self._resource, "closed", False),
        }
        if key is None:
            return metadata
        return metadata.get(key)

    # =========================================================================
    # POSITIONING AND I/O
    # =========================================================================

    def seek(self, offset: int, whence: int = os.SEEK_SET) -> bool:
        resource = self._require("seek position")
        if not self.is_seekable():
            raise RuntimeError("Stream is not seekable.")
        try:
            resource.seek(offset, whence)
        except (OSError, ValueError) as e:
            raise RuntimeError("Error seeking within stream.") from e
        return True

    def rewind(self) -> bool:
        return self.seek(0)

    def write(self, data: Union[bytes, bytearray, str]) -> int:
        """Write ``data`` (str is UTF-8 encoded); returns the byte count."""
        resource = self._require("write")
        if not self.is_writable():
            raise RuntimeError("Stream is not writable.")
        if isinstance(data, str):
            data = data.encode("utf-8")
        try:
            return resource.write(data)
        except (OSError, ValueError) as e:
            raise RuntimeError("Error writing to stream.") from e

    def read(self, length: int = -1) -> bytes:
        resource = self._require("read")
        if not self.is_readable():
            raise RuntimeError("Stream is not readable.")
        try:
            return resource.read(length)
        except (OSError, ValueError) as e:
            raise RuntimeError("Error reading stream.") from e

    def get_contents(self) -> bytes:
        """The rest of the stream from the current position."""
        if not self.is_readable():
            return b""
        return self.read()

    def copy(self, source: Source) -> None:
        """
        Write the contents of ``source`` into this stream, then rewind.

        A seekable source is copied from its beginning, a path is opened
        and closed again.

        Raises:
            RuntimeError: If this stream has no resource.
            ValueError: If a path cannot be opened or the source is not readable.
            TypeError: For an unsupported source type.
        """
        resource = self._require("copy")

        opened = False
        if isinstance(source, Stream):
            source_file = source.resource
            if source_file is None:
                raise ValueError("The received source is not readable.")
        elif isinstance(source, (str, os.PathLike)):
            try:
                source_file = open(source, "rb")
            except OSError as e:
                raise ValueError(f'Invalid source path "{os.fspath(source)}" specified.') from e
            opened = True
        elif _is_file_object(source):
            source_file = source
        else:
            raise TypeError(f'Invalid source "{type(source).__name__}" provided.')

        try:
            readable = getattr(source_file, "readable", None)
            if not hasattr(source_file, "read") or (readable is not None and not readable()):
                raise ValueError("The received source is not readable.")
            seekable = getattr(source_file, "seekable", None)
            if seekable is not None and seekable():
                source_file.seek(0)
            shutil.copyfileobj(source_file, resource)
            resource.seek(0)
        finally:
            if opened:
                source_file.close()

    # =========================================================================
    # CONVERSION
    # =========================================================================

    def __bytes__(self) -> bytes:
        """Full contents from the start; empty when unavailable."""
        if not self.is_readable():
            return b""
        if not self.is_seekable():
            return b""
        try:
            self.rewind()
            return self.read()
        except RuntimeError:
            return b""

    def __str__(self) -> str:
        return bytes(self).decode("utf-8", errors="replace")

    def __repr__(self) -> str:
        return f"Stream({self.get_metadata('uri')!r})"
