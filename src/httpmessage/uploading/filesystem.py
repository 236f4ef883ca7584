"""
=============================================================================
FILESYSTEM ACCESS FOR UPLOAD STRATEGIES
=============================================================================

Strategies never touch ``os`` directly. They go through a Filesystem
object, so tests can swap in a fake that reports an unreadable
directory or a failing rename without root tricks.

    ┌─────────────────────────────────────────────────────────────────────┐
    │   DirectoryStrategy ──┐                                             │
    │                       ├──► Filesystem ──► LocalFilesystem (os)      │
    │   MoveStrategy ───────┘                └─► FakeFilesystem (tests)   │
    └─────────────────────────────────────────────────────────────────────┘

Mutating calls raise OSError on failure; strategies turn that into an
operation error.

=============================================================================
"""

from abc import ABC, abstractmethod
from typing import Any, Optional, Union
import errno
import os
import shutil
import stat

from .base import AbstractUploadStrategy
from .options import UploadOptions


PathLike = Union[str, "os.PathLike[str]"]


class Filesystem(ABC):
    """The filesystem primitives an upload needs."""

    @abstractmethod
    def exists(self, path: PathLike) -> bool: ...

    @abstractmethod
    def is_dir(self, path: PathLike) -> bool: ...

    @abstractmethod
    def is_readable(self, path: PathLike) -> bool: ...

    @abstractmethod
    def is_writable(self, path: PathLike) -> bool: ...

    @abstractmethod
    def make_dirs(self, path: PathLike, mode: int) -> None:
        """Create ``path`` and any missing parents."""

    @abstractmethod
    def move(self, source: PathLike, destination: PathLike) -> None:
        """Rename a file; an existing directory at ``destination`` is an error."""

    @abstractmethod
    def chmod(self, path: PathLike, mode: int) -> None: ...


class LocalFilesystem(Filesystem):
    """Filesystem backed by the ``os`` module."""

    def exists(self, path: PathLike) -> bool:
        return os.path.exists(path)

    def is_dir(self, path: PathLike) -> bool:
        return os.path.isdir(path)

    def is_readable(self, path: PathLike) -> bool:
        return os.access(path, os.R_OK)

    def is_writable(self, path: PathLike) -> bool:
        return os.access(path, os.W_OK)

    def make_dirs(self, path: PathLike, mode: int) -> None:
        os.makedirs(path, mode=mode)

    def move(self, source: PathLike, destination: PathLike) -> None:
        try:
            os.replace(source, destination)
        except OSError as e:
            if e.errno != errno.EXDEV:
                raise
            # across devices: copy + unlink, never into a directory
            if os.path.isdir(destination):
                raise IsADirectoryError(errno.EISDIR, "Is a directory", os.fspath(destination)) from e
            shutil.move(os.fspath(source), os.fspath(destination))

    def chmod(self, path: PathLike, mode: int) -> None:
        os.chmod(path, mode)


class FilesystemStrategy(AbstractUploadStrategy):
    """
    Base for strategies working against a target directory.

    Holds the injected Filesystem and the ``target_directory`` option.
    """

    def __init__(self, filesystem: Optional[Filesystem] = None):
        super().__init__()
        self.filesystem = filesystem or LocalFilesystem()
        self._target_directory: Optional[str] = None

    @property
    def target_directory(self) -> Optional[str]:
        return self._target_directory

    @target_directory.setter
    def target_directory(self, directory: Any) -> None:
        if isinstance(directory, os.PathLike):
            directory = os.fspath(directory)
        if not isinstance(directory, str) or not directory:
            raise ValueError(
                f"Invalid target directory provided; must be a non-empty string, "
                f'"{type(directory).__name__}" received.'
            )
        self._target_directory = directory

    def apply_options(self, options: UploadOptions) -> None:
        if "target_directory" in options:
            self.target_directory = options["target_directory"]


def check_mode(mode: Any, kind: str) -> int:
    """
    Validate a permission mode for the owner bits.

    Args:
        mode: The mode, e.g. 0o700.
        kind: "directory" requires owner rwx; "file" requires owner rw
              and forbids owner x.

    Returns:
        The validated mode.

    Raises:
        TypeError: If ``mode`` is not an int.
        ValueError: If an owner bit is missing or forbidden.
    """
    if isinstance(mode, bool) or not isinstance(mode, int):
        raise TypeError(
            f"Invalid {kind} permissions provided; must be an integer, "
            f'"{type(mode).__name__}" received.'
        )

    plural = f"{kind.capitalize()}s" if kind == "file" else "Directories"
    if not mode & stat.S_IRUSR:
        raise ValueError(
            f'Invalid {kind} permissions "{mode:o}" provided. '
            f"{plural} will not be available for reading."
        )
    if not mode & stat.S_IWUSR:
        raise ValueError(
            f'Invalid {kind} permissions "{mode:o}" provided. '
            f"{plural} will not be available for writing."
        )
    if kind == "directory" and not mode & stat.S_IXUSR:
        # without the search bit the directory content cannot be reached
        raise ValueError(
            f'Invalid {kind} permissions "{mode:o}" provided. '
            f"The content of directories will not be available."
        )
    if kind == "file" and mode & stat.S_IXUSR:
        raise ValueError(
            f'Invalid {kind} permissions "{mode:o}" provided. '
            f"Files will be executable."
        )
    return mode
