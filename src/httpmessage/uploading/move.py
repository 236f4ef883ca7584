"""
Move strategy: relocates the temporary file into the target directory.

Expects the directory to exist already (see DirectoryStrategy); the
default pipeline runs the directory step first.
"""

from typing import TYPE_CHECKING, Optional
import logging
import os

from .filesystem import Filesystem, FilesystemStrategy, check_mode
from .options import UploadOptions
from .target import UploadTarget

if TYPE_CHECKING:
    from ..http.uploaded_file import UploadedFile


logger = logging.getLogger(__name__)


class MoveStrategy(FilesystemStrategy):
    """
    Moves ``file.temp_name`` to ``target_directory/target`` and applies
    ``file_permissions`` (default 0o600, never executable).

    The target is appended to the directory, never joined over it; a
    target that climbs out with ".." or names a directory fails.
    """

    UPLOADED_FILE_CONTAINS_ERROR = "uploaded-file-contains-error"
    UPLOADED_FILE_MISSING_TEMPNAME = "uploaded-file-missing-tempname"
    MISSING_TEMPORARY_FILE = "missing-temporary-file"
    TARGET_DIR_NOT_SPECIFIED = "target-dir-not-specified"
    MOVEMENT_FAILED = "movement-failed"

    errors = {
        UPLOADED_FILE_CONTAINS_ERROR: "The uploaded file contains errors.",
        UPLOADED_FILE_MISSING_TEMPNAME: "Missing tempname of uploaded file.",
        MISSING_TEMPORARY_FILE: "The temporary file not exists or is not readable.",
        TARGET_DIR_NOT_SPECIFIED: "The target directory to upload is not specified.",
        MOVEMENT_FAILED: "Move the uploaded file failed.",
    }

    def __init__(self, filesystem: Optional[Filesystem] = None):
        super().__init__(filesystem)
        self._file_permissions = 0o600

    @property
    def file_permissions(self) -> int:
        return self._file_permissions

    @file_permissions.setter
    def file_permissions(self, permissions: int) -> None:
        self._file_permissions = check_mode(permissions, "file")

    def apply_options(self, options: UploadOptions) -> None:
        super().apply_options(options)
        if "file_permissions" in options:
            self.file_permissions = options["file_permissions"]

    def __call__(self, file: "UploadedFile", target: UploadTarget) -> None:
        if file.error > 0:
            self.decide_on_failure(self.UPLOADED_FILE_CONTAINS_ERROR)
            return

        temp_name = file.temp_name
        if not temp_name:
            self.decide_on_failure(self.UPLOADED_FILE_MISSING_TEMPNAME)
            return

        fs = self.filesystem
        if not fs.exists(temp_name) or not fs.is_readable(temp_name):
            self.decide_on_failure(self.MISSING_TEMPORARY_FILE)
            return

        directory = self.target_directory
        if not directory:
            self.decide_on_failure(self.TARGET_DIR_NOT_SPECIFIED)
            return

        destination = f"{directory.rstrip(os.sep)}{os.sep}{target}"
        if not _is_inside(directory, destination):
            self.decide_on_failure(
                self.MOVEMENT_FAILED, f"Target {target} resolves outside {directory}."
            )
            return
        if fs.is_dir(destination):
            self.decide_on_failure(
                self.MOVEMENT_FAILED, f"Target {destination} is a directory."
            )
            return

        try:
            fs.move(temp_name, destination)
            fs.chmod(destination, self._file_permissions)
        except OSError as e:
            self.decide_on_failure(self.MOVEMENT_FAILED, str(e))
            return

        logger.info(f"Moved upload {temp_name} -> {destination}")
        self.decide_on_success()


def _is_inside(directory: str, path: str) -> bool:
    """Lexical check; ".." segments in the target may not climb out."""
    root = os.path.normpath(directory)
    path = os.path.normpath(path)
    return path != root and os.path.commonpath([root, path]) == root
