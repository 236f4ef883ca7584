"""
=============================================================================
DIRECTORY STRATEGY
=============================================================================

Makes sure the target directory exists and can be used before anything
is moved into it.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     DIRECTORY CHECKS (in order)                     │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   1. file.error != 0          → uploaded-file-contains-error        │
    │   2. no target_directory      → target-dir-not-specified            │
    │   3. missing, mkdir fails     → create-directory-failed             │
    │   4. not readable             → directory-not-readable              │
    │   5. not writable             → directory-not-writable              │
    │   6. otherwise                → SUCCESS                             │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The first failing check wins; later checks are not run.

=============================================================================
"""

from typing import TYPE_CHECKING, Optional
import logging

from .filesystem import Filesystem, FilesystemStrategy, check_mode
from .options import UploadOptions
from .target import UploadTarget

if TYPE_CHECKING:
    from ..http.uploaded_file import UploadedFile


logger = logging.getLogger(__name__)


class DirectoryStrategy(FilesystemStrategy):
    """
    Verifies, and creates if needed, the target directory.

    Options:
        target_directory: Where uploads go (required).
        dir_permissions:  Mode for created directories; owner rwx
                          required. Default 0o700.
    """

    UPLOADED_FILE_CONTAINS_ERROR = "uploaded-file-contains-error"
    TARGET_DIR_NOT_SPECIFIED = "target-dir-not-specified"
    CREATE_DIRECTORY_FAILED = "create-directory-failed"
    DIRECTORY_NOT_READABLE = "directory-not-readable"
    DIRECTORY_NOT_WRITABLE = "directory-not-writable"

    errors = {
        UPLOADED_FILE_CONTAINS_ERROR: "The uploaded file contains errors.",
        TARGET_DIR_NOT_SPECIFIED: "The target directory to upload is not specified.",
        CREATE_DIRECTORY_FAILED: "Failed to create directory.",
        DIRECTORY_NOT_READABLE: "The target directory is not readable.",
        DIRECTORY_NOT_WRITABLE: "The target directory is not writable.",
    }

    def __init__(self, filesystem: Optional[Filesystem] = None):
        super().__init__(filesystem)
        self._dir_permissions = 0o700

    @property
    def dir_permissions(self) -> int:
        return self._dir_permissions

    @dir_permissions.setter
    def dir_permissions(self, permissions: int) -> None:
        self._dir_permissions = check_mode(permissions, "directory")

    def apply_options(self, options: UploadOptions) -> None:
        super().apply_options(options)
        if "dir_permissions" in options:
            self.dir_permissions = options["dir_permissions"]

    def __call__(self, file: "UploadedFile", target: UploadTarget) -> None:
        if file.error > 0:
            self.decide_on_failure(self.UPLOADED_FILE_CONTAINS_ERROR)
            return

        directory = self.target_directory
        if not directory:
            self.decide_on_failure(self.TARGET_DIR_NOT_SPECIFIED)
            return

        fs = self.filesystem
        if not fs.exists(directory) or not fs.is_dir(directory):
            try:
                fs.make_dirs(directory, self._dir_permissions)
            except OSError as e:
                self.decide_on_failure(self.CREATE_DIRECTORY_FAILED, str(e))
                return
            logger.debug(f"Created upload directory {directory} ({self._dir_permissions:o})")

        if not fs.is_readable(directory):
            self.decide_on_failure(self.DIRECTORY_NOT_READABLE)
            return

        if not fs.is_writable(directory):
            self.decide_on_failure(self.DIRECTORY_NOT_WRITABLE)
            return

        self.decide_on_success()
