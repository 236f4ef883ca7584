"""
Upload strategies: relocate an uploaded file through a pipeline of steps.
"""

from .base import AbstractUploadStrategy, State, UploadStrategy
from .default import DefaultUploadStrategy
from .directory import DirectoryStrategy
from .filesystem import Filesystem, FilesystemStrategy, LocalFilesystem
from .move import MoveStrategy
from .options import UploadOptions
from .queue import StrategiesQueue
from .target import UploadTarget

__all__ = [
    "AbstractUploadStrategy",
    "DefaultUploadStrategy",
    "DirectoryStrategy",
    "Filesystem",
    "FilesystemStrategy",
    "LocalFilesystem",
    "MoveStrategy",
    "State",
    "StrategiesQueue",
    "UploadOptions",
    "UploadStrategy",
    "UploadTarget",
]
