"""
The strategy an UploadedFile uses when none is set: make sure the
directory exists, then move the file into it.
"""

from typing import Optional

from .directory import DirectoryStrategy
from .filesystem import Filesystem
from .move import MoveStrategy
from .queue import StrategiesQueue


class DefaultUploadStrategy(StrategiesQueue):
    """StrategiesQueue preloaded with DirectoryStrategy (200) and MoveStrategy (100)."""

    DIRECTORY_PRIORITY = 200
    MOVE_PRIORITY = 100

    def __init__(self, filesystem: Optional[Filesystem] = None):
        super().__init__()
        self.attach(DirectoryStrategy(filesystem), self.DIRECTORY_PRIORITY)
        self.attach(MoveStrategy(filesystem), self.MOVE_PRIORITY)
