"""
pytest configuration and fixtures.
"""

from pathlib import Path
from typing import Callable, Dict, List, Optional, Set, Tuple
import os
import sys

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from httpmessage.http import UploadedFile
from httpmessage.uploading import AbstractUploadStrategy, Filesystem, UploadTarget


LOREM = b"Lorem ipsum dolor sit amet, consectetur adipiscing elit."


class FakeFilesystem(Filesystem):
    """
    In-memory filesystem for strategy tests.

    Paths in ``files`` and ``dirs`` exist. Anything listed in
    ``unreadable`` / ``unwritable`` fails the access checks, and the
    ``fail_*`` flags make the mutating calls raise OSError.
    """

    def __init__(self):
        self.files: Set[str] = set()
        self.dirs: Set[str] = set()
        self.unreadable: Set[str] = set()
        self.unwritable: Set[str] = set()
        self.fail_make_dirs = False
        self.fail_move = False

        self.created: List[Tuple[str, int]] = []
        self.moves: List[Tuple[str, str]] = []
        self.modes: Dict[str, int] = {}

    def exists(self, path):
        return path in self.files or path in self.dirs

    def is_dir(self, path):
        return path in self.dirs

    def is_readable(self, path):
        return self.exists(path) and path not in self.unreadable

    def is_writable(self, path):
        return self.exists(path) and path not in self.unwritable

    def make_dirs(self, path, mode):
        if self.fail_make_dirs:
            raise PermissionError(f"[Errno 13] Permission denied: '{path}'")
        self.dirs.add(path)
        self.created.append((path, mode))

    def move(self, source, destination):
        if self.fail_move:
            raise OSError(f"[Errno 18] Invalid cross-device link: '{source}'")
        self.files.discard(source)
        self.files.add(destination)
        self.moves.append((source, destination))

    def chmod(self, path, mode):
        self.modes[path] = mode


class CallbackStrategy(AbstractUploadStrategy):
    """
    Strategy that runs a callback and records its invocations.

    The callback receives the strategy, the file and the target; it
    decides the outcome. Without a callback the strategy succeeds.
    """

    errors = {"fake-error": "Fake failure."}

    def __init__(self, callback: Optional[Callable] = None, log: Optional[List[str]] = None, label: str = ""):
        super().__init__()
        self.callback = callback
        self.log = log if log is not None else []
        self.label = label
        self.calls: List[Tuple[UploadedFile, UploadTarget]] = []

    def __call__(self, file, target):
        self.calls.append((file, target))
        self.log.append(self.label)
        if self.callback is not None:
            self.callback(self, file, target)
        else:
            self.decide_on_success()


@pytest.fixture
def strategy_class():
    """The CallbackStrategy class, for tests building several of them."""
    return CallbackStrategy


@pytest.fixture
def fake_fs() -> FakeFilesystem:
    """Empty in-memory filesystem."""
    return FakeFilesystem()


@pytest.fixture
def temp_file(tmp_path: Path) -> str:
    """A temporary upload with some content, as a path string."""
    path = tmp_path / "upload_tmp"
    path.write_bytes(LOREM)
    return str(path)


@pytest.fixture
def upload_dir(tmp_path: Path) -> str:
    """A not yet existing target directory."""
    return os.path.join(str(tmp_path), "uploads", "2024")


@pytest.fixture
def uploaded_file(temp_file: str) -> UploadedFile:
    """A successful upload backed by ``temp_file``."""
    return UploadedFile("avatar.png", temp_file, "image/png", len(LOREM), 0)
