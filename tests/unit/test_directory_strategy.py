"""
Unit tests for DirectoryStrategy and the shared strategy base.
"""

import os
import stat

import pytest

from httpmessage.exceptions import UnknownOperationError
from httpmessage.http import UploadedFile
from httpmessage.uploading import DirectoryStrategy, State, UploadOptions, UploadTarget


TARGET = UploadTarget("avatar.png")


@pytest.fixture
def strategy(fake_fs) -> DirectoryStrategy:
    strategy = DirectoryStrategy(fake_fs)
    strategy.target_directory = "/srv/uploads"
    return strategy


class TestChecks:
    """Tests for the ordered precondition checks."""

    def test_existing_directory(self, strategy, fake_fs, uploaded_file):
        """Test success on a usable directory."""
        fake_fs.dirs.add("/srv/uploads")

        strategy(uploaded_file, TARGET)

        assert strategy.state == State.SUCCESS
        assert not strategy.has_operation_error()
        assert strategy.operation_error is None
        assert fake_fs.created == []

    def test_file_with_error(self, strategy, fake_fs):
        """Test that a failed upload stops before touching the disk."""
        strategy(UploadedFile("a.png", "/tmp/x", error=3), TARGET)

        assert strategy.operation_error == DirectoryStrategy.UPLOADED_FILE_CONTAINS_ERROR
        assert strategy.operation_error_description == "The uploaded file contains errors."
        assert strategy.state == State.FAILURE | State.BREAK
        assert fake_fs.created == []

    def test_missing_target_directory(self, fake_fs, uploaded_file):
        """Test that a target directory is required."""
        strategy = DirectoryStrategy(fake_fs)
        strategy(uploaded_file, TARGET)

        assert strategy.operation_error == DirectoryStrategy.TARGET_DIR_NOT_SPECIFIED
        assert strategy.operation_error_description == "The target directory to upload is not specified."

    def test_creates_missing_directory(self, strategy, fake_fs, uploaded_file):
        """Test that the directory is created with the configured mode."""
        strategy.dir_permissions = 0o750
        strategy(uploaded_file, TARGET)

        assert fake_fs.created == [("/srv/uploads", 0o750)]
        assert strategy.state == State.SUCCESS

    def test_create_failure_carries_os_error(self, strategy, fake_fs, uploaded_file):
        """Test that the OS error text becomes the description."""
        fake_fs.fail_make_dirs = True
        strategy(uploaded_file, TARGET)

        assert strategy.operation_error == DirectoryStrategy.CREATE_DIRECTORY_FAILED
        assert "Permission denied" in strategy.operation_error_description

    def test_not_readable(self, strategy, fake_fs, uploaded_file):
        """Test the readability check."""
        fake_fs.dirs.add("/srv/uploads")
        fake_fs.unreadable.add("/srv/uploads")
        strategy(uploaded_file, TARGET)

        assert strategy.operation_error == DirectoryStrategy.DIRECTORY_NOT_READABLE
        assert strategy.operation_error_description == "The target directory is not readable."

    def test_not_writable(self, strategy, fake_fs, uploaded_file):
        """Test the writability check."""
        fake_fs.dirs.add("/srv/uploads")
        fake_fs.unwritable.add("/srv/uploads")
        strategy(uploaded_file, TARGET)

        assert strategy.operation_error == DirectoryStrategy.DIRECTORY_NOT_WRITABLE
        assert strategy.operation_error_description == "The target directory is not writable."

    def test_success_clears_previous_error(self, strategy, fake_fs, uploaded_file):
        """Test that a later success resets the error fields."""
        fake_fs.unwritable.add("/srv/uploads")
        fake_fs.dirs.add("/srv/uploads")
        strategy(uploaded_file, TARGET)
        assert strategy.has_operation_error()

        fake_fs.unwritable.clear()
        strategy(uploaded_file, TARGET)

        assert strategy.state == State.SUCCESS
        assert strategy.operation_error is None
        assert strategy.operation_error_description is None


class TestLocalFilesystem:
    """Tests against the real filesystem."""

    def test_creates_nested_directory(self, upload_dir, uploaded_file):
        """Test recursive creation with the default mode."""
        strategy = DirectoryStrategy()
        strategy.target_directory = upload_dir
        strategy(uploaded_file, TARGET)

        assert strategy.state == State.SUCCESS
        assert os.path.isdir(upload_dir)
        assert stat.S_IMODE(os.stat(upload_dir).st_mode) == 0o700

    def test_cannot_create_below_a_file(self, tmp_path, uploaded_file):
        """Test that a regular file in the way fails the creation."""
        blocker = tmp_path / "blocker"
        blocker.write_text("x")

        strategy = DirectoryStrategy()
        strategy.target_directory = str(blocker / "uploads")
        strategy(uploaded_file, TARGET)

        assert strategy.operation_error == DirectoryStrategy.CREATE_DIRECTORY_FAILED
        assert strategy.operation_error_description

    def test_target_is_a_file(self, tmp_path, uploaded_file):
        """Test that an existing regular file is not taken for a directory."""
        blocker = tmp_path / "blocker"
        blocker.write_text("x")

        strategy = DirectoryStrategy()
        strategy.target_directory = str(blocker)
        strategy(uploaded_file, TARGET)

        assert strategy.operation_error == DirectoryStrategy.CREATE_DIRECTORY_FAILED


class TestConfiguration:
    """Tests for permissions, target directory and options."""

    def test_defaults(self):
        """Test the default configuration."""
        strategy = DirectoryStrategy()

        assert strategy.dir_permissions == 0o700
        assert strategy.target_directory is None
        assert strategy.options is None
        assert strategy.state is None

    @pytest.mark.parametrize("mode", [0o700, 0o750, 0o755, 0o777])
    def test_valid_permissions(self, mode):
        """Test modes with owner rwx."""
        strategy = DirectoryStrategy()
        strategy.dir_permissions = mode

        assert strategy.dir_permissions == mode

    @pytest.mark.parametrize("mode,message", [
        (0o300, "not be available for reading"),
        (0o500, "not be available for writing"),
        (0o600, "content of directories will not be available"),
    ])
    def test_invalid_permissions(self, mode, message):
        """Test that each missing owner bit is reported."""
        strategy = DirectoryStrategy()
        with pytest.raises(ValueError, match=message):
            strategy.dir_permissions = mode

    @pytest.mark.parametrize("mode", ["700", 7.0, True, None])
    def test_permissions_type(self, mode):
        """Test that only integers are accepted."""
        strategy = DirectoryStrategy()
        with pytest.raises(TypeError):
            strategy.dir_permissions = mode

    @pytest.mark.parametrize("directory", ["", 42, None])
    def test_invalid_target_directory(self, directory):
        """Test that the directory must be a non-empty string."""
        strategy = DirectoryStrategy()
        with pytest.raises(ValueError, match="Invalid target directory provided"):
            strategy.target_directory = directory

    def test_path_target_directory(self, tmp_path):
        """Test that a Path is accepted and stored as a string."""
        strategy = DirectoryStrategy()
        strategy.target_directory = tmp_path

        assert strategy.target_directory == str(tmp_path)

    def test_set_options(self):
        """Test that recognised keys are applied and others ignored."""
        options = UploadOptions({
            "target_directory": "/srv",
            "dir_permissions": 0o750,
            "file_permissions": 0o640,
            "unrelated": True,
        })
        strategy = DirectoryStrategy()
        strategy.set_options(options)

        assert strategy.options is options
        assert strategy.target_directory == "/srv"
        assert strategy.dir_permissions == 0o750

    def test_set_options_type(self):
        """Test that a plain dict is refused."""
        with pytest.raises(TypeError):
            DirectoryStrategy().set_options({"target_directory": "/srv"})

    def test_invalid_option_value(self):
        """Test that option values go through the same validation."""
        strategy = DirectoryStrategy()
        with pytest.raises(ValueError):
            strategy.set_options(UploadOptions({"dir_permissions": 0o600}))
        assert strategy.options is None

    def test_unknown_error_code(self):
        """Test that undeclared error codes are a programming error."""
        with pytest.raises(UnknownOperationError, match="no-such-error"):
            DirectoryStrategy().decide_on_failure("no-such-error")

    def test_description_override(self):
        """Test a per-call description."""
        strategy = DirectoryStrategy()
        strategy.decide_on_failure(DirectoryStrategy.CREATE_DIRECTORY_FAILED, "disk full")

        assert strategy.operation_error_description == "disk full"

    def test_name(self):
        """Test the name used in logs."""
        assert DirectoryStrategy().name == "DirectoryStrategy"

