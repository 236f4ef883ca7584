"""
Unit tests for DefaultUploadStrategy: the directory step followed by the
move step.
"""

import os

from httpmessage.uploading import (
    DefaultUploadStrategy,
    DirectoryStrategy,
    MoveStrategy,
    State,
    UploadOptions,
    UploadTarget,
)


class TestComposition:
    """Tests for the preloaded members."""

    def test_members(self):
        """Test priorities and member types."""
        members = DefaultUploadStrategy().get_array_copy()

        assert sorted(members) == [100, 200]
        assert isinstance(members[200], DirectoryStrategy)
        assert isinstance(members[100], MoveStrategy)

    def test_shared_filesystem(self, fake_fs):
        """Test that both members use the injected filesystem."""
        members = DefaultUploadStrategy(fake_fs).get_array_copy()

        assert members[200].filesystem is fake_fs
        assert members[100].filesystem is fake_fs

    def test_options_reach_both_members(self):
        """Test propagation of one bag to both steps."""
        strategy = DefaultUploadStrategy()
        strategy.set_options(UploadOptions({
            "target_directory": "/srv/uploads",
            "dir_permissions": 0o750,
            "file_permissions": 0o640,
        }))
        members = strategy.get_array_copy()

        assert members[200].target_directory == "/srv/uploads"
        assert members[200].dir_permissions == 0o750
        assert members[100].target_directory == "/srv/uploads"
        assert members[100].file_permissions == 0o640


class TestPipeline:
    """Tests running both steps."""

    def test_creates_directory_then_moves(self, upload_dir, uploaded_file):
        """Test the full relocation on the real filesystem."""
        strategy = DefaultUploadStrategy()
        strategy.set_options(UploadOptions({"target_directory": upload_dir}))
        strategy(uploaded_file, UploadTarget("avatar.png"))

        assert strategy.state == State.SUCCESS
        assert not strategy.has_operation_error()
        assert os.path.isfile(os.path.join(upload_dir, "avatar.png"))

    def test_directory_failure_skips_move(self, fake_fs, uploaded_file):
        """Test that a failed directory step stops the pipeline."""
        fake_fs.files.add(uploaded_file.temp_name)
        fake_fs.fail_make_dirs = True

        strategy = DefaultUploadStrategy(fake_fs)
        strategy.set_options(UploadOptions({"target_directory": "/srv/uploads"}))
        strategy(uploaded_file, UploadTarget("avatar.png"))

        assert strategy.operation_error == DirectoryStrategy.CREATE_DIRECTORY_FAILED
        assert fake_fs.moves == []

    def test_move_failure_reported(self, fake_fs, uploaded_file):
        """Test that the move step's error becomes the queue's error."""
        fake_fs.files.add(uploaded_file.temp_name)
        fake_fs.dirs.add("/srv/uploads")
        fake_fs.fail_move = True

        strategy = DefaultUploadStrategy(fake_fs)
        strategy.set_options(UploadOptions({"target_directory": "/srv/uploads"}))
        strategy(uploaded_file, UploadTarget("avatar.png"))

        assert strategy.operation_error == MoveStrategy.MOVEMENT_FAILED
        assert strategy.state == State.FAILURE | State.BREAK

    def test_without_target_directory(self, uploaded_file):
        """Test that the directory step reports the missing option."""
        strategy = DefaultUploadStrategy()
        strategy(uploaded_file, UploadTarget("avatar.png"))

        assert strategy.operation_error == DirectoryStrategy.TARGET_DIR_NOT_SPECIFIED
        assert os.path.exists(uploaded_file.temp_name)
