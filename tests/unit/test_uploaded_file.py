"""
Unit tests for UploadedFile.
"""

import os

import pytest

from httpmessage.exceptions import FileAlreadyMovedError
from httpmessage.http import Stream, UploadedFile, UploadError, is_upload_node
from httpmessage.uploading import DefaultUploadStrategy, DirectoryStrategy, UploadOptions, UploadTarget


class TestConstruction:
    """Tests for the value fields."""

    def test_fields(self, temp_file):
        """Test that every field is exposed unchanged."""
        file = UploadedFile("avatar.png", temp_file, "image/png", 56, UploadError.OK)

        assert file.client_filename == "avatar.png"
        assert file.temp_name == temp_file
        assert file.client_media_type == "image/png"
        assert file.size == 56
        assert file.error == 0
        assert file.moved is False

    def test_all_optional(self):
        """Test an empty uploaded file."""
        file = UploadedFile()

        assert file.client_filename is None
        assert file.temp_name is None
        assert file.size is None
        assert file.error == 0

    def test_none_error_is_ok(self):
        """Test that a missing error code means no error."""
        assert UploadedFile(error=None).error == 0

    @pytest.mark.parametrize("kwargs", [
        {"client_filename": 1},
        {"temp_name": b"/tmp/x"},
        {"client_media_type": ["image/png"]},
        {"size": "10"},
        {"size": True},
        {"error": "0"},
    ])
    def test_wrong_types(self, kwargs):
        """Test that each field checks its type."""
        with pytest.raises(TypeError):
            UploadedFile(**kwargs)

    @pytest.mark.parametrize("error", [-1, 9, 100])
    def test_error_out_of_range(self, error):
        """Test the range of upload error codes."""
        with pytest.raises(ValueError):
            UploadedFile(error=error)

    def test_error_codes(self):
        """Test the named error codes."""
        assert UploadError.NO_FILE == 4
        assert UploadedFile(error=UploadError.CANT_WRITE).error == 7


class TestStream:
    """Tests for reading the uploaded content."""

    def test_stream_from_temp_file(self, uploaded_file):
        """Test that the temporary file is opened read-only."""
        stream = uploaded_file.get_stream()

        assert stream.read(5) == b"Lorem"
        assert not stream.is_writable()
        stream.close()

    def test_explicit_stream(self):
        """Test a stream set by the caller."""
        stream = Stream.make(b"content")
        file = UploadedFile("a.txt")
        file.set_stream(stream)

        assert file.get_stream() is stream

    def test_no_stream(self):
        """Test a file without content."""
        with pytest.raises(RuntimeError, match="The stream was not set."):
            UploadedFile("a.txt").get_stream()

    def test_set_stream_type(self):
        """Test that only a Stream can be set."""
        with pytest.raises(TypeError):
            UploadedFile().set_stream(b"content")

    def test_stream_after_move(self, uploaded_file, tmp_path):
        """Test that a moved file has no stream."""
        uploaded_file.move_to("x.txt", {"target_directory": str(tmp_path / "out")})

        with pytest.raises(FileAlreadyMovedError):
            uploaded_file.get_stream()


class TestMoveTo:
    """Tests for relocating the file."""

    def test_move_to(self, uploaded_file, upload_dir, temp_file):
        """Test the default pipeline end to end."""
        strategy = uploaded_file.move_to("avatar.png", {"target_directory": upload_dir})

        assert isinstance(strategy, DefaultUploadStrategy)
        assert not strategy.has_operation_error()
        assert uploaded_file.moved is True
        assert os.path.isfile(os.path.join(upload_dir, "avatar.png"))
        assert not os.path.exists(temp_file)

    def test_second_move_refused(self, uploaded_file, upload_dir):
        """Test that a file can be moved once."""
        uploaded_file.move_to("avatar.png", {"target_directory": upload_dir})

        with pytest.raises(FileAlreadyMovedError):
            uploaded_file.move_to("other.png", {"target_directory": upload_dir})

    def test_moved_even_on_failure(self, uploaded_file):
        """Test that a failed relocation still consumes the file."""
        strategy = uploaded_file.move_to("avatar.png")

        assert strategy.operation_error == DirectoryStrategy.TARGET_DIR_NOT_SPECIFIED
        assert uploaded_file.moved is True

    def test_invalid_target(self, uploaded_file):
        """Test that an invalid target leaves the file unmoved."""
        with pytest.raises(ValueError):
            uploaded_file.move_to("")

        assert uploaded_file.moved is False

    def test_custom_strategy(self, uploaded_file, strategy_class):
        """Test that a set strategy receives the file and target."""
        strategy = strategy_class()
        result = uploaded_file.set_upload_strategy(strategy)
        returned = uploaded_file.move_to(UploadTarget("x.png"))

        assert result is uploaded_file
        assert returned is strategy
        assert strategy.calls == [(uploaded_file, UploadTarget("x.png"))]
        assert strategy.options is None

    def test_options_given(self, uploaded_file, strategy_class):
        """Test that given options are wrapped and applied."""
        strategy = strategy_class()
        uploaded_file.set_upload_strategy(strategy)
        uploaded_file.move_to("x.png", [("target_directory", "/srv")])

        assert isinstance(strategy.options, UploadOptions)
        assert strategy.options["target_directory"] == "/srv"

    def test_options_instance_kept(self, uploaded_file, strategy_class):
        """Test that an UploadOptions is passed through as is."""
        options = UploadOptions({"a": 1})
        strategy = strategy_class()
        uploaded_file.set_upload_strategy(strategy).move_to("x.png", options)

        assert strategy.options is options

    def test_default_strategy_is_lazy_and_kept(self):
        """Test that the default strategy is built once."""
        file = UploadedFile()

        assert isinstance(file.upload_strategy, DefaultUploadStrategy)
        assert file.upload_strategy is file.upload_strategy

    def test_set_strategy_type(self):
        """Test that only strategies can be set."""
        with pytest.raises(TypeError):
            UploadedFile().set_upload_strategy(lambda file, target: None)


class TestUploadNode:
    """Tests for uploaded file trees."""

    def test_valid_trees(self):
        """Test files nested in dicts and lists."""
        file = UploadedFile()

        assert is_upload_node(file)
        assert is_upload_node({})
        assert is_upload_node({"avatar": file})
        assert is_upload_node({"docs": {"cv": file, 0: file}})
        assert is_upload_node({"photos": [file, file]})

    @pytest.mark.parametrize("value", [
        None,
        "file",
        {"avatar": "file"},
        {"photos": [UploadedFile(), None]},
        {1.5: UploadedFile()},
        (UploadedFile(),),
    ])
    def test_invalid_trees(self, value):
        """Test that anything else is refused."""
        assert not is_upload_node(value)
