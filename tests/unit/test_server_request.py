"""
Unit tests for the ServerRequest value object.
"""

import io

import pytest

from httpmessage.http import ServerRequest, UploadedFile


@pytest.fixture
def request_() -> ServerRequest:
    return ServerRequest(
        server_params={"REQUEST_METHOD": "POST", "SERVER_NAME": "example.com"},
        cookie_params={"session": "abc"},
        query_params={"page": "2"},
        attributes={"user_id": 42},
        uri="http://example.com/form?page=2",
        method="POST",
    )


class TestParams:
    """Tests for server, cookie and query parameters."""

    def test_getters(self, request_):
        """Test the parameter accessors and their defaults."""
        assert request_.server_params["SERVER_NAME"] == "example.com"
        assert request_.get_server_param("REQUEST_METHOD") == "POST"
        assert request_.get_server_param("MISSING", "x") == "x"
        assert request_.cookie_params == {"session": "abc"}
        assert request_.get_cookie_param("session") == "abc"
        assert request_.get_cookie_param("missing") is None
        assert request_.query_params == {"page": "2"}
        assert request_.get_query_param("page") == "2"

    def test_defaults(self):
        """Test an empty server request."""
        request = ServerRequest()

        assert request.server_params == {}
        assert request.cookie_params == {}
        assert request.query_params == {}
        assert request.uploaded_files == {}
        assert request.attributes == {}
        assert request.parsed_body is None
        assert request.method == "GET"

    def test_with_cookie_params(self, request_):
        new = request_.with_cookie_params({"theme": "dark"})

        assert new.cookie_params == {"theme": "dark"}
        assert request_.cookie_params == {"session": "abc"}

    def test_with_query_params(self, request_):
        new = request_.with_query_params({"page": "3"})

        assert new.query_params == {"page": "3"}
        assert request_.query_params == {"page": "2"}

    def test_params_copied_from_input(self):
        """Test that the given mapping is not shared."""
        params = {"a": "1"}
        request = ServerRequest(server_params=params)
        params["a"] = "2"

        assert request.get_server_param("a") == "1"

    def test_inherits_request(self, request_):
        """Test the Request behaviour underneath."""
        assert request_.method == "POST"
        assert request_.request_target == "/form?page=2"
        assert request_.get_header("Host") == ["example.com"]


class TestUploadedFiles:
    """Tests for the uploaded files tree."""

    def test_tree(self):
        """Test nested files in dicts and lists."""
        avatar = UploadedFile("a.png")
        photos = [UploadedFile("1.png"), UploadedFile("2.png")]
        request = ServerRequest().with_uploaded_files({"avatar": avatar, "photos": photos})

        assert request.uploaded_files["avatar"] is avatar
        assert request.uploaded_files["photos"] == photos

    @pytest.mark.parametrize("files", [
        {"avatar": "a.png"},
        {"avatar": {"name": "a.png"}},
        [UploadedFile()],
        "files",
    ])
    def test_invalid_tree(self, files):
        """Test that only dict trees of UploadedFile are accepted."""
        with pytest.raises(ValueError, match="Invalid structure of uploaded files"):
            ServerRequest().with_uploaded_files(files)

    def test_invalid_in_constructor(self):
        with pytest.raises(ValueError):
            ServerRequest(uploaded_files={"avatar": 1})


class TestParsedBody:
    """Tests for the parsed body."""

    @pytest.mark.parametrize("data", [None, {"a": 1}, [1, 2], object()])
    def test_accepted(self, data):
        """Test that containers, objects and None are accepted."""
        assert ServerRequest().with_parsed_body(data).parsed_body is data

    @pytest.mark.parametrize("data", ["a=1", b"a=1", 1, 1.5, True])
    def test_scalars_rejected(self, data):
        """Test that scalars are not a parsed body."""
        with pytest.raises(TypeError):
            ServerRequest().with_parsed_body(data)

    def test_constructor_validates(self):
        with pytest.raises(TypeError):
            ServerRequest(parsed_body="a=1")


class TestAttributes:
    """Tests for request attributes."""

    def test_get_attribute(self, request_):
        assert request_.get_attribute("user_id") == 42
        assert request_.get_attribute("missing", "default") == "default"

    def test_with_attribute(self, request_):
        """Test that a copy gets the attribute, the original not."""
        new = request_.with_attribute("role", "admin")

        assert new.attributes == {"user_id": 42, "role": "admin"}
        assert request_.attributes == {"user_id": 42}

    def test_with_attributes_replaces(self, request_):
        assert request_.with_attributes({"a": 1}).attributes == {"a": 1}

    def test_with_added_attributes_merges(self, request_):
        """Test that new values win on merge."""
        new = request_.with_added_attributes({"user_id": 7, "a": 1})
        assert new.attributes == {"user_id": 7, "a": 1}

    def test_without_attribute(self, request_):
        new = request_.without_attribute("user_id").without_attribute("missing")

        assert new.attributes == {}
        assert request_.attributes == {"user_id": 42}


class TestBody:
    """Tests for the body of a server request."""

    def test_path_body_opened_read_only(self, temp_file):
        """Test that a path body is opened for reading only."""
        request = ServerRequest(body=temp_file)

        assert request.body.read(5) == b"Lorem"
        assert not request.body.is_writable()
        request.body.close()

    def test_file_object_body(self):
        buffer = io.BytesIO(b"a=1")
        assert bytes(ServerRequest(body=buffer).body) == b"a=1"
