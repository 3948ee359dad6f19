"""Tests for the fetcher."""

import os
from unittest.mock import MagicMock

import pytest
import requests

from pic_staging import (
    EmptyFileError,
    Fetcher,
    FiletypeError,
    HTTPResponseError,
    VirtualFileRegistry,
)
from pic_staging.fetcher import is_uri

from conftest import make_response, png_bytes


@pytest.fixture
def registry(tmp_path):
    staging_dir = tmp_path / "staging"
    staging_dir.mkdir()
    return VirtualFileRegistry("test-pic", str(staging_dir))


@pytest.fixture
def session():
    return MagicMock(spec=requests.Session)


@pytest.fixture
def fetcher(registry, session):
    return Fetcher(registry, timeout=5, chunk_size=4, session=session)


class TestIsUri:
    @pytest.mark.parametrize("source", ["http://a/b.png", "https://a/b.png", "HTTPS://A/B.PNG"])
    def test_uris(self, source) -> None:
        assert is_uri(source)

    @pytest.mark.parametrize("source", ["/tmp/b.png", "ftp://a/b.png", "b.png", "xhttp://a"])
    def test_not_uris(self, source) -> None:
        assert not is_uri(source)


class TestDownload:
    def test_png_download(self, fetcher, registry, session) -> None:
        body = png_bytes()
        session.get.return_value = make_response(content_type="image/png", body=body)

        name = fetcher.download("https://example.com/cat")

        assert name.endswith(".png")
        with open(registry.resolve(name), "rb") as f:
            assert f.read() == body
        session.get.assert_called_once_with(
            "https://example.com/cat", stream=True, allow_redirects=False, timeout=5
        )

    def test_empty_body(self, fetcher, registry, session) -> None:
        session.get.return_value = make_response(content_type="image/jpeg", body=b"")
        with pytest.raises(EmptyFileError) as excinfo:
            fetcher.download("http://example.com/empty.jpg")
        # The staged entry is left for the caller to clean up
        assert registry.list() == {excinfo.value.virtual_filename}

    def test_not_found(self, fetcher, registry, session) -> None:
        session.get.return_value = make_response(status_code=404, reason="Not Found")
        with pytest.raises(HTTPResponseError) as excinfo:
            fetcher.download("http://example.com/missing.png")
        assert excinfo.value.status_code == 404
        assert registry.list() == set()

    def test_redirect_is_an_error(self, fetcher, session) -> None:
        session.get.return_value = make_response(status_code=302, reason="Found")
        with pytest.raises(HTTPResponseError):
            fetcher.download("http://example.com/moved.png")

    def test_unsupported_content_type(self, fetcher, registry, session) -> None:
        session.get.return_value = make_response(content_type="text/html", body=b"<html>")
        with pytest.raises(FiletypeError):
            fetcher.download("http://example.com/page")
        assert registry.list() == set()

    def test_missing_content_type(self, fetcher, registry, session) -> None:
        session.get.return_value = make_response(content_type=None, body=b"data")
        with pytest.raises(FiletypeError):
            fetcher.download("http://example.com/unknown")
        assert registry.list() == set()

    def test_unsupported_content_type_with_params(self, fetcher, registry, session) -> None:
        session.get.return_value = make_response(content_type="text/plain; charset=utf-8", body=b"hi")
        with pytest.raises(FiletypeError, match="unsupported content-type"):
            fetcher.download("http://example.com/notes")
        assert registry.list() == set()

    def test_interrupted_stream_names_staged_file(self, fetcher, registry, session) -> None:
        response = make_response(content_type="image/gif")
        response.iter_content = MagicMock(side_effect=requests.ConnectionError("reset"))
        session.get.return_value = response
        with pytest.raises(requests.ConnectionError) as excinfo:
            fetcher.download("http://example.com/a.gif")
        assert registry.list() == {excinfo.value.virtual_filename}

    def test_connection_error_propagates(self, fetcher, session) -> None:
        session.get.side_effect = requests.ConnectionError("unreachable")
        with pytest.raises(requests.RequestException):
            fetcher.download("http://example.com/a.png")


class TestCopy:
    def test_copies_bytes(self, fetcher, registry, picture) -> None:
        name = fetcher.copy(str(picture))
        assert name.endswith(".png")
        with open(registry.resolve(name), "rb") as f:
            assert f.read() == picture.read_bytes()

    def test_zero_byte_source_is_copied(self, fetcher, registry, tmp_path) -> None:
        source = tmp_path / "empty.gif"
        source.write_bytes(b"")
        name = fetcher.copy(str(source))
        assert os.path.getsize(registry.resolve(name)) == 0

    def test_jpeg_extension_canonicalized(self, fetcher, tmp_path) -> None:
        source = tmp_path / "photo.JPEG"
        source.write_bytes(b"jpegdata")
        assert fetcher.copy(str(source)).endswith(".jpg")

    def test_no_extension(self, fetcher, registry, tmp_path) -> None:
        source = tmp_path / "noextension"
        source.write_bytes(b"data")
        with pytest.raises(FiletypeError):
            fetcher.copy(str(source))
        assert registry.list() == set()

    def test_unsupported_extension(self, fetcher, tmp_path) -> None:
        source = tmp_path / "notes.txt"
        source.write_text("hello")
        with pytest.raises(FiletypeError):
            fetcher.copy(str(source))

    def test_missing_source(self, fetcher, registry, tmp_path) -> None:
        with pytest.raises(FileNotFoundError):
            fetcher.copy(str(tmp_path / "gone.png"))
        assert registry.list() == set()

    def test_bare_extension_stages_blank_file(self, fetcher, registry) -> None:
        name = fetcher.copy(".jpg")
        assert os.path.getsize(registry.resolve(name)) == 0


class TestObtain:
    def test_uri_downloads(self, fetcher, monkeypatch) -> None:
        download = MagicMock(return_value="1.png")
        monkeypatch.setattr(fetcher, "download", download)
        assert fetcher.obtain("HTTP://example.com/a.png") == "1.png"
        download.assert_called_once_with("HTTP://example.com/a.png")

    def test_path_copies(self, fetcher, monkeypatch, picture) -> None:
        copy = MagicMock(return_value="1.png")
        monkeypatch.setattr(fetcher, "copy", copy)
        fetcher.obtain(str(picture))
        copy.assert_called_once_with(str(picture))

    def test_bare_extension(self, fetcher, registry) -> None:
        name = fetcher.obtain(".PNG")
        assert name == "1.png"
        assert os.path.getsize(registry.resolve(name)) == 0
