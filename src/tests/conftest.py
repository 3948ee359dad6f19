"""Shared fixtures for the picture staging tests."""

import io
from typing import Any, Dict, List

import pytest
import requests
from PIL import Image

from pic_staging import MediaStaging, StagingConfig


class FakePoster:
    """Records uploads and hands out sequential media ids."""

    def __init__(self, fail_on: int = 0):
        self.uploads: List[Dict[str, Any]] = []
        self.fail_on = fail_on

    def upload(self, file_obj, options):
        self.uploads.append({"data": file_obj.read(), "options": options})
        if self.fail_on and len(self.uploads) == self.fail_on:
            raise RuntimeError("upload rejected")
        return str(1000 + len(self.uploads))


class FakeBot:
    def __init__(self, poster=None):
        self.poster = poster or FakePoster()
        self.messages: List[str] = []

    def log(self, message: str) -> None:
        self.messages.append(message)


def make_response(status_code=200, content_type="image/png", body=b"", reason="OK"):
    response = requests.Response()
    response.status_code = status_code
    response.reason = reason
    if content_type is not None:
        response.headers['content-type'] = content_type
    response.raw = io.BytesIO(body)
    return response


def png_bytes(size=(8, 8), color=(200, 30, 30)) -> bytes:
    buffer = io.BytesIO()
    Image.new('RGB', size, color).save(buffer, format='PNG')
    return buffer.getvalue()


@pytest.fixture
def config(tmp_path):
    return StagingConfig(temp_dir=str(tmp_path), retry_interval=60, poll_interval=0.05)


@pytest.fixture
def staging(config):
    instance = MediaStaging(config)
    yield instance
    instance.shutdown(timeout=1)


@pytest.fixture
def bot():
    return FakeBot()


@pytest.fixture
def picture(tmp_path):
    """A small real PNG on disk, outside the staging directory."""
    source_dir = tmp_path / "sources"
    source_dir.mkdir()
    path = source_dir / "picture.png"
    path.write_bytes(png_bytes())
    return path
