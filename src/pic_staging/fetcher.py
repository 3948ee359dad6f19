"""
Fetcher

Stages a picture from a local path or an http(s) URI into the registry.

Design Choices:
- Downloads stream straight to the backing file with requests
- Only a plain 200 response is accepted; redirects are not followed
- The response content-type decides the staged file's extension

Author: AI Creator Team
License: MIT
"""

import logging
import os
import re
import shutil
from contextlib import contextmanager
from typing import Iterator, Optional

import requests

from .config import DEFAULT_CHUNK_SIZE, DEFAULT_HTTP_TIMEOUT
from .errors import EmptyFileError, FiletypeError, HTTPResponseError
from .filetypes import canonicalize, is_supported
from .registry import VirtualFileRegistry

logger = logging.getLogger(__name__)

_URI_RE = re.compile(r'^https?://', re.IGNORECASE)
_EXTENSION_RE = re.compile(r'(\.\w+)$')
_BARE_EXTENSION_RE = re.compile(r'^\.\w+$')


def is_uri(source: str) -> bool:
    """Return True if source starts with http:// or https:// (any case)."""
    return bool(_URI_RE.match(source))


@contextmanager
def _owned_by(virtual_filename: str) -> Iterator[None]:
    """Tag any error raised in the block with the file it left staged."""
    try:
        yield
    except Exception as e:
        e.virtual_filename = virtual_filename
        raise


class Fetcher:
    """Puts pictures into a VirtualFileRegistry by downloading or copying.

    Attributes:
        registry: Registry staged files are created in
        timeout: Timeout in seconds for HTTP requests
        chunk_size: Bytes per chunk when streaming a download
    """

    def __init__(
        self,
        registry: VirtualFileRegistry,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        session: Optional[requests.Session] = None
    ):
        self.registry = registry
        self.timeout = timeout
        self.chunk_size = chunk_size
        self.session = session or requests.Session()

    def obtain(self, source: str) -> str:
        """Stage a picture, downloading or copying as necessary.

        Args:
            source: Local path, http(s) URI, or a bare extension such as ".png"
                to stage an empty file for an edit hook to fill in

        Returns:
            Virtual filename of the staged file
        """
        if is_uri(source):
            return self.download(source)
        if _BARE_EXTENSION_RE.match(source) and not os.path.exists(source):
            return self.blank(source)
        return self.copy(source)

    def download(self, uri: str) -> str:
        """Download a picture into the registry.

        Args:
            uri: http(s) address of the picture

        Returns:
            Virtual filename of the downloaded file

        Raises:
            HTTPResponseError: If the response status isn't 200
            FiletypeError: If the content-type is missing or unsupported
            EmptyFileError: If the downloaded file is empty
            requests.RequestException: On connection failures and timeouts
        """
        logger.debug(f"Downloading {uri}")

        with self.session.get(uri, stream=True, allow_redirects=False, timeout=self.timeout) as response:
            if response.status_code != 200:
                raise HTTPResponseError(
                    f"'{uri}' caused HTTP Error {response.status_code}: {response.reason}",
                    uri=uri,
                    status_code=response.status_code,
                )

            content_type = response.headers.get('content-type')
            if not content_type:
                raise FiletypeError(f"'{uri}' didn't send a content-type")
            if not is_supported(content_type):
                raise FiletypeError(f"'{uri}' is an unsupported content-type: '{content_type}'")

            virtual_filename = self.registry.create(canonicalize(content_type))
            with _owned_by(virtual_filename):
                with open(self.registry.resolve(virtual_filename), 'wb') as destination:
                    for chunk in response.iter_content(chunk_size=self.chunk_size):
                        if chunk:
                            destination.write(chunk)

        with _owned_by(virtual_filename):
            size = os.path.getsize(self.registry.resolve(virtual_filename))
            if size == 0:
                raise EmptyFileError(f"'{uri}' produced an empty file")

        logger.info(f"Downloaded {uri} as {virtual_filename} ({size} bytes)")
        return virtual_filename

    def copy(self, path: str) -> str:
        """Copy a local picture into the registry.

        Zero-byte sources are copied as-is. A bare extension (".jpg") with
        no file behind it stages an empty file.

        Args:
            path: Path of the picture to copy

        Returns:
            Virtual filename of the copy

        Raises:
            FiletypeError: If the path has no supported extension
            OSError: If the source can't be read
        """
        match = _EXTENSION_RE.search(path)
        if not match:
            raise FiletypeError(f"'{path}' has no file extension")
        extension = canonicalize(match.group(1))

        if _BARE_EXTENSION_RE.match(path) and not os.path.exists(path):
            return self.blank(extension)

        if not os.path.isfile(path):
            raise FileNotFoundError(f"File not found: {path}")

        virtual_filename = self.registry.create(extension)
        with _owned_by(virtual_filename):
            shutil.copyfile(path, self.registry.resolve(virtual_filename))

        logger.debug(f"Copied {path} as {virtual_filename}")
        return virtual_filename

    def blank(self, extension: str) -> str:
        """Stage an empty file of the given type."""
        virtual_filename = self.registry.create(extension)
        logger.debug(f"Staged blank {virtual_filename}")
        return virtual_filename
