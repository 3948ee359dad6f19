"""
Media Staging Errors

Every error raised by the staging subsystem derives from MediaStagingError
and from the builtin exception it most closely resembles, so callers can
catch either the specific kind or the family.

Author: AI Creator Team
License: MIT
"""

from typing import Optional


class MediaStagingError(Exception):
    """Base class for all media staging errors."""


class FiletypeError(MediaStagingError, ValueError):
    """Raised when an extension or content-type is not a supported image type."""


class HTTPResponseError(MediaStagingError, IOError):
    """Raised when a download answers with anything other than HTTP 200.

    Attributes:
        uri: URI that was requested
        status_code: HTTP status code received (None if unknown)
    """

    def __init__(self, message: str, uri: str = "", status_code: Optional[int] = None):
        super().__init__(message)
        self.uri = uri
        self.status_code = status_code


class EmptyFileError(MediaStagingError, IOError):
    """Raised when a downloaded (or about to be uploaded) file has zero bytes."""


class NoSuchFileError(MediaStagingError, LookupError):
    """Raised when a virtual filename is not present in the registry."""


class NoUploadedFilesError(MediaStagingError, RuntimeError):
    """Raised when none of the pictures in a batch could be uploaded."""
