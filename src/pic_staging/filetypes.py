"""
Filetype Validator

Canonicalizes file extensions and content-types into the small set of
image extensions the posting service accepts.

Author: AI Creator Team
License: MIT
"""

from typing import Dict

from .errors import FiletypeError

# Accepted token -> canonical extension
SUPPORTED_FILETYPES: Dict[str, str] = {
    '.jpg': '.jpg',
    '.jpeg': '.jpg',
    'image/jpeg': '.jpg',
    '.png': '.png',
    'image/png': '.png',
    '.gif': '.gif',
    'image/gif': '.gif',
}


def _normalize(token: str) -> str:
    token = (token or '').strip().lower()

    if '/' in token:
        # Content-type: drop parameters such as "; charset=binary"
        return token.split(';', 1)[0].strip()

    if not token.startswith('.'):
        token = '.' + token
    return token


def canonicalize(token: str) -> str:
    """Map an extension or content-type to its canonical extension.

    Args:
        token: File extension ("jpg", ".JPG") or content-type ("image/png")

    Returns:
        Canonical extension, e.g. ".jpg"

    Raises:
        FiletypeError: If the token is not a supported image type

    Example:
        canonicalize("image/jpeg")  # ".jpg"
        canonicalize(".JPEG")       # ".jpg"
    """
    normalized = _normalize(token)
    try:
        return SUPPORTED_FILETYPES[normalized]
    except KeyError:
        raise FiletypeError(f"'{token}' isn't a supported filetype") from None


def is_supported(token: str) -> bool:
    """Return True if canonicalize() would accept the token."""
    return _normalize(token) in SUPPORTED_FILETYPES
