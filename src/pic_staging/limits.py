"""Attachment limit calculator."""

from typing import Any

# The posting service allows up to four media per post and offers no way to
# discover this at runtime.
MEDIA_LIMIT = 4


def limit(*args: Any) -> int:
    """Number of attachments allowed per post, or how far a list is from it.

    Called with no arguments, returns the limit. Called with one sized
    argument, returns ``len(arg) - limit()``: negative means below the
    limit, zero or positive means at or over it.

    Raises:
        TypeError: If called with more than one argument, or with an
            argument that has no length
    """
    if len(args) == 0:
        return MEDIA_LIMIT

    if len(args) == 1:
        try:
            length = len(args[0])
        except TypeError:
            raise TypeError(
                f"object of type '{type(args[0]).__name__}' has no len()"
            ) from None
        return length - MEDIA_LIMIT

    raise TypeError(f"limit() expected 0 or 1 arguments, got {len(args)}")
