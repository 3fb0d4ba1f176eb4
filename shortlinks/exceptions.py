"""Error kinds raised by the shortlinks core.

Every error carries the HTTP status the web layer answers with, so routes can
simply let them propagate to the application's exception handler.
"""

from typing import Optional


class ShortLinksError(Exception):
    """Base exception for all shortlinks errors."""

    error_code = "shortlinks:error"
    status_code = 500


class InvalidURL(ShortLinksError, ValueError):
    """Raised when a URL to shorten is malformed or not absolute."""

    error_code = "shortlinks:invalid_url"
    status_code = 400


class InvalidCode(ShortLinksError, ValueError):
    """Raised when a short code is not a valid base36 64-bit integer."""

    error_code = "shortlinks:invalid_code"
    status_code = 500


class NotFound(ShortLinksError, LookupError):
    """Raised when no link exists for an ID."""

    error_code = "shortlinks:not_found"
    status_code = 404

    def __init__(self, link_id: int, short_code: Optional[str] = None):
        self.link_id = link_id
        self.short_code = short_code
        if short_code is None:
            message = f"unknown link ID {link_id}"
        else:
            message = f"unknown link ID {short_code} (parsed as {link_id})"
        super().__init__(message)


class StorageError(ShortLinksError):
    """Raised when the index backend fails.

    The driver exception is available as ``cause`` (and as ``__cause__`` when
    raised with ``raise ... from``).
    """

    error_code = "shortlinks:storage_error"
    status_code = 500

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.cause = cause
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
