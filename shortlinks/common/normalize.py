"""URL normalization for shortlinks."""

import re
from urllib.parse import urlsplit, urlunsplit

from ..exceptions import InvalidURL

# "%" not followed by two hex digits
BAD_ESCAPE_PATTERN = re.compile(r"%(?![0-9A-Fa-f]{2})")


def _check_escapes(raw_url: str, parts) -> None:
    """Reject percent-escapes urllib would silently accept.

    The query is kept as an opaque string and is not checked.
    """
    if parts.hostname and "%" in parts.hostname:
        raise InvalidURL(f"could not parse '{raw_url}' as URL: invalid URL escape in host")

    for component in (parts.netloc, parts.path, parts.fragment):
        match = BAD_ESCAPE_PATTERN.search(component)
        if match:
            escape = component[match.start():match.start() + 3]
            raise InvalidURL(f"could not parse '{raw_url}' as URL: invalid URL escape '{escape}'")


def normalize_url(raw_url: str) -> str:
    """Canonicalize a URL before it is used as an index key.

    Normalization is deliberately minimal: an empty path becomes ``/``, so
    ``http://example.com`` and ``http://example.com/`` share one entry. Host
    case, default ports, queries and fragments are left alone, and a bare
    trailing ``?`` is kept.

    Args:
        raw_url: Absolute URL as submitted by the client

    Returns:
        The re-serialized URL

    Raises:
        InvalidURL: If the URL cannot be parsed or lacks a scheme or host
    """
    if not raw_url or not isinstance(raw_url, str):
        raise InvalidURL("URL is required")

    try:
        parts = urlsplit(raw_url)
        # port is validated lazily by urllib
        parts.port
    except ValueError as e:
        raise InvalidURL(f"could not parse '{raw_url}' as URL: {e}") from e

    if not parts.scheme:
        raise InvalidURL(f"'{raw_url}' is not an absolute URL (missing scheme)")

    if not parts.hostname:
        raise InvalidURL(f"'{raw_url}' is not an absolute URL (missing host)")

    _check_escapes(raw_url, parts)

    if not parts.path:
        parts = parts._replace(path="/")

    # urlunsplit drops an empty query along with its "?"
    force_query = "?" in raw_url.split("#", 1)[0]

    url = urlunsplit(parts._replace(query="", fragment=""))
    if parts.query or force_query:
        url = f"{url}?{parts.query}"
    if parts.fragment:
        url = f"{url}#{parts.fragment}"
    return url
