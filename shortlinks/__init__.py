"""Core business logic for shortlinks."""

from .shortcode import format_id, parse_id
from .service import ShortLinkService, ShortenResult

__all__ = ["format_id", "parse_id", "ShortLinkService", "ShortenResult"]
