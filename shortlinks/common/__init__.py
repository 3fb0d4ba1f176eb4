"""Common utilities for shortlinks."""

from .normalize import normalize_url
from .url_builder import build_base_url, build_short_url
from .logging_config import setup_logging, get_logger

__all__ = [
    "normalize_url",
    "build_base_url",
    "build_short_url",
    "setup_logging",
    "get_logger",
]
