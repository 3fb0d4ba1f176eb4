"""Business logic service for shortlinks."""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

from .exceptions import NotFound
from .shortcode import format_id, parse_id
from .common.logging_config import get_logger
from .common.normalize import normalize_url
from .database.base import URLIndex
from .database.cache import RedisCache


@dataclass(frozen=True)
class ShortenResult:
    """Outcome of a shorten request."""

    id: int
    short_code: str
    long_url: str


class ShortLinkService:
    """Drives normalizer, index, codec and cache for the HTTP layer."""

    def __init__(
        self,
        index: URLIndex,
        cache: Optional[RedisCache] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize shortlinks service.

        Args:
            index: Link index
            cache: Optional lookup cache
            logger: Optional logger
        """
        self.index = index
        self.cache = cache
        self.logger = logger or get_logger(__name__)

    async def shorten(self, raw_url: str) -> ShortenResult:
        """Add a URL to the index and return its short code.

        Args:
            raw_url: URL as submitted by the client

        Returns:
            ShortenResult with ID, short code and the normalized URL

        Raises:
            InvalidURL: If the URL is malformed or not absolute
            StorageError: If the index fails
        """
        long_url = normalize_url(raw_url)
        link_id = await self.index.add_url(long_url)

        if self.cache:
            await self.cache.set(link_id, long_url)

        short_code = format_id(link_id)
        self.logger.info(f"shortened {long_url} to {link_id}")

        return ShortenResult(id=link_id, short_code=short_code, long_url=long_url)

    async def resolve(self, short_code: str) -> str:
        """Get the long URL a short code points to.

        Args:
            short_code: Base36 short code

        Returns:
            The stored long URL

        Raises:
            InvalidCode: If the code cannot be decoded; the index is not consulted
            NotFound: If no link has the decoded ID
            StorageError: If the index fails
        """
        link_id = parse_id(short_code)

        if self.cache:
            cached_url = await self.cache.get(link_id)
            if cached_url:
                self.logger.debug(f"Cache hit for {short_code}")
                return cached_url

        try:
            long_url = await self.index.lookup_id(link_id)
        except NotFound:
            self.logger.warning(f"Short code not found: {short_code}")
            raise NotFound(link_id, short_code) from None

        if self.cache:
            await self.cache.set(link_id, long_url)

        self.logger.info(f"resolved {short_code} to {long_url}")
        return long_url

    async def health_check(self) -> Dict[str, bool]:
        """Perform health check.

        Returns:
            Dictionary with health status
        """
        db_healthy = await self.index.health_check()

        cache_healthy = True
        if self.cache and self.cache.enabled:
            cache_healthy = await self.cache.ping()

        return {
            "database": db_healthy,
            "cache": cache_healthy,
            "overall": db_healthy and cache_healthy,
        }

    async def close(self) -> None:
        """Close index and cache connections."""
        await self.index.close()
        if self.cache:
            await self.cache.close()
