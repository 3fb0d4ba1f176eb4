"""
Command-line interface for operating on a shortlinks index directly.

Usage:
    shortlinks shorten <url>
    shortlinks resolve <short_code>
    shortlinks list [--limit N]
"""

import argparse
import asyncio
import json
import sys
from typing import List, Optional

from config import load_config
from .database import RedisCache, open_index
from .exceptions import ShortLinksError
from .service import ShortLinkService
from .common.logging_config import setup_logging


class ShortLinksCLI:
    """Command-line interface for shortlinks."""

    def __init__(
        self,
        database_url: str,
        redis_url: Optional[str] = None,
        sqlite_journal_mode: Optional[str] = "wal",
        verbose: bool = False,
    ):
        self.database_url = database_url
        self.redis_url = redis_url
        self.sqlite_journal_mode = sqlite_journal_mode
        self.logger = setup_logging(level="DEBUG" if verbose else "ERROR")
        self.service: Optional[ShortLinkService] = None

    async def initialize(self) -> None:
        """Open the index and the optional cache."""
        index = open_index(
            self.database_url,
            sqlite_journal_mode=self.sqlite_journal_mode,
            logger=self.logger,
        )

        cache = None
        if self.redis_url:
            cache = RedisCache(redis_url=self.redis_url, logger=self.logger)
            await cache.connect()

        self.service = ShortLinkService(index=index, cache=cache, logger=self.logger)

    async def cleanup(self) -> None:
        if self.service:
            await self.service.close()

    @staticmethod
    def _fail(error: Exception) -> int:
        result = {"success": False, "error": str(error)}
        if isinstance(error, ShortLinksError):
            result["error_code"] = error.error_code
        print(json.dumps(result, indent=2), file=sys.stderr)
        return 1

    async def shorten(self, url: str) -> int:
        """Shorten a URL."""
        try:
            result = await self.service.shorten(url)
        except ShortLinksError as e:
            return self._fail(e)

        print(json.dumps({
            "success": True,
            "id": result.id,
            "short_code": result.short_code,
            "long_url": result.long_url,
        }, indent=2))
        return 0

    async def resolve(self, short_code: str) -> int:
        """Print the long URL for a short code."""
        try:
            long_url = await self.service.resolve(short_code)
        except ShortLinksError as e:
            return self._fail(e)

        print(json.dumps({
            "success": True,
            "short_code": short_code,
            "long_url": long_url,
        }, indent=2))
        return 0

    async def list_links(self, limit: int = 100) -> int:
        """List the newest links."""
        try:
            entries = await self.service.index.list_entries(limit)
        except ShortLinksError as e:
            return self._fail(e)

        print(json.dumps({
            "success": True,
            "count": len(entries),
            "links": [entry.to_dict() for entry in entries],
        }, indent=2))
        return 0


def build_parser() -> argparse.ArgumentParser:
    config = load_config()

    parser = argparse.ArgumentParser(
        prog="shortlinks",
        description="shortlinks index CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Shorten a URL
  %(prog)s shorten https://example.com/long/url

  # Look up a short code
  %(prog)s resolve 1a

  # List the newest links
  %(prog)s list --limit 10
        """
    )

    parser.add_argument(
        "--database-url",
        default=config.database_url,
        help=f"Index backend URL (default: from DATABASE_URL env or {config.database_url})"
    )
    parser.add_argument(
        "--redis-url",
        default=config.redis_url,
        help="Redis connection URL (optional, default: from REDIS_URL env)"
    )
    parser.add_argument(
        "--sqlite-journal-mode",
        default=config.sqlite_journal_mode,
        help="SQLite journal mode"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    shorten_parser = subparsers.add_parser("shorten", help="Shorten a URL")
    shorten_parser.add_argument("url", help="URL to shorten")

    resolve_parser = subparsers.add_parser("resolve", help="Look up the URL behind a short code")
    resolve_parser.add_argument("short_code", help="Short code to look up")

    list_parser = subparsers.add_parser("list", help="List recent links")
    list_parser.add_argument("--limit", type=int, default=100, help="Maximum number to return")

    return parser


async def run(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    cli = ShortLinksCLI(
        database_url=args.database_url,
        redis_url=args.redis_url,
        sqlite_journal_mode=args.sqlite_journal_mode,
        verbose=args.verbose,
    )

    try:
        await cli.initialize()
    except (ShortLinksError, ValueError) as e:
        return cli._fail(e)

    try:
        if args.command == "shorten":
            return await cli.shorten(args.url)
        if args.command == "resolve":
            return await cli.resolve(args.short_code)
        return await cli.list_links(args.limit)
    finally:
        await cli.cleanup()


def main(argv: Optional[List[str]] = None) -> None:
    """Console script entry point."""
    sys.exit(asyncio.run(run(argv)))


if __name__ == "__main__":
    main()
