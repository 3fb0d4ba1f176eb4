#!/usr/bin/env python3
"""
Main entry point for the shortlinks service.

Concurrency: requests are served by uvicorn on one event loop per worker.
The SQLite index runs its statements in worker threads behind a single lock,
so concurrent requests are serialized at the index. Set WORKERS > 1 for
multi-process scaling (each worker opens its own index handle).

Usage:
    python app.py

Environment variables:
    DATABASE_URL - Index backend (sqlite:///shortlinks.sqlite, postgresql://..., memory://)
    SQLITE_JOURNAL_MODE - SQLite journal mode (default wal)
    REDIS_URL - Redis connection URL (optional)
    BASE_URL - Fallback base URL for short links
    PATH_PREFIX - Path prefix inserted before short codes
    PORT - Port to listen on
    WORKERS - Number of uvicorn worker processes
    LOG_LEVEL - Logging level
"""

import signal
import sys
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI

from config import Config, load_config
from shortlinks.database import RedisCache, open_index
from shortlinks.exceptions import StorageError
from shortlinks.service import ShortLinkService
from shortlinks.common.logging_config import setup_logging
from web_app import create_app


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the index (and cache) on startup, close them on shutdown."""
    config = app.state.config
    logger = app.state.logger

    logger.info("Starting shortlinks service...")

    logger.info(f"Opening index at {config.database_url}")
    index = open_index(
        config.database_url,
        sqlite_journal_mode=config.sqlite_journal_mode,
        pool_max_size=config.pool_max_size,
        logger=logger,
    )

    if config.redis_url:
        logger.info(f"Connecting to Redis at {config.redis_url}")
        cache = RedisCache(
            redis_url=config.redis_url,
            ttl_seconds=config.cache_ttl_seconds,
            logger=logger,
        )
        await cache.connect()
    else:
        logger.info("Redis caching disabled")
        cache = None

    service = ShortLinkService(index=index, cache=cache, logger=logger)
    app.state.service = service

    logger.info("Service started successfully")

    yield

    logger.info("Shutting down shortlinks service...")
    await service.close()
    logger.info("Service stopped")


def build_app(config: Optional[Config] = None) -> FastAPI:
    """Build the application with logging configured and the index opened by lifespan."""
    config = config or load_config()

    logger = setup_logging(
        level=config.log_level,
        log_file=config.log_file,
        json_format=config.log_json,
    )

    return create_app(
        service_instance=None,  # set in lifespan
        config=config,
        logger=logger,
        lifespan=lifespan,
    )


def main():
    """Main entry point."""
    config = load_config()
    app = build_app(config)
    logger = app.state.logger

    logger.info("shortlinks service")
    logger.info(f"Configuration: {config.model_dump()}")

    if config.workers > 1:
        # uvicorn needs an import string to spawn worker processes
        uvicorn.run(
            "app:build_app",
            factory=True,
            host=config.host,
            port=config.port,
            workers=config.workers,
            log_level=config.log_level.lower(),
        )
        return

    server = uvicorn.Server(
        uvicorn.Config(
            app,
            host=config.host,
            port=config.port,
            log_level=config.log_level.lower(),
            access_log=False,
        )
    )

    def handle_signal(signum, frame):
        logger.info(f"Received signal {signum}, initiating graceful shutdown...")
        server.should_exit = True

    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)

    try:
        logger.info(f"Starting server on {config.host}:{config.port}")
        server.run()
    except (StorageError, OSError) as e:
        logger.error(f"Server error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
