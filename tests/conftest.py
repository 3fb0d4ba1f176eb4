"""Pytest configuration and fixtures."""

from typing import AsyncGenerator

import httpx
import pytest

from config import Config
from shortlinks.database import MemoryIndex, SQLiteIndex
from shortlinks.service import ShortLinkService
from shortlinks.common.logging_config import setup_logging
from web_app import create_app


@pytest.fixture
def logger():
    """Create test logger."""
    return setup_logging(level="DEBUG")


@pytest.fixture
async def sqlite_index(tmp_path, logger) -> AsyncGenerator[SQLiteIndex, None]:
    """Create a SQLite index in a fresh database file."""
    index = SQLiteIndex(str(tmp_path / "shortlinks_test.sqlite"), logger=logger)

    yield index

    await index.close()


@pytest.fixture
def memory_index() -> MemoryIndex:
    return MemoryIndex()


@pytest.fixture
def service(sqlite_index, logger) -> ShortLinkService:
    """Create service instance on top of the SQLite index."""
    return ShortLinkService(index=sqlite_index, cache=None, logger=logger)


@pytest.fixture
def config() -> Config:
    return Config(
        database_url="memory://",
        base_url="http://testserver",
    )


@pytest.fixture
def app(service, config, logger):
    """Create test FastAPI app."""
    return create_app(
        service_instance=service,
        config=config,
        logger=logger,
    )


@pytest.fixture
async def client(app):
    """Create test client. Redirects are not followed so they can be asserted."""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac


@pytest.fixture
def sample_urls():
    """Sample URLs for testing."""
    return [
        "https://example.com/test",
        "https://github.com/user/repo",
        "https://stackoverflow.com/questions/123456",
    ]
