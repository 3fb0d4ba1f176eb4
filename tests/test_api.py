"""Tests for the HTTP surface: shorten and resolve dispatch."""

from unittest.mock import AsyncMock

import httpx
import pytest

from config import Config
from shortlinks.database import MemoryIndex
from shortlinks.exceptions import StorageError
from shortlinks.service import ShortLinkService
from web_app import create_app


async def shorten(client, path: str) -> str:
    """Shorten via the request path and return the path of the short URL."""
    response = await client.get(path)
    assert response.status_code == 200, response.text
    short_url = httpx.URL(response.text.strip())
    return short_url.path


async def assert_redirects(client, path: str, long_url: str) -> None:
    response = await client.get(path)
    assert response.status_code == 302, response.text
    assert response.headers["location"] == long_url


async def asgi_get(app, raw_path: bytes):
    """Send a GET straight to the ASGI app and return (status, body)."""
    scope = {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": "GET",
        "scheme": "http",
        "path": raw_path.decode("latin-1"),
        "raw_path": raw_path,
        "root_path": "",
        "query_string": b"",
        "headers": [(b"host", b"testserver")],
        "client": ("127.0.0.1", 12345),
        "server": ("testserver", 80),
    }
    requests = [{"type": "http.request", "body": b"", "more_body": False}]
    messages = []

    async def receive():
        if requests:
            return requests.pop()
        return {"type": "http.disconnect"}

    async def send(message):
        messages.append(message)

    await app(scope, receive, send)

    start = next(m for m in messages if m["type"] == "http.response.start")
    body = b"".join(m.get("body", b"") for m in messages if m["type"] == "http.response.body")
    return start["status"], body


class TestShortenAndResolve:
    """End-to-end scenarios over one index."""

    async def test_basic(self, client):
        assert await shorten(client, "/https://basic.com") == "/1"
        await assert_redirects(client, "/1", "https://basic.com/")

        assert await shorten(client, "/https://basic-2.com") == "/2"
        await assert_redirects(client, "/2", "https://basic-2.com/")

    async def test_ids_are_persistent_across_sequential_requests(self, client):
        assert await shorten(client, "/https://ids.com") == "/1"
        assert await shorten(client, "/https://ids.com") == "/1"
        await assert_redirects(client, "/1", "https://ids.com/")

    async def test_repeat_shorten_keeps_codes_sequential(self, client):
        assert await shorten(client, "/https://basic.com") == "/1"
        assert await shorten(client, "/https://basic.com") == "/1"
        assert await shorten(client, "/https://basic-2.com") == "/2"

        assert await shorten(client, "/https://ids.com") == "/3"
        assert await shorten(client, "/https://ids.com") == "/3"
        assert await shorten(client, "/https://ids-2.com") == "/4"

    async def test_slash_is_used_instead_of_empty_path(self, client):
        assert await shorten(client, "/https://slash.com") == "/1"
        await assert_redirects(client, "/1", "https://slash.com/")

        assert await shorten(client, "/https://slash.com/") == "/1"
        await assert_redirects(client, "/1", "https://slash.com/")

    async def test_shorten_response_body(self, client):
        response = await client.get("/http://example.com")

        assert response.status_code == 200
        assert response.text == "http://testserver/1\n"
        assert response.headers["content-type"].startswith("text/plain")

    async def test_shorten_with_post(self, client):
        response = await client.post("/https://posted.com")

        assert response.status_code == 200
        assert response.text == "http://testserver/1\n"

    async def test_path_and_query_are_part_of_the_long_url(self, client):
        path = await shorten(client, "/https://search.example.com/find/it?q=short+links&page=2")

        await assert_redirects(client, path, "https://search.example.com/find/it?q=short+links&page=2")

    async def test_percent_encoding_is_kept(self, client):
        path = await shorten(client, "/https://example.com/a%20b")

        await assert_redirects(client, path, "https://example.com/a%20b")

    async def test_codes_continue_in_base36(self, client):
        for i in range(36):
            path = await shorten(client, f"/https://example.com/{i}")

        assert path == "/10"
        await assert_redirects(client, "/a", "https://example.com/9")

    async def test_head_resolve(self, client):
        await shorten(client, "/https://head.com")

        response = await client.head("/1")

        assert response.status_code == 302
        assert response.headers["location"] == "https://head.com/"


class TestShortURLBase:
    """The short URL is built from the request that created it."""

    async def test_forwarded_headers(self, client):
        response = await client.get(
            "/https://proxied.com",
            headers={"X-Forwarded-Proto": "https", "X-Forwarded-Host": "sho.rt"},
        )

        assert response.text == "https://sho.rt/1\n"

    async def test_request_host(self, client):
        response = await client.get("/https://hosted.com", headers={"Host": "links.example.org"})

        assert response.text == "http://links.example.org/1\n"

    async def test_path_prefix(self, service, logger):
        config = Config(database_url="memory://", base_url="http://testserver", path_prefix="/s")
        app = create_app(service_instance=service, config=config, logger=logger)

        async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://testserver") as client:
            response = await client.get("/https://prefixed.com")

        assert response.text == "http://testserver/s/1\n"


class TestErrors:
    """Status codes for each error kind."""

    @pytest.mark.parametrize(
        "path",
        [
            "/http://",
            "/https://",
            "/http://example.com:notaport/",
            "/https://exa%20mple.com/",
        ],
    )
    async def test_invalid_url(self, client, path):
        response = await client.get(path)

        assert response.status_code == 400
        assert response.text.endswith("\n")
        assert response.text.count("\n") == 1

    @pytest.mark.parametrize(
        "raw_path",
        [b"/https://example.com/%zz", b"/https://example.com/%", b"/https://example.com/a%2"],
    )
    async def test_malformed_escape(self, app, raw_path):
        """Sent as a bare ASGI request so the path reaches the app unquoted."""
        status_code, body = await asgi_get(app, raw_path)

        assert status_code == 400
        assert b"invalid URL escape" in body

    async def test_unknown_code(self, client):
        response = await client.get("/zz")

        assert response.status_code == 404
        assert response.text == "unknown link ID zz (parsed as 1295)\n"

    async def test_undecodable_code(self, config, logger):
        """A code overflowing 64 bits is a 500 and never reaches the index."""
        index = AsyncMock(spec=MemoryIndex)
        app = create_app(ShortLinkService(index=index), config, logger=logger)

        async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://testserver") as client:
            response = await client.get("/" + "z" * 13)

        assert response.status_code == 500
        assert "out of range" in response.text
        index.lookup_id.assert_not_called()

    async def test_storage_error_on_shorten(self, config, logger, caplog):
        index = AsyncMock(spec=MemoryIndex)
        index.add_url.side_effect = StorageError("error adding shortlink to database", OSError("disk I/O error"))
        app = create_app(ShortLinkService(index=index), config, logger=logger)

        async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://testserver") as client:
            response = await client.get("/https://x.com")

        assert response.status_code == 500
        assert response.text == "error adding shortlink to database: disk I/O error\n"
        assert "[shortlinks:storage_error]" in caplog.text

    async def test_storage_error_on_resolve(self, config, logger):
        index = AsyncMock(spec=MemoryIndex)
        index.lookup_id.side_effect = StorageError("error resolving ID 1 to long URL in database")
        app = create_app(ShortLinkService(index=index), config, logger=logger)

        async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://testserver") as client:
            response = await client.get("/1")

        assert response.status_code == 500

    @pytest.mark.parametrize("path", ["/", "/ABC", "/abc/def", "/ftp://example.com", "/a-b"])
    async def test_unrouted_paths(self, client, path):
        response = await client.get(path)

        assert response.status_code == 404


class TestHealth:
    """Test GET /api/health."""

    async def test_health_check(self, client):
        response = await client.get("/api/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"] == "healthy"
        assert data["cache"] == "healthy"
        assert "timestamp" in data

    async def test_unhealthy_index(self, client, service):
        await service.index.close()

        response = await client.get("/api/health")

        assert response.status_code == 503
        assert response.json()["database"] == "unhealthy"
