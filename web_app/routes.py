"""Request dispatcher.

A request path is either an absolute URL to shorten (``/https://...``) or a
short code to resolve (``/1a2b``). Anything else is left to the framework's
default 404.
"""

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse, PlainTextResponse, RedirectResponse
from starlette.convertors import Convertor, register_url_convertor

from shortlinks.common.url_builder import build_base_url, build_short_url
from .schemas import HealthResponse


class ShortCodeConvertor(Convertor):
    """Path convertor matching the alphabet short codes are emitted in."""

    regex = "[a-z0-9]+"

    def convert(self, value: str) -> str:
        return value

    def to_string(self, value: str) -> str:
        return value


# must be registered before any route below is compiled
register_url_convertor("shortcode", ShortCodeConvertor())

router = APIRouter()
api_router = APIRouter()


def request_target(request: Request) -> str:
    """Return the request target without its leading slash.

    The raw path is used so the URL to shorten keeps its original
    percent-encoding, and the query string belongs to the long URL.
    """
    raw_path = request.scope.get("raw_path")
    path = raw_path.decode("latin-1") if raw_path else request.url.path
    # some servers leave the query in raw_path
    target = path.split("?", 1)[0][1:]

    query = request.url.query
    if query:
        target = f"{target}?{query}"
    return target


@router.api_route("/http://{target:path}", methods=["GET", "POST"], include_in_schema=False)
@router.api_route("/https://{target:path}", methods=["GET", "POST"], include_in_schema=False)
async def shorten(request: Request):
    """Add the URL in the request path to the index and answer with its short URL."""
    service = request.app.state.service
    config = request.app.state.config

    result = await service.shorten(request_target(request))

    base_url = build_base_url(
        headers=request.headers,
        fallback_base_url=config.base_url,
        request_scheme=request.url.scheme,
        request_host=request.headers.get("host"),
    )
    short_url = build_short_url(
        short_code=result.short_code,
        base_url=base_url,
        path_prefix=config.path_prefix,
    )

    return PlainTextResponse(f"{short_url}\n")


@router.api_route("/{short_code:shortcode}", methods=["GET", "HEAD"], include_in_schema=False)
async def resolve(request: Request, short_code: str):
    """Redirect to the long URL a short code points to."""
    service = request.app.state.service

    long_url = await service.resolve(short_code)

    return RedirectResponse(url=long_url, status_code=status.HTTP_302_FOUND)


@api_router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Check if the index (and cache, when configured) are reachable.",
)
async def health_check(request: Request):
    """Health check endpoint for load balancers and monitoring."""
    service = request.app.state.service

    health = await service.health_check()

    body = HealthResponse(
        status="healthy" if health["overall"] else "unhealthy",
        database="healthy" if health["database"] else "unhealthy",
        cache="healthy" if health["cache"] else "unhealthy",
    )
    status_code = status.HTTP_200_OK if health["overall"] else status.HTTP_503_SERVICE_UNAVAILABLE
    return JSONResponse(content=body.model_dump(mode="json"), status_code=status_code)
