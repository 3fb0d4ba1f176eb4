"""FastAPI application factory."""

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from shortlinks.common.logging_config import get_logger
from shortlinks.exceptions import ShortLinksError
from .routes import router, api_router
from .middleware.logging import LoggingMiddleware


def create_app(
    service_instance,
    config,
    logger: Optional[logging.Logger] = None,
    lifespan=None,
) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        service_instance: ShortLinkService, may be None when a lifespan sets it
        config: Configuration instance
        logger: Optional logger for request logging and error reports
        lifespan: Optional lifespan context manager

    Returns:
        Configured FastAPI app
    """
    logger = logger or get_logger("web")

    app = FastAPI(
        title="shortlinks",
        description="Shortens URLs to base36 codes and redirects them back",
        version="1.0.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
        lifespan=lifespan,
    )

    # Store instances in app state for access in routes
    app.state.service = service_instance
    app.state.config = config
    app.state.logger = logger

    app.add_middleware(LoggingMiddleware, logger=logger)

    @app.exception_handler(ShortLinksError)
    async def shortlinks_error_handler(request: Request, exc: ShortLinksError):
        """Answer with the error's status and a one-line plain text message."""
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed [{exc.error_code}]: {exc}")
        else:
            logger.info(f"{request.method} {request.url.path} rejected [{exc.error_code}]: {exc}")
        return PlainTextResponse(f"{exc}\n", status_code=exc.status_code)

    app.include_router(api_router, prefix="/api", tags=["API"])
    app.include_router(router)

    return app
