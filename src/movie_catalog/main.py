"""ASGI application: routers, startup checks, the ingestion schedule and error bodies."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from movie_catalog import __version__
from movie_catalog.api import api_router
from movie_catalog.config import get_settings
from movie_catalog.scheduler import start_jobs, stop_jobs
from movie_catalog.services.base import APIError, NotFoundError, RateLimitError

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    logger.info(
        "Starting %s v%s (debug=%s, database=%s, TMDB %s)",
        settings.app_name,
        __version__,
        settings.debug,
        settings.database_url.split("///")[-1],
        "configured" if settings.tmdb_api_key else "NOT CONFIGURED",
    )
    for warning in settings.validate_runtime_config():
        logger.warning("Configuration: %s", warning)

    if settings.ingestion_possible:
        start_jobs()
    else:
        logger.info("New release ingestion is not scheduled")

    try:
        yield
    finally:
        stop_jobs()
        logger.info("Application shutting down")


app = FastAPI(
    title=settings.app_name,
    version=__version__,
    debug=settings.debug,
    lifespan=lifespan,
)

# Status for upstream failures that escape a route; most routes report them in the envelope
UPSTREAM_STATUS: dict[type[APIError], int] = {
    NotFoundError: 404,
    RateLimitError: 429,
    APIError: 502,
}


async def upstream_error_handler(_request: Request, exc: APIError) -> JSONResponse:
    """Answer an escaped upstream error with the ``{"success": false}`` body."""
    headers = {}
    if isinstance(exc, RateLimitError) and exc.retry_after:
        headers["Retry-After"] = str(exc.retry_after)
    status_code = UPSTREAM_STATUS.get(type(exc), 502)
    if status_code == 502:
        logger.warning("Upstream error reached the client: %s", exc)
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": str(exc) or "External API error"},
        headers=headers or None,
    )


for error_type in UPSTREAM_STATUS:
    app.add_exception_handler(error_type, upstream_error_handler)

app.include_router(api_router)


@app.get("/health")
async def health_check() -> dict[str, str]:
    return {"status": "healthy", "version": __version__}
