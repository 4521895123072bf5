import logging
from contextlib import asynccontextmanager
from datetime import timedelta
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from preview_api.api import api_router
from preview_api.config import Settings, get_settings
from preview_api.database import create_engine, create_session_factory, init_db
from preview_api.exceptions import InvalidURL, NoMetadataFound
from preview_api.ratelimit import FixedWindowRateLimiter, RateLimitMiddleware
from preview_api.services.cache import CacheGateway
from preview_api.services.metadata import MetadataService
from preview_api.services.rendered import RenderedFetcher
from preview_api.services.static import StaticFetcher, create_http_client

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = (
    "Internal server error. Please open an issue if the problem persists."
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the extraction pipeline on startup and release it on shutdown."""
    settings: Settings = app.state.settings
    client = create_http_client(settings)
    engine = None
    cache = None
    if settings.cache_enabled:
        engine = create_engine(settings)
        try:
            await init_db(engine)
        except (SQLAlchemyError, OSError):
            logger.warning("Could not prepare the cache table", exc_info=True)
        cache = CacheGateway(
            create_session_factory(engine),
            retention=timedelta(days=settings.cache_retention_days),
        )

    app.state.metadata_service = MetadataService(
        StaticFetcher(client), RenderedFetcher(settings), cache
    )
    try:
        yield
    finally:
        await client.aclose()
        if engine is not None:
            await engine.dispose()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    app.state.settings = settings
    app.include_router(api_router)

    app.add_middleware(
        RateLimitMiddleware,
        limiter=FixedWindowRateLimiter(
            settings.rate_limit_total, settings.rate_limit_window_seconds
        ),
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_methods=["GET"],
    )

    @app.middleware("http")
    async def cache_control(request: Request, call_next):
        response = await call_next(request)
        response.headers["Cache-Control"] = "public"
        return response

    @app.exception_handler(InvalidURL)
    async def invalid_url_handler(request: Request, exc: InvalidURL) -> JSONResponse:
        return JSONResponse(status_code=400, content={"error": "Invalid URL"})

    @app.exception_handler(NoMetadataFound)
    async def not_found_handler(request: Request, exc: NoMetadataFound) -> JSONResponse:
        return JSONResponse(status_code=404, content={"metadata": None})

    @app.exception_handler(Exception)
    async def internal_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error("Unhandled error on %s", request.url.path, exc_info=exc)
        return JSONResponse(status_code=500, content={"error": INTERNAL_ERROR_MESSAGE})

    @app.get("/health", tags=["system"])
    async def healthcheck() -> dict[str, str]:
        return {"status": "ok", "app": settings.app_name}

    return app


app = create_app()


def run() -> None:
    settings = get_settings()
    uvicorn.run("preview_api.main:app", host=settings.host, port=settings.port)
