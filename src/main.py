"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8000
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.fv_cache.domain.cache import CacheProtocol
from src.fv_cache.provider import create_cache, get_cache
from src.fv_common.database import engine, get_db_session
from src.fv_common.errors import AppError, InternalError
from src.fv_common.redis_client import close_redis
from src.fv_common.response import error_response
from src.fv_feature.api.admin_router import router as admin_router
from src.fv_feature.api.router import router as feature_router
from src.fv_gateway.api.router import router as auth_router
from src.fv_gateway.api.router import users_router
from src.fv_gateway.middleware.rate_limit import RateLimitMiddleware
from src.fv_gateway.middleware.request_log import RequestLogMiddleware
from src.fv_vote.api.router import router as vote_router

VERSION = "0.1.0"

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: verify the DB connection. Shutdown: dispose pools."""
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    logger.info(
        "%s started (cache=%s, rate_limit=%s)",
        settings.APP_NAME,
        settings.CACHE_BACKEND if settings.CACHE_ENABLED else "none",
        settings.RATE_LIMIT_ENABLED,
    )
    yield
    await engine.dispose()
    await close_redis()


def create_app() -> FastAPI:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title=settings.APP_NAME,
        version=VERSION,
        lifespan=lifespan,
    )
    app.state.cache = create_cache(settings)

    # Last added runs first: RequestLog assigns request_id before the limiter responds.
    if settings.RATE_LIMIT_ENABLED:
        app.add_middleware(RateLimitMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLogMiddleware)

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        resp = error_response(exc.code, exc.message, request)
        return JSONResponse(
            status_code=exc.http_status,
            content=resp.model_dump(),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        err = InternalError()
        resp = error_response(err.code, err.message, request)
        return JSONResponse(status_code=err.http_status, content=resp.model_dump())

    app.include_router(auth_router, prefix="/api/v1")
    app.include_router(users_router, prefix="/api/v1")
    app.include_router(feature_router, prefix="/api/v1")
    app.include_router(vote_router, prefix="/api/v1")
    app.include_router(admin_router, prefix="/api/v1")

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok", "version": VERSION}

    @app.get("/ready")
    async def ready(
        db: AsyncSession = Depends(get_db_session),
        cache: CacheProtocol = Depends(get_cache),
    ) -> JSONResponse:
        checks = {"database": "ok", "cache": "ok"}
        try:
            await db.execute(text("SELECT 1"))
        except Exception:
            logger.warning("Readiness: database check failed", exc_info=True)
            checks["database"] = "error"
        # SafeCache reports backend failures as a False return
        if not await cache.set("ready:probe", "1", 5):
            checks["cache"] = "error"
        ok = all(v == "ok" for v in checks.values())
        return JSONResponse(
            status_code=200 if ok else 503,
            content={"status": "ready" if ok else "not_ready", "checks": checks},
        )

    return app


app = create_app()
