"""Fixed-window rate limiting per client IP, counted in Redis.

    count = INCR ratelimit:<ip>
    if count == 1: EXPIRE ratelimit:<ip> <window>
    if count > limit: 429 RateLimitError (code 9001) with Retry-After

The client IP is the first X-Forwarded-For entry when present (reverse proxy),
else the socket peer. If Redis is unreachable the request is let through and a
warning is logged. Health probes are never limited.
"""

import logging
from collections.abc import Callable

import redis.asyncio as aioredis
from fastapi.responses import JSONResponse
from redis.exceptions import RedisError
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from config.settings import settings
from src.fv_common.errors import RateLimitError
from src.fv_common.redis_client import redis_pool
from src.fv_common.response import error_response

logger = logging.getLogger(__name__)

_EXEMPT_PATHS = frozenset({"/health", "/ready"})


def client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


class RateLimitMiddleware(BaseHTTPMiddleware):
    def __init__(
        self,
        app: ASGIApp,
        limit: int | None = None,
        window_seconds: int | None = None,
        redis_factory: Callable[[], aioredis.Redis] = redis_pool,
    ) -> None:
        super().__init__(app)
        self._limit = limit or settings.RATE_LIMIT_MAX
        self._window = window_seconds or settings.RATE_LIMIT_WINDOW_SECONDS
        self._redis_factory = redis_factory

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.url.path in _EXEMPT_PATHS:
            return await call_next(request)

        key = f"ratelimit:{client_ip(request)}"
        try:
            redis = self._redis_factory()
            count = await redis.incr(key)
            if count == 1:
                await redis.expire(key, self._window)
        except RedisError:
            logger.warning("Rate limiter unavailable, allowing request", exc_info=True)
            return await call_next(request)

        if count > self._limit:
            exc = RateLimitError()
            resp = error_response(exc.code, exc.message, request)
            return JSONResponse(
                status_code=exc.http_status,
                content=resp.model_dump(),
                headers={"Retry-After": str(self._window)},
            )
        return await call_next(request)
