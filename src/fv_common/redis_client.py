"""Redis client factory — used for rate limiting and, when CACHE_BACKEND=redis,
for the shared read-through cache.

Feature and vote state never lives only in Redis; PostgreSQL is the source of truth.
"""

import redis.asyncio as aioredis

from config.settings import settings

_redis_pool: aioredis.Redis | None = None


def redis_pool() -> aioredis.Redis:
    """Return the shared client, creating it on first use.

    from_url() does not connect; the first command does.
    """
    global _redis_pool  # noqa: PLW0603
    if _redis_pool is None:
        _redis_pool = aioredis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
        )
    return _redis_pool


async def close_redis() -> None:
    """Close the Redis connection pool."""
    global _redis_pool  # noqa: PLW0603
    if _redis_pool is not None:
        await _redis_pool.aclose()
        _redis_pool = None
