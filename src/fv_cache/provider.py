"""Cache construction and the FastAPI dependency that hands it to services.

The cache instance is owned by the application (app.state.cache, built in
create_app) and injected per request; services never import a global cache.
Tests override get_cache or build services with their own instance.
"""

from fastapi import Request

from config.settings import Settings
from src.fv_cache.domain.cache import CacheProtocol
from src.fv_cache.infrastructure.memory_cache import MemoryCache
from src.fv_cache.infrastructure.noop_cache import NoOpCache
from src.fv_cache.infrastructure.redis_cache import RedisCache
from src.fv_cache.infrastructure.safe_cache import SafeCache
from src.fv_common.redis_client import redis_pool


def create_cache(settings: Settings) -> SafeCache:
    """Build the configured backend, always wrapped in SafeCache."""
    backend: CacheProtocol
    if not settings.CACHE_ENABLED or settings.CACHE_BACKEND == "none":
        backend = NoOpCache()
    elif settings.CACHE_BACKEND == "memory":
        backend = MemoryCache(
            default_ttl=settings.CACHE_TTL_SECONDS,
            maxsize=settings.CACHE_MAX_ENTRIES,
        )
    elif settings.CACHE_BACKEND == "redis":
        backend = RedisCache(
            redis_pool(),
            key_prefix=settings.CACHE_KEY_PREFIX,
            default_ttl=settings.CACHE_TTL_SECONDS,
        )
    else:
        raise ValueError(
            f"Unknown CACHE_BACKEND {settings.CACHE_BACKEND!r}; expected memory, redis or none"
        )
    return SafeCache(backend)


def get_cache(request: Request) -> CacheProtocol:
    """FastAPI dependency: the application's cache instance."""
    return request.app.state.cache
