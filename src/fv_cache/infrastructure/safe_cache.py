"""Failure-absorbing wrapper around any cache backend.

A cache problem (Redis down, value not serializable, ...) must never fail a request
that PostgreSQL can answer, so every backend exception is logged and turned into
the neutral result for that call: a miss, a failed set, nothing deleted.
"""

import logging
from typing import Any

from src.fv_cache.domain.cache import CacheProtocol

logger = logging.getLogger(__name__)


class SafeCache:
    def __init__(self, backend: CacheProtocol) -> None:
        self._backend = backend

    @property
    def backend(self) -> CacheProtocol:
        return self._backend

    async def get(self, key: str) -> Any | None:
        try:
            return await self._backend.get(key)
        except Exception:
            logger.warning("Cache get failed, treating as miss: key=%s", key, exc_info=True)
            return None

    async def set(self, key: str, value: Any, ttl_seconds: int | None = None) -> bool:
        try:
            return await self._backend.set(key, value, ttl_seconds)
        except Exception:
            logger.warning("Cache set failed, value not cached: key=%s", key, exc_info=True)
            return False

    async def delete(self, keys: str | list[str]) -> int:
        try:
            return await self._backend.delete(keys)
        except Exception:
            logger.warning("Cache delete failed: keys=%s", keys, exc_info=True)
            return 0

    async def has(self, key: str) -> bool:
        try:
            return await self._backend.has(key)
        except Exception:
            logger.warning("Cache has failed: key=%s", key, exc_info=True)
            return False

    async def list_keys(self) -> list[str]:
        try:
            return await self._backend.list_keys()
        except Exception:
            logger.warning("Cache list_keys failed", exc_info=True)
            return []

    async def clear(self) -> None:
        try:
            await self._backend.clear()
        except Exception:
            logger.warning("Cache clear failed", exc_info=True)
