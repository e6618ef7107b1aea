"""Redis-backed cache (CACHE_BACKEND=redis).

Values are stored as JSON strings with SET ... EX. Every key is namespaced with
key_prefix so list_keys()/clear() only ever touch this service's entries; the
prefix is stripped again before keys are returned to callers.

Redis has no pattern delete, so list_keys() walks SCAN (never KEYS, which blocks
the server) and callers filter by prefix the same way as with MemoryCache.
"""

import json
from typing import Any

import redis.asyncio as aioredis


class RedisCache:
    def __init__(
        self,
        client: aioredis.Redis,
        key_prefix: str = "fv:",
        default_ttl: int = 60,
    ) -> None:
        self._client = client
        self._prefix = key_prefix
        self._default_ttl = default_ttl

    def _k(self, key: str) -> str:
        return f"{self._prefix}{key}"

    async def get(self, key: str) -> Any | None:
        raw = await self._client.get(self._k(key))
        if raw is None:
            return None
        return json.loads(raw)

    async def set(self, key: str, value: Any, ttl_seconds: int | None = None) -> bool:
        ttl = self._default_ttl if ttl_seconds is None else ttl_seconds
        payload = json.dumps(value)
        result = await self._client.set(self._k(key), payload, ex=ttl)
        return bool(result)

    async def delete(self, keys: str | list[str]) -> int:
        if isinstance(keys, str):
            keys = [keys]
        if not keys:
            return 0
        return int(await self._client.delete(*(self._k(k) for k in keys)))

    async def has(self, key: str) -> bool:
        return bool(await self._client.exists(self._k(key)))

    async def list_keys(self) -> list[str]:
        start = len(self._prefix)
        return [k[start:] async for k in self._client.scan_iter(match=f"{self._prefix}*")]

    async def clear(self) -> None:
        keys = [k async for k in self._client.scan_iter(match=f"{self._prefix}*")]
        if keys:
            await self._client.delete(*keys)
