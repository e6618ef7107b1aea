"""No-op cache — used when caching is disabled (CACHE_ENABLED=false or
CACHE_BACKEND=none) and in tests that must hit the repository every time.

Same contract as every other backend: get always misses, set reports success,
delete removes nothing.
"""

from typing import Any


class NoOpCache:
    async def get(self, key: str) -> Any | None:
        return None

    async def set(self, key: str, value: Any, ttl_seconds: int | None = None) -> bool:
        return True

    async def delete(self, keys: str | list[str]) -> int:
        return 0

    async def has(self, key: str) -> bool:
        return False

    async def list_keys(self) -> list[str]:
        return []

    async def clear(self) -> None:
        return None
