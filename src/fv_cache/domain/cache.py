"""Read-through cache contract, key scheme and TTL policy.

Cache-aside flow used by the services:
  - Read: cache.get(key) → on miss, query PostgreSQL → cache.set(key, payload, ttl)
  - Write: DB first (commit), then invalidate the affected keys

Key scheme (admin tooling greps keys by these prefixes — do not change):
  features:list:<statusOrAll>:<page>:<limit>:<sort>
  features:<featureId>
  votes:stats:<featureId>

Values are JSON-compatible payloads (dicts/lists/scalars), never ORM or domain objects.
"""

from typing import Any, Protocol


class CacheProtocol(Protocol):
    async def get(self, key: str) -> Any | None: ...

    async def set(self, key: str, value: Any, ttl_seconds: int | None = None) -> bool: ...

    async def delete(self, keys: str | list[str]) -> int: ...

    async def has(self, key: str) -> bool: ...

    async def list_keys(self) -> list[str]: ...

    async def clear(self) -> None: ...


FEATURES_LIST_PREFIX = "features:list:"
FEATURES_PREFIX = "features:"
VOTE_STATS_PREFIX = "votes:stats:"


class CacheKeys:
    @staticmethod
    def features_list(status: str | None, page: int, limit: int, sort: str | None) -> str:
        return f"{FEATURES_LIST_PREFIX}{status or 'all'}:{page}:{limit}:{sort or 'newest'}"

    @staticmethod
    def feature_by_id(feature_id: str) -> str:
        return f"{FEATURES_PREFIX}{feature_id}"

    @staticmethod
    def vote_stats(feature_id: str) -> str:
        return f"{VOTE_STATS_PREFIX}{feature_id}"


class CacheTTL:
    """Seconds. Shorter TTL for the more volatile aggregates."""

    FEATURES_LIST = 60
    FEATURE_BY_ID = 30
    VOTE_STATS = 10
