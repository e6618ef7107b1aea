"""In-process TTL cache — default backend, built on cachetools.TLRUCache.

Each entry carries its own TTL (lists 60 s, features 30 s, stats 10 s), so the
store is a TLRUCache whose time-to-use function reads the TTL stored alongside
the value. cachetools drops expired entries on access and on every insert;
when maxsize is reached the entry closest to expiry is evicted first.

cachetools is not thread-safe, so every call goes through a threading.Lock.
Values are deep-copied on the way in and out so callers can never mutate a
cached payload in place.
"""

import copy
import threading
import time
from collections.abc import Callable
from typing import Any

from cachetools import TLRUCache

_MISSING = object()


def _expires_at(key: str, entry: tuple[float, Any], now: float) -> float:
    ttl, _ = entry
    return now + ttl


class MemoryCache:
    def __init__(
        self,
        default_ttl: int = 60,
        maxsize: int = 10_000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._default_ttl = default_ttl
        self._data: TLRUCache = TLRUCache(maxsize=maxsize, ttu=_expires_at, timer=clock)
        self._lock = threading.Lock()

    async def get(self, key: str) -> Any | None:
        with self._lock:
            entry = self._data.get(key)
        if entry is None:
            return None
        return copy.deepcopy(entry[1])

    async def set(self, key: str, value: Any, ttl_seconds: int | None = None) -> bool:
        ttl = self._default_ttl if ttl_seconds is None else ttl_seconds
        entry = (ttl, copy.deepcopy(value))
        with self._lock:
            if ttl <= 0:
                # TLRUCache skips already-expired inserts; drop any older value
                self._data.pop(key, None)
            else:
                self._data[key] = entry
        return True

    async def delete(self, keys: str | list[str]) -> int:
        if isinstance(keys, str):
            keys = [keys]
        removed = 0
        with self._lock:
            for key in keys:
                if self._data.pop(key, _MISSING) is not _MISSING:
                    removed += 1
        return removed

    async def has(self, key: str) -> bool:
        with self._lock:
            return key in self._data

    async def list_keys(self) -> list[str]:
        with self._lock:
            self._data.expire()
            return list(self._data)

    async def clear(self) -> None:
        with self._lock:
            self._data.clear()
