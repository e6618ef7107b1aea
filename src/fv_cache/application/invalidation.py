"""Coarse-grained cache invalidation shared by the feature and vote services.

There is no cheap way to know which list pages embed a given feature (a vote can
move it across pages when sorted by votes), so every write drops ALL list pages.
Over-invalidation is acceptable; serving a pre-write value is not.
"""

import logging

from src.fv_cache.domain.cache import (
    FEATURES_LIST_PREFIX,
    FEATURES_PREFIX,
    CacheKeys,
    CacheProtocol,
)

logger = logging.getLogger(__name__)


class CacheInvalidator:
    def __init__(self, cache: CacheProtocol) -> None:
        self._cache = cache

    async def _delete_by_prefix(self, prefix: str) -> int:
        keys = [k for k in await self._cache.list_keys() if k.startswith(prefix)]
        if not keys:
            return 0
        return await self._cache.delete(keys)

    async def feature_lists(self) -> int:
        """Drop every cached features:list:* page."""
        return await self._delete_by_prefix(FEATURES_LIST_PREFIX)

    async def feature(self, feature_id: str) -> int:
        """A feature changed (status, deletion, vote_count): its entry and all lists."""
        removed = await self._cache.delete(CacheKeys.feature_by_id(feature_id))
        removed += await self.feature_lists()
        return removed

    async def votes(self, feature_id: str) -> int:
        """A vote on the feature changed: its stats plus everything feature() drops."""
        removed = await self._cache.delete(CacheKeys.vote_stats(feature_id))
        removed += await self.feature(feature_id)
        logger.debug("Invalidated %d cache entries for feature %s", removed, feature_id)
        return removed

    async def all_features(self) -> int:
        """Drop every features:* entry (single features and list pages)."""
        return await self._delete_by_prefix(FEATURES_PREFIX)
