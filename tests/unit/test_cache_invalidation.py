# tests/unit/test_cache_invalidation.py
"""Unit tests for the cache key scheme and CacheInvalidator."""
import pytest

from src.fv_cache.application.invalidation import CacheInvalidator
from src.fv_cache.domain.cache import CacheKeys, CacheTTL
from src.fv_cache.infrastructure.memory_cache import MemoryCache
from src.fv_cache.infrastructure.noop_cache import NoOpCache


class TestCacheKeys:
    def test_list_key_format(self):
        assert CacheKeys.features_list("pending", 2, 20, "votes") == "features:list:pending:2:20:votes"

    def test_list_key_defaults(self):
        assert CacheKeys.features_list(None, 1, 10, None) == "features:list:all:1:10:newest"

    def test_feature_key(self):
        assert CacheKeys.feature_by_id("abc") == "features:abc"

    def test_vote_stats_key(self):
        assert CacheKeys.vote_stats("abc") == "votes:stats:abc"

    def test_ttls(self):
        assert (CacheTTL.FEATURES_LIST, CacheTTL.FEATURE_BY_ID, CacheTTL.VOTE_STATS) == (60, 30, 10)


@pytest.fixture
async def populated() -> MemoryCache:
    mem = MemoryCache()
    for key in (
        "features:list:all:1:10:newest",
        "features:list:pending:1:10:votes",
        "features:f1",
        "features:f2",
        "votes:stats:f1",
        "votes:stats:f2",
        "unrelated",
    ):
        await mem.set(key, {"cached": key}, 60)
    return mem


class TestCacheInvalidator:
    async def test_feature_lists_drops_only_list_pages(self, populated):
        removed = await CacheInvalidator(populated).feature_lists()
        assert removed == 2
        assert sorted(await populated.list_keys()) == [
            "features:f1", "features:f2", "unrelated", "votes:stats:f1", "votes:stats:f2",
        ]

    async def test_feature_drops_entry_and_lists(self, populated):
        removed = await CacheInvalidator(populated).feature("f1")
        assert removed == 3
        keys = await populated.list_keys()
        assert "features:f1" not in keys
        assert "features:f2" in keys
        assert "votes:stats:f1" in keys

    async def test_votes_also_drops_stats(self, populated):
        removed = await CacheInvalidator(populated).votes("f1")
        assert removed == 4
        assert sorted(await populated.list_keys()) == [
            "features:f2", "unrelated", "votes:stats:f2",
        ]

    async def test_all_features(self, populated):
        await CacheInvalidator(populated).all_features()
        assert sorted(await populated.list_keys()) == [
            "unrelated", "votes:stats:f1", "votes:stats:f2",
        ]

    async def test_nothing_cached_is_fine(self):
        assert await CacheInvalidator(MemoryCache()).votes("f1") == 0

    async def test_works_with_noop_cache(self):
        assert await CacheInvalidator(NoOpCache()).votes("f1") == 0
