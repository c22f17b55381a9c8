from unittest.mock import patch

import pytest

from monitoring_api.services.cache import InMemoryCache, make_cache_key
from monitoring_api.services.cache.invalidation import CacheInvalidationService


class TestCacheKeys:
    def test_operation_only(self):
        assert make_cache_key("products") == "products"

    def test_operation_with_param(self):
        assert make_cache_key("product", 7) == "product:7"


class TestInMemoryCache:
    @pytest.fixture
    def cache(self):
        return InMemoryCache(max_size=3, default_ttl=60)

    @pytest.mark.asyncio
    async def test_put_then_get(self, cache):
        await cache.put("products", ["a"])
        assert await cache.get("products") == ["a"]

    @pytest.mark.asyncio
    async def test_none_values_are_not_stored(self, cache):
        await cache.put("product:1", None)
        assert "product:1" not in cache.cache

    @pytest.mark.asyncio
    async def test_empty_list_is_stored(self, cache):
        await cache.put("products", [])
        assert await cache.get("products") == []

    @pytest.mark.asyncio
    async def test_expired_entry_is_dropped(self, cache):
        with patch("monitoring_api.services.cache.time") as mock_time:
            mock_time.time.return_value = 1000.0
            await cache.put("products", ["a"], ttl=10)
            mock_time.time.return_value = 1011.0
            assert await cache.get("products") is None
        assert "products" not in cache.cache

    @pytest.mark.asyncio
    async def test_invalidate(self, cache):
        await cache.put("products", ["a"])
        assert await cache.invalidate("products") is True
        assert await cache.invalidate("products") is False
        assert await cache.get("products") is None

    @pytest.mark.asyncio
    async def test_size_bound_evicts_oldest(self, cache):
        await cache.put("product:1", "one")
        await cache.put("product:2", "two")
        await cache.put("product:3", "three")
        cache.cache["product:1"]["created_at"] = 1.0
        cache.cache["product:2"]["created_at"] = 2.0
        cache.cache["product:3"]["created_at"] = 3.0

        await cache.put("product:4", "four")

        assert len(cache.cache) == 3
        assert "product:1" not in cache.cache
        assert "product:4" in cache.cache

    @pytest.mark.asyncio
    async def test_zero_size_stores_nothing(self):
        cache = InMemoryCache(max_size=0)

        await cache.put("products", [])

        assert cache.cache == {}
        assert await cache.get("products") is None

    @pytest.mark.asyncio
    async def test_stats_track_hits_and_misses(self, cache):
        await cache.put("products", ["a"])
        await cache.get("products")
        await cache.get("product:9")

        stats = cache.get_stats()
        assert stats["hits"] == 1
        assert stats["misses"] == 1
        assert stats["hit_rate"] == 0.5
        assert stats["entries"] == 1


class TestCacheInvalidationService:
    @pytest.mark.asyncio
    async def test_invalidate_product_caches(self):
        cache = InMemoryCache()
        await cache.put("products", ["a"])
        await cache.put("product:1", "one")
        await cache.put("product:2", "two")

        count = await CacheInvalidationService(cache).invalidate_product_caches(1)

        assert count == 2
        assert await cache.get("product:2") == "two"
        assert await cache.get("products") is None

    @pytest.mark.asyncio
    async def test_clear_all_cache(self):
        cache = InMemoryCache()
        await cache.put("products", ["a"])

        await CacheInvalidationService(cache).clear_all_cache()

        assert cache.cache == {}
