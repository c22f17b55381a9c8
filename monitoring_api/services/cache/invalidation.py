"""
Cache invalidation for product reads
"""

from typing import Optional

from ...core.settings import get_settings
from ...utils.logging import setup_api_logging
from . import PRODUCT_CACHE, PRODUCTS_CACHE, ResponseCache, make_cache_key

logger = setup_api_logging(
    "monitoring_api.cache.invalidation", log_level=get_settings().LOG_LEVEL
)


class CacheInvalidationService:
    """Service for cache invalidation"""

    def __init__(self, cache: ResponseCache):
        self.cache = cache

    async def invalidate_product_caches(self, product_id: Optional[int] = None) -> int:
        """Invalidate the product list and, when given, one product entry"""
        keys = [make_cache_key(PRODUCTS_CACHE)]
        if product_id is not None:
            keys.append(make_cache_key(PRODUCT_CACHE, product_id))

        total_invalidated = 0
        for key in keys:
            if await self.cache.invalidate(key):
                total_invalidated += 1

        logger.info(
            f"Invalidated {total_invalidated} product cache entries",
            extra={"product_id": product_id, "keys": keys},
        )
        return total_invalidated

    async def clear_all_cache(self) -> None:
        """Clear entire cache"""
        await self.cache.clear()
        logger.info("All cache cleared")
