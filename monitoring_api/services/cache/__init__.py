"""
Response cache for the Monitoring Lab API
"""

import time
from abc import ABC, abstractmethod
from typing import Any, Dict, Hashable, Optional

from ...core.settings import get_settings
from ...utils.logging import setup_api_logging

logger = setup_api_logging("monitoring_api.cache", log_level=get_settings().LOG_LEVEL)

PRODUCTS_CACHE = "products"
PRODUCT_CACHE = "product"


def make_cache_key(operation: str, param: Optional[Hashable] = None) -> str:
    """Derive the cache key for an operation and its optional parameter"""
    if param is None:
        return operation
    return f"{operation}:{param}"


class ResponseCache(ABC):
    """Keyed read-through cache consulted by the request handler"""

    @abstractmethod
    async def get(self, key: str) -> Optional[Any]:
        """Get value from cache, None on miss"""

    @abstractmethod
    async def put(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        """Store a non-null value"""

    @abstractmethod
    async def invalidate(self, key: str) -> bool:
        """Drop one key, returning whether it was present"""

    @abstractmethod
    async def clear(self) -> None:
        """Drop every entry"""


class InMemoryCache(ResponseCache):
    """Simple in-memory cache with TTL support"""

    def __init__(self, max_size: int = 1000, default_ttl: int = 300):
        self.cache: Dict[str, Dict[str, Any]] = {}
        self.max_size = max_size
        self.default_ttl = default_ttl
        self.hits = 0
        self.misses = 0

    async def get(self, key: str) -> Optional[Any]:
        if key in self.cache:
            entry = self.cache[key]
            if time.time() < entry["expires_at"]:
                self.hits += 1
                return entry["value"]
            # Expired, remove it
            del self.cache[key]
        self.misses += 1
        return None

    async def put(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        if value is None or self.max_size <= 0:
            return

        if key not in self.cache and len(self.cache) >= self.max_size:
            await self._cleanup_expired()
            if len(self.cache) >= self.max_size:
                self._evict_oldest()

        now = time.time()
        self.cache[key] = {
            "value": value,
            "expires_at": now + (self.default_ttl if ttl is None else ttl),
            "created_at": now,
        }

    async def invalidate(self, key: str) -> bool:
        return self.cache.pop(key, None) is not None

    async def clear(self) -> None:
        self.cache.clear()

    async def _cleanup_expired(self) -> None:
        """Remove expired entries"""
        current_time = time.time()
        expired_keys = [
            key
            for key, entry in self.cache.items()
            if current_time >= entry["expires_at"]
        ]
        for key in expired_keys:
            del self.cache[key]

    def _evict_oldest(self) -> None:
        oldest = min(self.cache, key=lambda k: self.cache[k]["created_at"])
        del self.cache[oldest]
        logger.debug("Evicted cache entry", extra={"cache_key": oldest})

    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics"""
        current_time = time.time()
        expired_count = sum(
            1 for entry in self.cache.values() if current_time >= entry["expires_at"]
        )
        lookups = self.hits + self.misses

        return {
            "entries": len(self.cache),
            "expired_entries": expired_count,
            "active_entries": len(self.cache) - expired_count,
            "max_size": self.max_size,
            "hits": self.hits,
            "misses": self.misses,
            "hit_rate": round(self.hits / lookups, 4) if lookups else 0,
        }


__all__ = [
    "PRODUCTS_CACHE",
    "PRODUCT_CACHE",
    "InMemoryCache",
    "ResponseCache",
    "make_cache_key",
]
