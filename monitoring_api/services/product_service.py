"""Product service for business logic"""

import asyncio
from typing import Awaitable, List, Optional, TypeVar

from ..core.exceptions import ProductNotFoundError
from ..core.settings import get_settings
from ..events.schemas import (
    PRODUCT_CREATED,
    PRODUCT_VIEWED,
    PRODUCTS_REQUESTED,
    TelemetryBatch,
)
from ..repository.product_repository import ProductStore
from ..schemas.product import ProductCreate, ProductResponse
from ..utils.logging import setup_api_logging as setup_logging
from .cache import PRODUCT_CACHE, PRODUCTS_CACHE, ResponseCache, make_cache_key
from .cache.invalidation import CacheInvalidationService

logger = setup_logging("monitoring_api.product_service", log_level=get_settings().LOG_LEVEL)

T = TypeVar("T")


class ProductService:
    """
    Request handling for products.

    Store reads are bounded by ``store_timeout``; saves run to completion. Telemetry is never sent from
    here: it is recorded into the caller's ``TelemetryBatch`` and delivered
    once the request is done.
    """

    def __init__(
        self,
        store: ProductStore,
        cache: Optional[ResponseCache] = None,
        store_timeout: Optional[float] = None,
        cache_ttl: Optional[int] = None,
        telemetry_on_cache_hit: bool = False,
        invalidate_on_write: bool = False,
    ):
        self.store = store
        self.cache = cache
        self.store_timeout = store_timeout
        self.cache_ttl = cache_ttl
        self.telemetry_on_cache_hit = telemetry_on_cache_hit
        self.invalidate_on_write = invalidate_on_write

    async def _call_store(self, call: Awaitable[T]) -> T:
        if self.store_timeout is None:
            return await call
        return await asyncio.wait_for(call, timeout=self.store_timeout)

    async def _cached(self, key: str) -> Optional[object]:
        if self.cache is None:
            return None
        return await self.cache.get(key)

    async def list_products(self, telemetry: TelemetryBatch) -> List[ProductResponse]:
        """Get all products, served from cache when possible"""
        key = make_cache_key(PRODUCTS_CACHE)
        cached = await self._cached(key)
        if cached is not None:
            logger.debug("Product list served from cache", extra={"cache_key": key})
            if self.telemetry_on_cache_hit:
                telemetry.track_event(PRODUCTS_REQUESTED, {"operation": "getAllProducts"})
            return cached  # type: ignore[return-value]

        logger.info(
            "Fetching all products",
            extra={"correlation_id": telemetry.correlation_id},
        )
        telemetry.track_event(PRODUCTS_REQUESTED, {"operation": "getAllProducts"})

        products = await self._call_store(self.store.find_all())
        result = [ProductResponse.model_validate(p) for p in products]

        logger.info(
            f"Found {len(result)} products",
            extra={"count": len(result), "correlation_id": telemetry.correlation_id},
        )

        if self.cache is not None:
            await self.cache.put(key, result, self.cache_ttl)
        return result

    async def get_product(
        self, product_id: int, telemetry: TelemetryBatch
    ) -> Optional[ProductResponse]:
        """Get product by ID, None when the store has no such product"""
        key = make_cache_key(PRODUCT_CACHE, product_id)
        cached = await self._cached(key)
        if cached is not None:
            logger.debug("Product served from cache", extra={"cache_key": key})
            if self.telemetry_on_cache_hit:
                telemetry.track_event(
                    PRODUCT_VIEWED,
                    {"productId": str(product_id), "productName": cached.name},  # type: ignore[attr-defined]
                )
            return cached  # type: ignore[return-value]

        logger.info(
            f"Fetching product with id: {product_id}",
            extra={"product_id": product_id, "correlation_id": telemetry.correlation_id},
        )

        product = await self._call_store(self.store.find_by_id(product_id))
        if product is None:
            logger.warning(
                f"Product not found: {product_id}",
                extra={"product_id": product_id, "correlation_id": telemetry.correlation_id},
            )
            telemetry.track_exception(ProductNotFoundError(product_id))
            return None

        telemetry.track_event(
            PRODUCT_VIEWED,
            {"productId": str(product_id), "productName": product.name},
        )
        result = ProductResponse.model_validate(product)

        if self.cache is not None:
            await self.cache.put(key, result, self.cache_ttl)
        return result

    async def create_product(
        self, product_data: ProductCreate, telemetry: TelemetryBatch
    ) -> ProductResponse:
        """Persist a new product; the store assigns its id"""
        logger.info(
            f"Creating new product: {product_data.name}",
            extra={"correlation_id": telemetry.correlation_id},
        )

        # Not bounded: cancelling after the commit would report a failure
        # for a row that was already persisted
        saved = await self.store.save(product_data)

        telemetry.track_event(
            PRODUCT_CREATED,
            {"productId": str(saved.id), "productName": saved.name},
        )

        logger.info(
            "Product created successfully",
            extra={"product_id": saved.id, "correlation_id": telemetry.correlation_id},
        )

        if self.invalidate_on_write and self.cache is not None:
            await CacheInvalidationService(self.cache).invalidate_product_caches()

        return ProductResponse.model_validate(saved)
