"""
FastAPI dependency injection for the Monitoring Lab API

Collaborators live on ``app.state`` and are handed to the service through
its constructor.
"""

from typing import AsyncGenerator, Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import DatabaseManager
from ..core.settings import ApiSettings
from ..events.dispatcher import TelemetryDispatcher
from ..events.schemas import TelemetryBatch
from ..repository.product_repository import ProductRepository
from ..services.cache import ResponseCache
from ..services.product_service import ProductService

# =====================================================
# APPLICATION STATE DEPENDENCIES
# =====================================================


def get_app_settings(request: Request) -> ApiSettings:
    return request.app.state.settings


def get_response_cache(request: Request) -> Optional[ResponseCache]:
    return request.app.state.response_cache


def get_telemetry_dispatcher(request: Request) -> TelemetryDispatcher:
    return request.app.state.telemetry_dispatcher


# =====================================================
# DATABASE DEPENDENCIES
# =====================================================


async def get_async_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Provide async database session"""
    database_manager: DatabaseManager = request.app.state.database_manager
    async with database_manager.async_session_maker() as session:
        yield session


# =====================================================
# REQUEST CONTEXT DEPENDENCIES
# =====================================================


def get_correlation_id(request: Request) -> Optional[str]:
    """Extract correlation ID from request headers or state"""
    correlation_id = (
        request.headers.get("X-Correlation-ID")
        or request.headers.get("correlation-id")
        or request.headers.get("x-request-id")
    )

    # Fallback to request state (from middleware)
    if not correlation_id:
        correlation_id = getattr(request.state, "correlation_id", None)

    return correlation_id


async def get_telemetry_batch(
    correlation_id: Optional[str] = Depends(get_correlation_id),
    dispatcher: TelemetryDispatcher = Depends(get_telemetry_dispatcher),
) -> AsyncGenerator[TelemetryBatch, None]:
    """Per-request telemetry batch, handed to the dispatcher when the request ends"""
    batch = TelemetryBatch(correlation_id=correlation_id)
    try:
        yield batch
    finally:
        dispatcher.dispatch(batch)


# =====================================================
# SERVICE DEPENDENCIES
# =====================================================


def get_product_service(
    session: AsyncSession = Depends(get_async_session),
    cache: Optional[ResponseCache] = Depends(get_response_cache),
    settings: ApiSettings = Depends(get_app_settings),
) -> ProductService:
    """Provide ProductService instance with its store and cache"""
    return ProductService(
        store=ProductRepository(session),
        cache=cache,
        store_timeout=settings.STORE_TIMEOUT_SECONDS,
        cache_ttl=settings.CACHE_TTL_DEFAULT,
        telemetry_on_cache_hit=settings.TELEMETRY_ON_CACHE_HIT,
        invalidate_on_write=settings.CACHE_INVALIDATE_ON_WRITE,
    )


# =====================================================
# COMMON DEPENDENCY ALIASES
# =====================================================

SettingsDep = Depends(get_app_settings)
TelemetryDep = Depends(get_telemetry_batch)
ProductServiceDep = Depends(get_product_service)
