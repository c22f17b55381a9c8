"""
Monitoring Lab API FastAPI Application
======================================

Application entry point. Serves health and product endpoints under ``/api``,
with a response cache on reads and best-effort telemetry for every request.
"""

import time
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.health import router as health_router
from .api.products import router as products_router
from .core.database import DatabaseManager, create_database_manager
from .core.event_management import close_events, create_event_sink, init_events
from .core.settings import ApiSettings, get_settings
from .events.base import EventSink
from .events.dispatcher import TelemetryDispatcher
from .middleware.error import setup_error_handling
from .middleware.logging import setup_request_logging_middleware
from .services.cache import InMemoryCache, ResponseCache
from .utils.logging import setup_api_logging

settings = get_settings()
enable_file_logging = settings.ENVIRONMENT.lower() in ["production", "staging"]

logger = setup_api_logging(
    "monitoring_api",
    log_level=settings.LOG_LEVEL,
    enable_file_logging=enable_file_logging,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan context manager for startup and shutdown."""
    startup_start = time.time()

    try:
        await app.state.database_manager.create_tables()
        await init_events(app.state.event_sink)
    except Exception as e:
        logger.error(
            "Failed to start service",
            exc_info=True,
            extra={
                "startup_duration_ms": int((time.time() - startup_start) * 1000),
                "error_type": type(e).__name__,
            },
        )
        raise

    logger.info(
        "Service started successfully",
        extra={
            "total_startup_duration_ms": int((time.time() - startup_start) * 1000),
            "environment": app.state.settings.ENVIRONMENT,
            "service_version": app.state.settings.APP_VERSION,
        },
    )

    yield

    shutdown_start = time.time()
    logger.info("Starting service shutdown")
    await app.state.telemetry_dispatcher.drain()
    await close_events(app.state.event_sink)
    await app.state.database_manager.close()
    logger.info(
        "Service shutdown completed",
        extra={"shutdown_duration_ms": int((time.time() - shutdown_start) * 1000)},
    )


def create_app(
    app_settings: Optional[ApiSettings] = None,
    event_sink: Optional[EventSink] = None,
    response_cache: Optional[ResponseCache] = None,
    database_manager: Optional[DatabaseManager] = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    app_settings = app_settings or settings

    app = FastAPI(
        title=app_settings.APP_NAME,
        version=app_settings.APP_VERSION,
        debug=app_settings.DEBUG,
        lifespan=lifespan,
        openapi_url="/openapi.json" if app_settings.DEBUG else None,
        docs_url="/docs" if app_settings.DEBUG else None,
        redoc_url="/redoc" if app_settings.DEBUG else None,
    )

    if response_cache is None and app_settings.CACHE_ENABLED:
        response_cache = InMemoryCache(
            max_size=app_settings.CACHE_MAX_SIZE,
            default_ttl=app_settings.CACHE_TTL_DEFAULT,
        )
    event_sink = event_sink or create_event_sink(app_settings)

    app.state.settings = app_settings
    app.state.response_cache = response_cache
    app.state.event_sink = event_sink
    app.state.telemetry_dispatcher = TelemetryDispatcher(
        event_sink, timeout=app_settings.TELEMETRY_TIMEOUT_SECONDS
    )
    app.state.database_manager = database_manager or create_database_manager()

    _setup_middleware(app, app_settings)
    _setup_routers(app)

    return app


def _setup_middleware(app: FastAPI, app_settings: ApiSettings) -> None:
    """Configure middleware and error handlers."""
    setup_error_handling(app)

    if app_settings.ENABLE_REQUEST_LOGGING:
        setup_request_logging_middleware(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.CORS_ORIGINS,
        allow_credentials=app_settings.CORS_CREDENTIALS,
        allow_methods=app_settings.CORS_METHODS,
        allow_headers=app_settings.CORS_HEADERS,
    )

    logger.info(
        "Middleware configured",
        extra={
            "request_logging": app_settings.ENABLE_REQUEST_LOGGING,
            "allowed_origins": len(app_settings.CORS_ORIGINS),
            "cache_enabled": app.state.response_cache is not None,
        },
    )


def _setup_routers(app: FastAPI) -> None:
    """Mount application routers."""
    app.include_router(health_router, prefix="/api", tags=["Health"])
    app.include_router(products_router, prefix="/api", tags=["Products"])

    logger.info("API routes configured", extra={"prefix": "/api", "total_routers": 2})


app = create_app()


def run() -> None:
    """Console entry point."""
    uvicorn.run(
        "monitoring_api.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    run()
