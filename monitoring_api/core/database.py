from typing import Any, Dict

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from ..models import MonitoringApiBase
from ..utils.logging import setup_api_logging as setup_logging
from .settings import get_settings

logger = setup_logging("monitoring_api.database", log_level=get_settings().LOG_LEVEL)


def _mask_credentials(database_url: str) -> str:
    if "@" not in database_url:
        return database_url
    scheme, _, rest = database_url.partition("://")
    return f"{scheme}://***@{rest.split('@', 1)[1]}"


class DatabaseManager:
    """Async engine and session factory for the product store."""

    def __init__(
        self,
        database_url: str,
        echo: bool = False,
        pool_size: int = 10,
        max_overflow: int = 20,
    ) -> None:
        logger.info(
            "Initializing database manager",
            extra={
                "operation": "database_manager_init",
                "database_url": _mask_credentials(database_url),
                "echo": echo,
            },
        )

        engine_kwargs: Dict[str, Any] = {"echo": echo}

        if "sqlite" in database_url:
            # SQLite configuration for development and tests
            engine_kwargs["connect_args"] = {
                "timeout": 60,
                "check_same_thread": False,
            }
            logger.info(
                "Configured SQLite database settings",
                extra={"database_type": "sqlite", "timeout": 60},
            )
        else:
            engine_kwargs.update(
                {
                    "pool_size": pool_size,
                    "max_overflow": max_overflow,
                    "pool_timeout": 45,
                    "pool_recycle": 3600,
                    "pool_pre_ping": True,
                    "connect_args": {
                        "command_timeout": 30,
                        # Disable prepared statements to avoid shared_preload_libraries requirement
                        "prepared_statement_cache_size": 0,
                    },
                }
            )
            logger.info(
                "Configured PostgreSQL database settings",
                extra={
                    "database_type": "postgresql",
                    "pool_size": pool_size,
                    "max_overflow": max_overflow,
                },
            )

        self.async_engine = create_async_engine(database_url, **engine_kwargs)
        self.async_session_maker = async_sessionmaker(
            bind=self.async_engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    async def create_tables(self) -> None:
        """Create all database tables."""
        async with self.async_engine.begin() as conn:
            await conn.run_sync(MonitoringApiBase.metadata.create_all, checkfirst=True)
        logger.info(
            "Database tables created successfully",
            extra={"operation": "create_tables"},
        )

    async def close(self) -> None:
        """Dispose the engine and its pooled connections."""
        logger.info("Closing database connections", extra={"operation": "database_close"})
        await self.async_engine.dispose()


def create_database_manager() -> DatabaseManager:
    """Build a database manager from the current settings."""
    settings = get_settings()
    if not settings.DATABASE_URL:
        error_msg = "DATABASE_URL is required but not configured"
        logger.error(error_msg, extra={"operation": "database_init"})
        raise ValueError(error_msg)

    return DatabaseManager(
        database_url=settings.DATABASE_URL,
        echo=settings.DEBUG,
        pool_size=settings.DATABASE_POOL_SIZE,
        max_overflow=settings.DATABASE_MAX_OVERFLOW,
    )
