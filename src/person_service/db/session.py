"""
Async engine / session factory wiring.

The engine owns the connection pool. Repositories receive the session factory
(not a session) and open one short-lived session per operation, so a pooled
connection is never held across more than one logical operation.
"""
import logging

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from person_service.config.settings import Settings
from .base import Base

logger = logging.getLogger(__name__)


class DatabaseSessionManager:
    """Owns the AsyncEngine (pool) and the session factory built on top of it."""

    def __init__(
        self,
        database_url: str,
        *,
        pool_size: int = 20,
        max_overflow: int = 10,
        echo: bool = False,
    ):
        self.engine: AsyncEngine = create_async_engine(
            database_url,
            echo=echo,
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_pre_ping=True,              # Enables connection health checks
        )
        # expire_on_commit=False keeps returned rows readable after the session closes
        self.session_factory: async_sessionmaker[AsyncSession] = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "DatabaseSessionManager":
        return cls(
            settings.DATABASE_URL,
            pool_size=settings.DATABASE_POOL_SIZE,
            max_overflow=settings.DATABASE_MAX_OVERFLOW,
            echo=settings.SQLALCHEMY_ECHO,
        )

    async def dispose(self) -> None:
        """Close every pooled connection. Call once at shutdown."""
        await self.engine.dispose()
        logger.info("Database engine disposed")


async def init_schema(engine: AsyncEngine) -> None:
    """
    Create the tables declared on Base.metadata if they are missing.

    Only used by tests and local runs; production schemas come from
    sql/create-database.sql.
    """
    # Register models with Base.metadata
    from person_service import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
