"""
Database connection and session management using SQLAlchemy.
Supports async operations with asyncpg (PostgreSQL) or aiosqlite (SQLite).

The engine and its connection pool live in a ``Database`` object that is
passed to the components needing storage. Each logical query or insert
borrows a session with ``async with database.session()`` and gives it back
when the block ends.
"""

import logging
from contextlib import asynccontextmanager
from functools import lru_cache
from typing import Any, AsyncGenerator, Dict

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from farescope.config import Settings, get_settings
from farescope.models.base import Base

logger = logging.getLogger(__name__)


class Database:
    """
    Owns the async engine (and its pool) and hands out scoped sessions.

    Usage:
        database = Database("sqlite+aiosqlite:///./farescope.db")
        async with database.session() as db:
            result = await db.execute(select(Airport))
    """

    def __init__(
        self,
        database_url: str,
        echo: bool = False,
        pool_size: int = 5,
        max_overflow: int = 10,
        pool_timeout: int = 30,
    ):
        self.database_url = database_url

        engine_kwargs: Dict[str, Any] = {
            "echo": echo,
            "pool_pre_ping": True,  # Verify connections before using
        }
        if not database_url.startswith("sqlite"):
            engine_kwargs.update(
                pool_size=pool_size,  # Maximum number of connections in the pool
                max_overflow=max_overflow,  # Maximum overflow connections
                pool_recycle=3600,  # Recycle connections after 1 hour
                pool_timeout=pool_timeout,  # Timeout for getting connection from pool
            )

        self.engine = create_async_engine(database_url, **engine_kwargs)
        self.session_factory = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(
            settings.database_url,
            echo=settings.debug,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_timeout=settings.db_pool_timeout,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Async context manager for a database session.

        Commits when the block exits normally, rolls back and re-raises
        otherwise, and always returns the connection to the pool.

        Usage:
            async with database.session() as db:
                result = await db.execute(select(FareRecord))
        """
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def init_models(self) -> None:
        """
        Create all tables.

        Intended for development and tests; tables that already exist are
        left untouched.
        """
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables created successfully")

    async def drop_models(self) -> None:
        """
        Drop all tables.

        WARNING: This will delete all collected fares.
        """
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
        logger.warning("All database tables dropped")

    async def check_connection(self) -> bool:
        """
        Check if the database connection is healthy.

        Returns:
            bool: True if connection is healthy, False otherwise
        """
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            logger.debug("Database connection is healthy")
            return True
        except Exception as e:
            logger.error(f"Database connection failed: {e}")
            return False

    async def dispose(self) -> None:
        """Close all pooled connections."""
        await self.engine.dispose()
        logger.info("Database connections closed")


def masked_database_url(database_url: str) -> str:
    """Database URL with the password hidden, for logs and error messages."""
    return make_url(database_url).render_as_string(hide_password=True)


@lru_cache()
def get_database() -> Database:
    """Process-wide Database built from settings."""
    return Database.from_settings(get_settings())
