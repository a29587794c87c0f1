"""
Database session and engine management.

Provides async database connections with proper connection pooling,
transaction management, and context managers.

Responsibility: Manage database connections and sessions
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional
from sqlalchemy.ext.asyncio import (
    create_async_engine,
    AsyncEngine,
    AsyncSession,
    async_sessionmaker
)
from sqlalchemy.pool import NullPool, StaticPool
import logging

from ..config import DatabaseConfig, settings

logger = logging.getLogger(__name__)


class Database:
    """
    Database connection manager.

    Constructed explicitly by whoever owns the process lifecycle (CLI,
    API startup, Prefect task) and handed to the crawlers, so the
    connection pool lives exactly as long as that owner.

    Example:
        # Initialize
        database = Database()
        await database.initialize()

        # Use session
        async with database.session() as session:
            result = await session.execute(query)

        # Cleanup
        await database.close()
    """

    def __init__(self, config: Optional[DatabaseConfig] = None):
        """
        Initialize database manager.

        Args:
            config: Database settings (defaults to the environment-derived settings.db)
        """
        self.config = config or settings.db
        self.engine: AsyncEngine | None = None
        self.session_factory: async_sessionmaker[AsyncSession] | None = None
        self._initialized = False

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    async def initialize(self) -> None:
        """
        Initialize database engine and session factory.

        Creates async engine with appropriate pool settings based on
        the configured database driver (SQLite vs PostgreSQL).
        """
        if self._initialized:
            logger.warning("Database already initialized")
            return

        connection_string = self.config.connection_string

        logger.info(f"Initializing database: {connection_string.split('://')[0]}")

        engine_kwargs: dict = {
            "echo": self.config.echo,
            "echo_pool": self.config.echo_pool,
        }

        if self.config.is_sqlite:
            if ":memory:" in connection_string:
                # In-memory SQLite: one shared connection or every session sees an empty DB
                engine_kwargs["poolclass"] = StaticPool
                engine_kwargs["connect_args"] = {"check_same_thread": False}
                logger.info("Using in-memory SQLite with StaticPool")
            else:
                # SQLite file: No connection pooling
                engine_kwargs["poolclass"] = NullPool
                logger.info("Using SQLite with NullPool")
        else:
            # PostgreSQL: default async queue pool with configured limits
            engine_kwargs.update(
                pool_size=self.config.pool_size,
                max_overflow=self.config.max_overflow,
                pool_timeout=self.config.pool_timeout,
                pool_recycle=self.config.pool_recycle,
            )
            logger.info(
                f"Using PostgreSQL with connection pool "
                f"(size={self.config.pool_size}, "
                f"max_overflow={self.config.max_overflow})"
            )

        # Create async engine
        self.engine = create_async_engine(connection_string, **engine_kwargs)

        # Create session factory
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,  # Don't expire objects after commit
            autoflush=False,  # Manual flush control
        )

        self._initialized = True
        logger.info("Database initialized successfully")

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Create a new database session with automatic cleanup.

        Provides proper transaction management with automatic rollback
        on errors and commit on success.

        Yields:
            AsyncSession for database operations

        Example:
            async with database.session() as session:
                result = await session.execute(query)
        """
        if not self._initialized or not self.session_factory:
            raise RuntimeError("Database not initialized. Call initialize() first.")

        session = self.session_factory()

        try:
            yield session
            # Auto-commit on success (if not already committed)
            if session.in_transaction():
                await session.commit()
        except Exception as e:
            # Auto-rollback on error
            logger.error(f"Session error, rolling back: {e}")
            await session.rollback()
            raise
        finally:
            # Always close session
            await session.close()

    async def create_tables(self) -> None:
        """
        Create all database tables.

        Uses SQLAlchemy metadata to create tables if they don't exist.
        """
        if not self._initialized or not self.engine:
            raise RuntimeError("Database not initialized")

        from .models import Base

        logger.info("Creating database tables...")

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        logger.info("Database tables created successfully")

    async def drop_tables(self) -> None:
        """
        Drop all database tables.

        WARNING: This deletes all data! Only use in development/testing.
        """
        if not self._initialized or not self.engine:
            raise RuntimeError("Database not initialized")

        from .models import Base

        logger.warning("Dropping all database tables...")

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

        logger.warning("All database tables dropped")

    async def close(self) -> None:
        """
        Close database engine and cleanup connections.

        Should be called during application shutdown.
        """
        if not self._initialized:
            return

        if self.engine:
            logger.info("Closing database connections...")
            await self.engine.dispose()
            self.engine = None

        self.session_factory = None
        self._initialized = False

        logger.info("Database closed")
