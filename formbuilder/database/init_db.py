"""
Database initialization and connection management.

This module provides the Database handle, which owns:
1. The async engine and its connection pool
2. The session factory
3. Schema creation

A handle is created once at process startup, passed to the repositories that
need it, and disposed on shutdown.
"""

import os
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError, SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from formbuilder.common.exceptions import ConfigurationError, StorageError
from formbuilder.common.logger import app_logger, log_execution_time
from .base import Base
from . import models  # noqa: F401  (registers tables on Base.metadata)

# Setup module logger
logger = app_logger.getChild("database.init_db")


class Database:
    """
    Explicit storage handle with an open/close lifecycle.
    """

    def __init__(self, database_url: str, echo: bool = False):
        """
        Args:
            database_url: SQLAlchemy async database URL
            echo: Whether to echo SQL statements

        Raises:
            ConfigurationError: If the URL is empty or cannot be parsed
        """
        if not database_url:
            raise ConfigurationError("DATABASE_URL is not set", "DATABASE_URL")
        try:
            make_url(database_url)
        except ArgumentError as e:
            raise ConfigurationError(f"Invalid DATABASE_URL: {e}", "DATABASE_URL") from e

        self.database_url = database_url
        self.echo = echo
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker] = None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise RuntimeError("Database engine not initialized. Call connect() first.")
        return self._engine

    @property
    def is_connected(self) -> bool:
        return self._engine is not None

    def _engine_kwargs(self) -> dict:
        """
        Get engine keyword arguments based on database type.
        Different databases support different connection options.
        """
        kwargs = {"echo": self.echo}
        url = make_url(self.database_url)

        if url.get_backend_name() == "sqlite":
            if url.database in (None, "", ":memory:"):
                # One shared connection so every session sees the same in-memory database
                kwargs.update({
                    "poolclass": StaticPool,
                    "connect_args": {"check_same_thread": False},
                })
            else:
                directory = os.path.dirname(url.database)
                if directory:
                    os.makedirs(directory, exist_ok=True)
        elif url.get_backend_name() == "postgresql":
            kwargs.update({
                "pool_pre_ping": True,
                "pool_recycle": 300,
            })

        return kwargs

    @log_execution_time(logger)
    async def connect(self, create_schema: bool = True) -> "Database":
        """
        Create the engine, verify connectivity and optionally create tables.

        Raises:
            StorageError: If the database cannot be reached
        """
        if self._engine is not None:
            return self

        logger.info(f"Initializing database with URL: {self.database_url[:10]}...")
        try:
            self._engine = create_async_engine(self.database_url, **self._engine_kwargs())
            self._session_factory = async_sessionmaker(self._engine, expire_on_commit=False)

            async with self._engine.begin() as conn:
                await conn.execute(text("SELECT 1"))
                if create_schema:
                    await conn.run_sync(Base.metadata.create_all)
        except SQLAlchemyError as e:
            logger.error(f"Failed to initialize database: {str(e)}")
            await self.dispose()
            raise StorageError(str(e), e) from e

        logger.info("Database engine initialized successfully")
        return self

    async def dispose(self) -> None:
        """Close the engine and all pooled connections."""
        if self._engine is not None:
            await self._engine.dispose()
            logger.info("Database engine closed")
        self._engine = None
        self._session_factory = None

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """
        Provide a transactional scope around a series of operations.

        Commits on success and rolls back on failure; driver errors surface
        as StorageError.
        """
        if self._session_factory is None:
            raise RuntimeError("Database not initialized. Call connect() first.")

        session = self._session_factory()
        try:
            yield session
            await session.commit()
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"Database session error: {e}")
            raise StorageError(str(e), e) from e
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
