# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database connection management using SQLAlchemy async.

The Database object owns the engine and sessionmaker. It is constructed
once at application startup, stored on the application state, and disposed
at shutdown. Nothing in this module keeps connection state at import time.

Uses SQLAlchemy 2.0 async API with asyncpg driver.

Example:
    database = Database(settings.database)
    await database.connect()

    async with database.session() as session:
        result = await session.execute(select(Term))
        terms = result.scalars().all()

    await database.dispose()
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from lxp.core.config.settings import DatabaseSettings

logger = logging.getLogger(__name__)


class DatabaseError(Exception):
    """Base exception for database operations.

    Attributes:
        message: Human-readable error description.
        original_error: The underlying SQLAlchemy or database error.
    """

    def __init__(self, message: str, original_error: Optional[Exception] = None) -> None:
        """Initialize the database error.

        Args:
            message: Human-readable error description.
            original_error: The underlying exception that caused this error.
        """
        super().__init__(message)
        self.message = message
        self.original_error = original_error

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.original_error:
            return f"{self.message}: {self.original_error}"
        return self.message


class Database:
    """Async engine and session factory with an explicit lifecycle.

    Attributes:
        _settings: Database configuration.
        _engine: Async engine, set by connect().
        _sessionmaker: Session factory bound to the engine.
    """

    def __init__(self, settings: DatabaseSettings) -> None:
        """Initialize without opening any connections.

        Args:
            settings: Database configuration.
        """
        self._settings = settings
        self._engine: Optional[AsyncEngine] = None
        self._sessionmaker: Optional[async_sessionmaker[AsyncSession]] = None

    @property
    def is_connected(self) -> bool:
        """Check whether connect() has been called."""
        return self._engine is not None

    async def connect(self) -> None:
        """Create the connection pool.

        Raises:
            DatabaseError: If engine creation fails.
        """
        if self._engine is not None:
            return

        try:
            self._engine = create_async_engine(
                self._settings.url,
                pool_size=self._settings.pool_size,
                max_overflow=self._settings.max_overflow,
                pool_pre_ping=True,
                pool_recycle=1800,
                echo=self._settings.echo,
            )
            self._sessionmaker = async_sessionmaker(
                bind=self._engine,
                class_=AsyncSession,
                expire_on_commit=False,
                autoflush=False,
            )
        except SQLAlchemyError as e:
            raise DatabaseError("Failed to initialize database connection", e) from e

        logger.info("Database engine created for %s", self._settings.host)

    async def dispose(self) -> None:
        """Close every pooled connection."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._sessionmaker = None
            logger.info("Database engine disposed")

    @property
    def engine(self) -> AsyncEngine:
        """Get the async engine.

        Raises:
            DatabaseError: If the database has not been connected.
        """
        if self._engine is None:
            raise DatabaseError("Database not initialized. Call connect() first.")
        return self._engine

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Get an async session.

        The session is committed on success and rolled back on exception.

        Yields:
            AsyncSession for database operations.

        Raises:
            DatabaseError: If not connected or if a database operation fails.
        """
        if self._sessionmaker is None:
            raise DatabaseError("Database not initialized. Call connect() first.")

        async with self._sessionmaker() as session:
            try:
                yield session
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                raise DatabaseError("Database operation failed", e) from e
            except Exception:
                await session.rollback()
                raise

    async def check_connection(self) -> bool:
        """Check if the database is reachable.

        Returns:
            True if a trivial query succeeds, False otherwise.
        """
        if self._engine is None:
            return False

        try:
            async with self._engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError:
            return False
