"""
School Directory — Connection Provider
========================================

What:  Declarative base for the models and the connection-provider capability
       the record store depends on.
How:   ConnectionProvider states the contract (acquire → use → release).
       EngineConnectionProvider implements it on an async SQLAlchemy engine.

Connection Strategy:
    db_pool_size = 0  → NullPool: a fresh connection is opened for every store
                        operation and closed when it finishes.
    db_pool_size > 0  → pooled engine (pool_size / max_overflow / pre_ping).

    Either way, acquire() wraps the connection in a transaction that commits
    when the block exits normally and rolls back when it raises.
"""

import logging
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import AsyncContextManager, AsyncIterator

from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool

from school_directory.config import Settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

    Shares one metadata object between the record store (create-if-missing)
    and Alembic (managed migrations).
    """
    pass


class ConnectionProvider(ABC):
    """
    Capability to acquire a transactional database connection.

    Contract:
        - acquire() is an async context manager yielding an AsyncConnection
        - the transaction commits on normal exit and rolls back on error
        - the connection is released when the block exits
        - dispose() releases every resource held by the provider
    """

    @abstractmethod
    def acquire(self) -> AsyncContextManager[AsyncConnection]:
        ...

    @abstractmethod
    async def dispose(self) -> None:
        ...


class EngineConnectionProvider(ConnectionProvider):
    """ConnectionProvider backed by an async SQLAlchemy engine."""

    def __init__(self, settings: Settings):
        self.engine: AsyncEngine = _create_engine(settings)

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[AsyncConnection]:
        async with self.engine.begin() as conn:
            yield conn

    async def dispose(self) -> None:
        await self.engine.dispose()
        logger.info("Database engine disposed")


def _create_engine(settings: Settings) -> AsyncEngine:
    echo = settings.log_level == "DEBUG"
    if settings.db_pool_size == 0:
        return create_async_engine(settings.database_dsn, poolclass=NullPool, echo=echo)

    return create_async_engine(
        settings.database_dsn,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_pre_ping=True,
        pool_recycle=3600,
        echo=echo,
    )
