from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

logger = logging.getLogger(__name__)


class DatabaseManager:
    """Owns the async engine and hands out request-scoped sessions."""

    def __init__(self, database_url: str) -> None:
        self._database_url = database_url
        self._engine: Optional[AsyncEngine] = None
        self._sessionmaker: Optional[async_sessionmaker[AsyncSession]] = None

    @property
    def is_sqlite(self) -> bool:
        return self._database_url.startswith("sqlite")

    async def init(self) -> None:
        """Create the engine and session factory once."""
        if self._engine is not None:
            return

        logger.info("Connecting to database")
        self._engine = create_async_engine(self._database_url, echo=False)

        if self.is_sqlite:

            @event.listens_for(self._engine.sync_engine, "connect")
            def _configure_connection(dbapi_connection, connection_record) -> None:  # pragma: no cover
                cursor = dbapi_connection.cursor()
                try:
                    cursor.execute("PRAGMA foreign_keys=ON")
                finally:
                    cursor.close()
                # SQLAlchemy emits BEGIN itself so SAVEPOINTs nest correctly.
                dbapi_connection.isolation_level = None

            @event.listens_for(self._engine.sync_engine, "begin")
            def _begin(conn) -> None:  # pragma: no cover
                conn.exec_driver_sql("BEGIN")

        self._sessionmaker = async_sessionmaker(
            self._engine,
            expire_on_commit=False,
            class_=AsyncSession,
        )

    async def create_schema(self) -> None:
        """Create any missing tables for the registered models."""
        from models import Base

        if self._engine is None:
            raise RuntimeError("DatabaseManager is not initialized. Call init() first.")
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database schema ensured")

    async def dispose(self) -> None:
        """Dispose of the engine and forget the session factory."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._sessionmaker = None
            logger.info("Database engine disposed")

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Yield a session that commits on success and rolls back on error.

        Every request runs inside one of these, so multi-step operations such
        as a season rollover or a game reprocess are applied atomically.
        """
        if self._sessionmaker is None:
            raise RuntimeError("DatabaseManager is not initialized. Call init() first.")

        session: AsyncSession = self._sessionmaker()
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


_db_manager: Optional[DatabaseManager] = None


async def init_database(database_url: str) -> DatabaseManager:
    """Create and initialize the global DatabaseManager singleton."""
    global _db_manager

    if _db_manager is None:
        _db_manager = DatabaseManager(database_url)
    await _db_manager.init()
    return _db_manager


async def dispose_database() -> None:
    """Dispose the global DatabaseManager singleton."""
    global _db_manager

    if _db_manager is not None:
        await _db_manager.dispose()
        _db_manager = None


def get_database_manager() -> DatabaseManager:
    """Return the initialized DatabaseManager instance."""
    if _db_manager is None:
        raise RuntimeError("DatabaseManager is not initialized.")
    return _db_manager
