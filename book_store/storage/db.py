from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from loguru import logger
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from book_store.storage.base import Base, import_all_models


def _build_sqlite_url(db_path: Path) -> str:
    resolved = db_path.resolve()
    return f"sqlite+aiosqlite:///{resolved.as_posix()}"


class DatabaseService:
    def __init__(self, db_url: str):
        self.db_url = db_url
        self.engine: AsyncEngine = create_async_engine(db_url, future=True)
        self._sessionmaker = async_sessionmaker(self.engine, expire_on_commit=False)

        @event.listens_for(self.engine.sync_engine, "connect")
        def _enable_durable_writes(dbapi_connection, _connection_record) -> None:
            # Transactions are opened by _begin_immediate below, not by the driver.
            dbapi_connection.isolation_level = None
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA journal_mode=WAL;")
            cursor.execute("PRAGMA synchronous=FULL;")
            cursor.execute("PRAGMA busy_timeout=30000;")
            cursor.close()

        @event.listens_for(self.engine.sync_engine, "begin")
        def _begin_immediate(conn) -> None:
            # Take the write lock before the first read so read-modify-write
            # cycles from other connections or processes cannot interleave.
            conn.exec_driver_sql("BEGIN IMMEDIATE")

    async def init_models(self) -> None:
        import_all_models()
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    @asynccontextmanager
    async def with_session(self) -> AsyncGenerator[AsyncSession, None]:
        async with self._sessionmaker() as session:
            yield session

    @asynccontextmanager
    async def session_scope(self) -> AsyncGenerator[AsyncSession, None]:
        """Yield a session that commits on success and rolls back on any exception.

        Raises:
            Exception: Whatever the body raised, after the rollback.

        """

        async with self.with_session() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                logger.exception("An error occurred during the session scope.")
                await session.rollback()
                raise

    async def dispose(self) -> None:
        await self.engine.dispose()


async def open_database(db_path: Path) -> DatabaseService:
    db_path.parent.mkdir(parents=True, exist_ok=True)
    service = DatabaseService(_build_sqlite_url(db_path))
    await service.init_models()
    logger.debug("Opened database at {}", db_path)
    return service
