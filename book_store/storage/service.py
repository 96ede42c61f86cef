from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncGenerator

from loguru import logger

from book_store.config.schema import StorageConfig
from book_store.domain.clock import Clock, wall_clock_ns
from book_store.storage.codec import BookCodec
from book_store.storage.counter import DurableCounter
from book_store.storage.db import DatabaseService, open_database
from book_store.storage.stable_map import DurableBookMap

_storage_service: "StorageService | None" = None


@dataclass
class StableStore:
    """Counter and book map bound to one open transaction."""

    counter: DurableCounter
    books: DurableBookMap


class StorageService:
    """Owns the database, the codec and the clock for one process.

    Every operation runs through ``transaction()``, which holds a lock for the
    whole read/modify/commit cycle so operations never interleave.
    """

    def __init__(self, db: DatabaseService, config: StorageConfig, clock: Clock | None = None):
        self.db = db
        self.config = config
        self.codec = BookCodec(max_size=config.max_record_size)
        self.clock: Clock = clock or wall_clock_ns
        self._lock = asyncio.Lock()

    @classmethod
    async def open(cls, config: StorageConfig, clock: Clock | None = None) -> "StorageService":
        if config.sqlite_path is None:
            raise ValueError("storage.sqlite_path is not set; resolve config paths first")
        db = await open_database(config.sqlite_path)
        service = cls(db, config, clock)
        async with service.transaction() as stable:
            current = await stable.counter.init()
        logger.info("Storage opened at {} (id counter at {})", config.sqlite_path, current)
        return service

    @asynccontextmanager
    async def transaction(self) -> AsyncGenerator[StableStore, None]:
        async with self._lock:
            async with self.db.session_scope() as session:
                yield StableStore(
                    counter=DurableCounter(session, self.config.counter_memory_id),
                    books=DurableBookMap(session, self.config.books_memory_id, self.codec),
                )

    async def close(self) -> None:
        await self.db.dispose()


async def init_storage_service(config: StorageConfig, clock: Clock | None = None) -> StorageService:
    global _storage_service
    if _storage_service is None:
        _storage_service = await StorageService.open(config, clock)
    return _storage_service


def get_storage_service() -> StorageService:
    if _storage_service is None:
        raise RuntimeError("Storage service not initialized. Call init_storage_service() first.")
    return _storage_service


async def shutdown_storage_service() -> None:
    global _storage_service
    if _storage_service is None:
        return
    await _storage_service.close()
    _storage_service = None
