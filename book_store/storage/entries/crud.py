from __future__ import annotations

from sqlalchemy import delete, func, select, text as sa_text
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from book_store.storage.entries.base import StableEntry
from book_store.storage.types import EntryRow


async def get_entry(session: AsyncSession, memory_id: int, key: bytes) -> EntryRow | None:
    result = await session.execute(
        select(StableEntry.memory_id, StableEntry.key, StableEntry.value).where(
            StableEntry.memory_id == memory_id,
            StableEntry.key == key,
        )
    )
    row = result.first()
    if row is None:
        return None
    return EntryRow(memory_id=int(row[0]), key=bytes(row[1]), value=bytes(row[2]))


async def upsert_entry(session: AsyncSession, memory_id: int, key: bytes, value: bytes) -> None:
    stmt = (
        sqlite_insert(StableEntry)
        .values(memory_id=memory_id, key=key, value=value)
        .on_conflict_do_update(
            index_elements=[StableEntry.memory_id, StableEntry.key],
            set_={"value": value, "updated_at": sa_text("CURRENT_TIMESTAMP")},
        )
    )
    await session.execute(stmt)


async def delete_entry(session: AsyncSession, memory_id: int, key: bytes) -> bool:
    result = await session.execute(
        delete(StableEntry)
        .where(StableEntry.memory_id == memory_id, StableEntry.key == key)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


async def count_entries(session: AsyncSession, memory_id: int) -> int:
    result = await session.execute(select(func.count()).select_from(StableEntry).where(StableEntry.memory_id == memory_id))
    return int(result.scalar_one())
