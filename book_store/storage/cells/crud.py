from __future__ import annotations

from sqlalchemy import select, text as sa_text
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from book_store.storage.cells.base import StableCell
from book_store.storage.types import CellRow


async def get_cell(session: AsyncSession, memory_id: int) -> CellRow | None:
    result = await session.execute(select(StableCell.memory_id, StableCell.value).where(StableCell.memory_id == memory_id))
    row = result.first()
    if row is None:
        return None
    return CellRow(memory_id=int(row[0]), value=bytes(row[1]))


async def init_cell(session: AsyncSession, memory_id: int, value: bytes) -> CellRow:
    """Store ``value`` unless the cell already exists, then return the stored cell."""
    stmt = (
        sqlite_insert(StableCell)
        .values(memory_id=memory_id, value=value)
        .on_conflict_do_nothing(index_elements=[StableCell.memory_id])
    )
    await session.execute(stmt)
    cell = await get_cell(session, memory_id)
    if cell is None:
        raise RuntimeError(f"Stable cell {memory_id} missing after init")
    return cell


async def set_cell(session: AsyncSession, memory_id: int, value: bytes) -> None:
    stmt = (
        sqlite_insert(StableCell)
        .values(memory_id=memory_id, value=value)
        .on_conflict_do_update(
            index_elements=[StableCell.memory_id],
            set_={"value": value, "updated_at": sa_text("CURRENT_TIMESTAMP")},
        )
    )
    await session.execute(stmt)
