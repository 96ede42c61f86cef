from __future__ import annotations

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from book_store.domain.errors import CounterOverflowError, StorageFault
from book_store.storage.cells import crud as cells_crud
from book_store.storage.types import U64_MAX, decode_u64, encode_u64


class DurableCounter:
    """Monotonic uint64 counter persisted in one stable cell.

    The cell starts at 0, so the first id handed out is 1. The counter is never
    decremented and does not look at map contents, so ids are not reused.
    """

    def __init__(self, session: AsyncSession, memory_id: int):
        self.session = session
        self.memory_id = memory_id

    async def init(self) -> int:
        cell = await cells_crud.init_cell(self.session, self.memory_id, encode_u64(0))
        return self._decode(cell.value)

    async def current(self) -> int:
        cell = await cells_crud.get_cell(self.session, self.memory_id)
        if cell is None:
            return await self.init()
        return self._decode(cell.value)

    async def next_id(self) -> int:
        current_value = await self.current()
        if current_value >= U64_MAX:
            raise CounterOverflowError(f"id counter in memory {self.memory_id} is exhausted")
        new_value = current_value + 1
        await cells_crud.set_cell(self.session, self.memory_id, encode_u64(new_value))
        logger.debug("Counter {} advanced to {}", self.memory_id, new_value)
        return new_value

    def _decode(self, raw: bytes) -> int:
        try:
            return decode_u64(raw)
        except ValueError as exc:
            raise StorageFault(f"corrupt counter cell {self.memory_id}: {exc}") from exc
