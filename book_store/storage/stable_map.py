from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from book_store.domain.book import Book
from book_store.domain.errors import RecordTooLargeError
from book_store.storage.codec import BookCodec
from book_store.storage.entries import crud as entries_crud
from book_store.storage.types import encode_u64


class DurableBookMap:
    """Ordered ``uint64 -> Book`` map stored in one stable region.

    Values are kept as codec bytes; every read decodes a fresh ``Book``.
    """

    def __init__(self, session: AsyncSession, memory_id: int, codec: BookCodec):
        self.session = session
        self.memory_id = memory_id
        self.codec = codec

    async def get(self, book_id: int) -> Book | None:
        entry = await entries_crud.get_entry(self.session, self.memory_id, encode_u64(book_id))
        if entry is None:
            return None
        return self.codec.decode(entry.value)

    async def contains(self, book_id: int) -> bool:
        entry = await entries_crud.get_entry(self.session, self.memory_id, encode_u64(book_id))
        return entry is not None

    async def insert(self, book_id: int, book: Book) -> Book | None:
        raw = self.codec.encode(book)
        if len(raw) > self.codec.max_size:
            raise RecordTooLargeError(len(raw), self.codec.max_size)
        previous = await self.get(book_id)
        await entries_crud.upsert_entry(self.session, self.memory_id, encode_u64(book_id), raw)
        return previous

    async def remove(self, book_id: int) -> Book | None:
        previous = await self.get(book_id)
        if previous is None:
            return None
        await entries_crud.delete_entry(self.session, self.memory_id, encode_u64(book_id))
        return previous

    async def count(self) -> int:
        return await entries_crud.count_entries(self.session, self.memory_id)
