from __future__ import annotations

from loguru import logger

from book_store.domain.book import Book, BookPayload
from book_store.domain.errors import NotFoundError, PayloadTooLargeError
from book_store.storage.service import StorageService
from book_store.storage.types import U64_MAX


def _worst_case_size(storage: StorageService, payload: BookPayload) -> int:
    # Largest possible record for this payload: every integer at its widest.
    widest = Book.create(U64_MAX, payload, U64_MAX).with_payload(payload, U64_MAX)
    return len(storage.codec.encode(widest))


def _check_payload_size(storage: StorageService, payload: BookPayload) -> None:
    size = _worst_case_size(storage, payload)
    if size > storage.codec.max_size:
        raise PayloadTooLargeError(size, storage.codec.max_size)


async def get_book(storage: StorageService, book_id: int) -> Book:
    async with storage.transaction() as stable:
        book = await stable.books.get(book_id)
    if book is None:
        logger.bind(op="get", book_id=book_id).info("Book not found")
        raise NotFoundError(f"a book with id={book_id} not found")
    logger.bind(op="get", book_id=book_id).debug("Book read")
    return book


async def add_book(storage: StorageService, payload: BookPayload) -> Book:
    if storage.config.validate_payload_size:
        _check_payload_size(storage, payload)

    async with storage.transaction() as stable:
        book_id = await stable.counter.next_id()
        book = Book.create(book_id, payload, storage.clock())
        await stable.books.insert(book_id, book)

    logger.bind(op="add", book_id=book_id).info("Book created")
    return book


async def update_book(storage: StorageService, book_id: int, payload: BookPayload) -> Book:
    # A missing id is reported before an oversized payload.
    oversized_size: int | None = None
    if storage.config.validate_payload_size:
        size = _worst_case_size(storage, payload)
        if size > storage.codec.max_size:
            oversized_size = size

    updated: Book | None = None
    async with storage.transaction() as stable:
        found = await stable.books.contains(book_id)
        if found and oversized_size is None:
            current = await stable.books.get(book_id)
            updated = current.with_payload(payload, storage.clock())
            await stable.books.insert(book_id, updated)

    if not found:
        logger.bind(op="update", book_id=book_id).info("Book not found")
        raise NotFoundError(f"couldn't update a book with id={book_id}. book not found")
    if oversized_size is not None:
        raise PayloadTooLargeError(oversized_size, storage.codec.max_size)
    logger.bind(op="update", book_id=book_id).info("Book updated")
    return updated


async def delete_book(storage: StorageService, book_id: int) -> Book:
    async with storage.transaction() as stable:
        removed = await stable.books.remove(book_id)
    if removed is None:
        logger.bind(op="delete", book_id=book_id).info("Book not found")
        raise NotFoundError(f"couldn't delete a book with id={book_id}. book not found.")
    logger.bind(op="delete", book_id=book_id).info("Book deleted")
    return removed
