from __future__ import annotations

from dataclasses import fields
from typing import Any

import orjson

from book_store.domain.book import Book
from book_store.domain.errors import CodecError
from book_store.storage.types import U64_MAX

BOOK_MAX_SIZE = 1024

_TEXT_FIELDS = ("title", "author", "summary", "store_name")
_FIELD_NAMES = tuple(field.name for field in fields(Book))


def _check_u64(name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise CodecError(f"field {name!r} must be an integer, got {type(value).__name__}")
    if not 0 <= value <= U64_MAX:
        raise CodecError(f"field {name!r} out of uint64 range: {value}")


def _check_fields(data: dict[str, Any]) -> None:
    if set(data) != set(_FIELD_NAMES):
        missing = sorted(set(_FIELD_NAMES) - set(data))
        unexpected = sorted(set(data) - set(_FIELD_NAMES))
        raise CodecError(f"book fields mismatch: missing={missing} unexpected={unexpected}")
    _check_u64("id", data["id"])
    _check_u64("created_at", data["created_at"])
    if data["updated_at"] is not None:
        _check_u64("updated_at", data["updated_at"])
    for name in _TEXT_FIELDS:
        if not isinstance(data[name], str):
            raise CodecError(f"field {name!r} must be a string, got {type(data[name]).__name__}")


class BookCodec:
    """Deterministic JSON encoding of ``Book`` records.

    Fields are written in declaration order, so equal books always encode to
    equal bytes. ``max_size`` is the declared bound on encoded records; the
    stable map enforces it when storing.
    """

    def __init__(self, max_size: int = BOOK_MAX_SIZE):
        self.max_size = max_size

    def encode(self, book: Book) -> bytes:
        data = {name: getattr(book, name) for name in _FIELD_NAMES}
        _check_fields(data)
        try:
            return orjson.dumps(data)
        except orjson.JSONEncodeError as exc:
            raise CodecError(f"cannot encode book id={book.id}: {exc}") from exc

    def decode(self, raw: bytes) -> Book:
        try:
            data = orjson.loads(raw)
        except orjson.JSONDecodeError as exc:
            raise CodecError(f"stored bytes are not a valid book record: {exc}") from exc
        if not isinstance(data, dict):
            raise CodecError("stored book record is not a JSON object")
        _check_fields(data)
        return Book(**data)
