from __future__ import annotations

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


def import_all_models() -> None:
    from book_store.storage.cells.base import StableCell
    from book_store.storage.entries.base import StableEntry

    _ = (StableCell, StableEntry)
