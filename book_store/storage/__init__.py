"""Durable storage regions on SQLite via SQLAlchemy async."""

from book_store.storage import cells, entries

__all__ = ["cells", "entries"]
