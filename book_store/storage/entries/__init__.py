"""Key/value entries of the stable ordered maps."""

from book_store.storage.entries.base import StableEntry
from book_store.storage.entries import crud

__all__ = ["StableEntry", "crud"]
