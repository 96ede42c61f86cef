"""Single-value stable cells, one row per memory id."""

from book_store.storage.cells.base import StableCell
from book_store.storage.cells import crud

__all__ = ["StableCell", "crud"]
