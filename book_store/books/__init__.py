"""Book CRUD operations."""

from book_store.books.service import add_book, delete_book, get_book, update_book

__all__ = ["add_book", "delete_book", "get_book", "update_book"]
