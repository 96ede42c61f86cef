from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class BookPayload:
    title: str
    author: str
    summary: str
    store_name: str


@dataclass(frozen=True)
class Book:
    id: int
    title: str
    author: str
    summary: str
    store_name: str
    created_at: int
    updated_at: int | None = None

    @classmethod
    def create(cls, book_id: int, payload: BookPayload, created_at: int) -> "Book":
        return cls(
            id=book_id,
            title=payload.title,
            author=payload.author,
            summary=payload.summary,
            store_name=payload.store_name,
            created_at=created_at,
            updated_at=None,
        )

    def with_payload(self, payload: BookPayload, updated_at: int) -> "Book":
        """Return a copy with the caller-owned fields replaced; id and created_at are kept."""
        return replace(
            self,
            title=payload.title,
            author=payload.author,
            summary=payload.summary,
            store_name=payload.store_name,
            updated_at=updated_at,
        )
