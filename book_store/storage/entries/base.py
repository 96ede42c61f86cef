from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Integer, LargeBinary, PrimaryKeyConstraint, text as sa_text
from sqlalchemy.orm import Mapped, mapped_column

from book_store.storage.base import Base


class StableEntry(Base):
    __tablename__ = "stable_entries"
    __table_args__ = (PrimaryKeyConstraint("memory_id", "key", name="pk_stable_entries"),)

    memory_id: Mapped[int] = mapped_column(Integer, nullable=False)
    # Fixed-width big-endian keys sort in numeric order.
    key: Mapped[bytes] = mapped_column(LargeBinary(8), nullable=False)
    value: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=sa_text("CURRENT_TIMESTAMP"), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=sa_text("CURRENT_TIMESTAMP"),
        onupdate=sa_text("CURRENT_TIMESTAMP"),
        nullable=False,
    )
