from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Optional
from sqlalchemy import DateTime, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.db.base import Base

if TYPE_CHECKING:
    from .flashcards import FlashcardSet, GeneratedFlashcards


class User(Base):
    """A signed-in user, keyed by the auth provider's subject id.

    Rows are created lazily on the first write that needs them.
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String, primary_key=True, index=True)
    monthly_generation_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default="0"
    )
    # "YYYY-MM" of the last generation, in UTC
    last_generation_month: Mapped[Optional[str]] = mapped_column(
        String(7), nullable=True
    )
    last_generation_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime, nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        server_default=func.now(),
    )

    # Relationships
    flashcard_sets: Mapped[list["FlashcardSet"]] = relationship(
        "FlashcardSet", back_populates="user", cascade="all, delete-orphan"
    )
    generated_flashcards: Mapped[list["GeneratedFlashcards"]] = relationship(
        "GeneratedFlashcards", back_populates="user", cascade="all, delete-orphan"
    )


__all__ = ["User"]
