from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING
from sqlalchemy import (
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    func,
    JSON,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.db.base import Base

if TYPE_CHECKING:
    from .users import User


class GeneratedFlashcards(Base):
    """One generation call: the prompt and the cards it produced."""

    __tablename__ = "generated_flashcards"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id"), nullable=False, index=True
    )
    prompt: Mapped[str] = mapped_column(Text, nullable=False)
    flashcards: Mapped[list[dict]] = mapped_column(
        JSON, nullable=False, default=list
    )  # [{"front": ..., "back": ...}]
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        server_default=func.now(),
        index=True,
    )

    user: Mapped["User"] = relationship("User", back_populates="generated_flashcards")


class FlashcardSet(Base):
    __tablename__ = "flashcard_sets"
    __table_args__ = (
        UniqueConstraint("user_id", "name", name="uq_flashcard_set_user_name"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String, nullable=False)
    flashcards: Mapped[list[dict]] = mapped_column(
        JSON, nullable=False, default=list
    )  # [{"front": ..., "back": ...}]
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        server_default=func.now(),
        index=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    user: Mapped["User"] = relationship("User", back_populates="flashcard_sets")


__all__ = [
    "GeneratedFlashcards",
    "FlashcardSet",
]
