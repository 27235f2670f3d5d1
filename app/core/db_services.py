"""Database service for generated flashcards, saved sets and usage counters."""

from __future__ import annotations

from typing import Iterable, Optional, Sequence
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from app.core.db.schemas.users import User
from app.core.db.schemas.flashcards import FlashcardSet, GeneratedFlashcards
from app.core.logging import get_logger
from app.modules.flashcards.models.flashcards import Flashcard

logger = get_logger(__name__)


def _dump_cards(flashcards: Iterable[Flashcard]) -> list[dict]:
    return [card.model_dump() for card in flashcards]


class FlashcardStore:
    """Reads and atomic writes for a user's flashcard documents.

    Each write method commits its changes as one transaction and rolls back
    everything if any part fails.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_user(self, user_id: str) -> Optional[User]:
        return await self.session.get(User, user_id)

    async def _get_or_add_user(self, user_id: str) -> User:
        user = await self.get_user(user_id)
        if user is None:
            user = User(id=user_id, monthly_generation_count=0)
            self.session.add(user)
        return user

    async def record_generation(
        self,
        user_id: str,
        prompt: str,
        flashcards: Sequence[Flashcard],
        usage: dict,
    ) -> GeneratedFlashcards:
        """Store a generation record and merge the usage counters onto the user."""
        try:
            user = await self._get_or_add_user(user_id)
            record = GeneratedFlashcards(
                user_id=user_id,
                prompt=prompt,
                flashcards=_dump_cards(flashcards),
            )
            self.session.add(record)

            for field, value in usage.items():
                setattr(user, field, value)

            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        await self.session.refresh(record)
        return record

    async def save_set(
        self,
        user_id: str,
        name: str,
        flashcards: Sequence[Flashcard],
    ) -> FlashcardSet:
        """Create the named set, or replace the cards of an existing one."""
        try:
            await self._get_or_add_user(user_id)
            db_set = await self.get_set(user_id, name)
            if db_set is None:
                db_set = FlashcardSet(
                    user_id=user_id,
                    name=name,
                    flashcards=_dump_cards(flashcards),
                )
                self.session.add(db_set)
            else:
                logger.info(
                    "Replacing flashcard set %r", name, extra={"user_id": user_id}
                )
                db_set.flashcards = _dump_cards(flashcards)

            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        await self.session.refresh(db_set)
        return db_set

    async def get_set(self, user_id: str, name: str) -> Optional[FlashcardSet]:
        result = await self.session.execute(
            select(FlashcardSet).where(
                FlashcardSet.user_id == user_id, FlashcardSet.name == name
            )
        )
        return result.scalar_one_or_none()

    async def list_sets(self, user_id: str) -> list[FlashcardSet]:
        rows = await self.session.execute(
            select(FlashcardSet)
            .where(FlashcardSet.user_id == user_id)
            .order_by(FlashcardSet.created_at.desc(), FlashcardSet.id.desc())
        )
        return list(rows.scalars().all())

    async def list_generations(
        self, user_id: str, limit: int = 20
    ) -> list[GeneratedFlashcards]:
        rows = await self.session.execute(
            select(GeneratedFlashcards)
            .where(GeneratedFlashcards.user_id == user_id)
            .order_by(
                GeneratedFlashcards.created_at.desc(), GeneratedFlashcards.id.desc()
            )
            .limit(limit)
        )
        return list(rows.scalars().all())
