"""Generate and save handlers behind the flashcard pages.

``FlashcardStudio.generate`` checks input and quota before calling the
generation endpoint, then records the result and the new usage in one
commit. ``FlashcardStudio.save`` stores a named set the same way.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional, Sequence

from app.core.config import settings
from app.core.db.schemas.flashcards import FlashcardSet
from app.core.db_services import FlashcardStore
from app.core.logging import get_logger
from app.modules.flashcards.client import GenerationClient
from app.modules.flashcards.errors import (
    EmptyFlashcardSetError,
    EmptyPromptError,
    EmptySetNameError,
    QuotaExceededError,
)
from app.modules.flashcards.models.flashcards import Flashcard
from app.modules.usage.quota import (
    UsageSnapshot,
    check_quota,
    next_usage,
    snapshot,
    utcnow,
)

logger = get_logger(__name__)

SAVED_MESSAGE = "Flashcards saved successfully!"
SAVED_REDIRECT = "/flashcards"


@dataclass
class GenerationOutcome:
    prompt: str
    flashcards: list[Flashcard]
    usage: UsageSnapshot


@dataclass
class SaveOutcome:
    message: str
    redirect_to: str
    flashcard_set: FlashcardSet


class FlashcardStudio:
    def __init__(
        self,
        store: FlashcardStore,
        client: GenerationClient,
        *,
        monthly_limit: Optional[int] = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.store = store
        self.client = client
        self.monthly_limit = (
            monthly_limit if monthly_limit is not None else settings.quota.monthly_limit
        )
        self.clock = clock

    async def usage(self, user_id: str) -> UsageSnapshot:
        user = await self.store.get_user(user_id)
        return snapshot(
            user.monthly_generation_count if user else 0,
            user.last_generation_month if user else None,
            self.monthly_limit,
            self.clock(),
        )

    async def generate(self, user_id: str, text: str) -> GenerationOutcome:
        if not text or not text.strip():
            raise EmptyPromptError()

        now = self.clock()
        user = await self.store.get_user(user_id)
        try:
            usage = check_quota(
                user.monthly_generation_count if user else 0,
                user.last_generation_month if user else None,
                self.monthly_limit,
                now,
            )
        except QuotaExceededError:
            logger.info("Monthly generation limit reached", extra={"user_id": user_id})
            raise

        flashcards = await self.client.generate(text)

        fields = next_usage(usage, now)
        await self.store.record_generation(user_id, text, flashcards, fields)
        logger.info(
            "Generated %d flashcards", len(flashcards), extra={"user_id": user_id}
        )

        return GenerationOutcome(
            prompt=text,
            flashcards=list(flashcards),
            usage=UsageSnapshot(
                count=fields["monthly_generation_count"],
                limit=self.monthly_limit,
                month=fields["last_generation_month"],
            ),
        )

    async def save(
        self, user_id: str, name: str, flashcards: Sequence[Flashcard]
    ) -> SaveOutcome:
        if not name or not name.strip():
            raise EmptySetNameError()
        if not flashcards:
            raise EmptyFlashcardSetError()

        db_set = await self.store.save_set(user_id, name, flashcards)
        logger.info("Saved flashcard set %r", name, extra={"user_id": user_id})
        return SaveOutcome(
            message=SAVED_MESSAGE,
            redirect_to=SAVED_REDIRECT,
            flashcard_set=db_set,
        )
