"""Errors raised by the flashcard handlers.

Each error carries the message shown to the user and the HTTP status the API
maps it to.
"""

from __future__ import annotations

GENERATE_FAILED_MESSAGE = (
    "An error occurred while generating flashcards. Please try again."
)
SAVE_FAILED_MESSAGE = "An error occurred while saving flashcards. Please try again."


class FlashcardError(Exception):
    status_code = 400
    message = "Flashcard request failed"

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class EmptyPromptError(FlashcardError):
    message = "Please enter your text to generate flashcards."


class EmptySetNameError(FlashcardError):
    message = "Please enter a name for your flashcards set."


class EmptyFlashcardSetError(FlashcardError):
    message = "Please generate flashcards before saving a set."


class QuotaExceededError(FlashcardError):
    status_code = 429

    def __init__(self, limit: int) -> None:
        self.limit = limit
        super().__init__(
            f"You have reached your monthly limit ({limit} cards / month) "
            "for flashcard generation."
        )


class GenerationError(FlashcardError):
    """The generation endpoint failed or returned something unusable."""

    status_code = 502
    message = GENERATE_FAILED_MESSAGE

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__()

    def __str__(self) -> str:
        return self.reason


class SetNotFoundError(FlashcardError):
    status_code = 404
    message = "Flashcard set not found"
