"""Pydantic models for flashcard generation and validation.

Note: To keep the structured output schema simple for the LLM providers, we
avoid length constraints here; cleanup happens after generation.
"""

from pydantic import BaseModel, Field


class Flashcard(BaseModel):
    """Simple front/back flashcard."""

    front: str
    back: str


class FlashcardDeck(BaseModel):
    """Structured output of the generation agent."""

    flashcards: list[Flashcard] = Field(default_factory=list)
