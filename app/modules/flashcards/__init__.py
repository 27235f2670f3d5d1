"""Flashcards module exports."""

from .models.flashcards import Flashcard, FlashcardDeck

__all__ = [
    "Flashcard",
    "FlashcardDeck",
]
