from .flashcards import Flashcard, FlashcardDeck

__all__ = [
    "Flashcard",
    "FlashcardDeck",
]
