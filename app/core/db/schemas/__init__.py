# Import models so Base metadata is aware of them
from .users import User  # noqa: F401
from .flashcards import FlashcardSet, GeneratedFlashcards  # noqa: F401
