"""Flashcard generator using pydantic-ai.

Backs the ``/api/generate`` endpoint: turns free text into a list of
front/back cards. Provider imports are kept lazy to avoid import-time errors
when credentials are missing.
"""

from __future__ import annotations

from pydantic_ai import Agent

from app.core.config import settings
from app.modules.flashcards.models.flashcards import Flashcard, FlashcardDeck

FLASHCARDS_MODEL_NAME = "gemini-2.0-flash"


def _build_google_model():
    """Build the Google Gemini model provider (lazy import)."""
    from pydantic_ai.models.google import GoogleModel
    from pydantic_ai.providers.google import GoogleProvider

    provider = GoogleProvider(api_key=settings.gemini_api_key)
    return GoogleModel(FLASHCARDS_MODEL_NAME, provider=provider)


def _build_openrouter_model():
    """Build OpenRouter model via OpenAI-compatible provider (lazy import)."""
    from pydantic_ai.models.openai import OpenAIChatModel
    from pydantic_ai.providers.openai import OpenAIProvider

    if not settings.openrouter_api_key:
        raise RuntimeError(
            "OpenRouter API key not configured. Set OPENROUTER_API_KEY in your environment."
        )

    provider = OpenAIProvider(
        api_key=settings.openrouter_api_key,
        base_url="https://openrouter.ai/api/v1",
    )
    return OpenAIChatModel(settings.openrouter_model, provider=provider)


def _build_model_by_settings():
    provider = (settings.model_provider or "google").lower()
    if provider == "openrouter":
        return _build_openrouter_model()
    return _build_google_model()


def _system_prompt(count: int) -> str:
    return (
        "You are a flashcard creator. Take in text and create exactly "
        f"{count} flashcards from it. "
        "Return a JSON object that validates as FlashcardDeck: {flashcards}. "
        "Each flashcard has {front, back}. Rules: "
        "- Front and back should each be one sentence long. "
        "- The front is a clear, atomic question or term; the back answers it. "
        "- Plain text only; no markdown and no code fences. "
        "- No extra keys or commentary."
    )


def _build_instruction(text: str) -> str:
    return (
        "Create flashcards for the text below. "
        "Follow the system rules and output only the JSON object.\n\n"
        f"Text: {text}"
    )


def _build_agent(count: int) -> Agent[None, FlashcardDeck]:
    return Agent[None, FlashcardDeck](
        model=_build_model_by_settings(),
        output_type=FlashcardDeck,
        system_prompt=_system_prompt(count),
        retries=3,
    )


async def generate_flashcards(text: str) -> list[Flashcard]:
    """Generate and validate flashcards from the given text."""
    count = settings.generation.cards_per_generation
    res = await _build_agent(count).run(_build_instruction(text))
    return postprocess(res.output, limit=count)


def generate_flashcards_sync(text: str) -> list[Flashcard]:
    """Synchronous wrapper if an event loop is unavailable."""
    count = settings.generation.cards_per_generation
    res = _build_agent(count).run_sync(_build_instruction(text))
    return postprocess(res.output, limit=count)


def postprocess(deck: FlashcardDeck, *, limit: int) -> list[Flashcard]:
    """Strip whitespace, drop half-empty cards and cap the count."""
    clean_cards: list[Flashcard] = []
    for c in deck.flashcards or []:
        front = (c.front or "").strip()
        back = (c.back or "").strip()
        if front and back:
            clean_cards.append(Flashcard(front=front, back=back))

    return clean_cards[: max(0, limit)]
