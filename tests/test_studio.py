"""Tests for the generate and save handlers."""
from datetime import datetime, timezone

import pytest

from app.core.db_services import FlashcardStore
from app.modules.flashcards.errors import (
    EmptyFlashcardSetError,
    EmptyPromptError,
    EmptySetNameError,
    GenerationError,
    QuotaExceededError,
)
from app.modules.flashcards.models.flashcards import Flashcard
from app.modules.flashcards.studio import FlashcardStudio

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def studio(store: FlashcardStore, fake_client) -> FlashcardStudio:
    return FlashcardStudio(store, fake_client, monthly_limit=2, clock=lambda: NOW)


async def _seed_usage(store: FlashcardStore, user_id: str, count: int, month: str) -> None:
    await store.record_generation(
        user_id,
        "seed",
        [],
        {
            "monthly_generation_count": count,
            "last_generation_month": month,
            "last_generation_at": datetime(2026, 1, 1),
        },
    )


async def test_generate_returns_cards_and_records_usage(studio, store, fake_client) -> None:
    outcome = await studio.generate("user_1", "Key facts about the Solar System")

    assert fake_client.calls == ["Key facts about the Solar System"]
    assert outcome.prompt == "Key facts about the Solar System"
    assert outcome.flashcards == fake_client.cards
    assert outcome.usage.count == 1
    assert outcome.usage.remaining == 1

    user = await store.get_user("user_1")
    assert user.monthly_generation_count == 1
    assert user.last_generation_month == "2026-10"

    history = await store.list_generations("user_1")
    assert len(history) == 1
    assert history[0].flashcards == [c.model_dump() for c in fake_client.cards]


@pytest.mark.parametrize("text", ["", "   ", "\n\t"])
async def test_generate_rejects_blank_text(studio, fake_client, text) -> None:
    with pytest.raises(EmptyPromptError):
        await studio.generate("user_1", text)
    assert fake_client.calls == []


async def test_quota_check_blocks_the_call(studio, store, fake_client) -> None:
    await _seed_usage(store, "user_1", 2, "2026-10")

    with pytest.raises(QuotaExceededError) as exc:
        await studio.generate("user_1", "More planets")

    assert exc.value.limit == 2
    assert fake_client.calls == []
    assert len(await store.list_generations("user_1")) == 1


async def test_counter_resets_in_new_month(studio, store, fake_client) -> None:
    await _seed_usage(store, "user_1", 2, "2026-09")

    outcome = await studio.generate("user_1", "Moons of Jupiter")

    assert outcome.usage.count == 1
    user = await store.get_user("user_1")
    assert user.monthly_generation_count == 1
    assert user.last_generation_month == "2026-10"


async def test_generation_failure_writes_nothing(studio, store, fake_client) -> None:
    fake_client.error = GenerationError("endpoint returned 500")

    with pytest.raises(GenerationError):
        await studio.generate("user_1", "Comets")

    assert await store.get_user("user_1") is None
    assert await store.list_generations("user_1") == []


async def test_usage_for_unknown_user(studio) -> None:
    usage = await studio.usage("nobody")
    assert usage.count == 0
    assert usage.limit == 2
    assert usage.month == "2026-10"


async def test_save_stores_named_set(studio, store) -> None:
    cards = [Flashcard(front="Largest planet?", back="Jupiter.")]
    outcome = await studio.save("user_1", "Planets", cards)

    assert outcome.message == "Flashcards saved successfully!"
    assert outcome.redirect_to == "/flashcards"
    assert outcome.flashcard_set.name == "Planets"
    assert (await store.get_set("user_1", "Planets")) is not None


@pytest.mark.parametrize("name", ["", "  "])
async def test_save_rejects_blank_name(studio, store, name) -> None:
    with pytest.raises(EmptySetNameError) as exc:
        await studio.save("user_1", name, [Flashcard(front="a", back="b")])
    assert exc.value.message == "Please enter a name for your flashcards set."
    assert await store.list_sets("user_1") == []


async def test_save_rejects_empty_set(studio, store) -> None:
    with pytest.raises(EmptyFlashcardSetError):
        await studio.save("user_1", "Planets", [])
    assert await store.list_sets("user_1") == []


async def test_blank_name_reported_before_empty_cards(studio) -> None:
    with pytest.raises(EmptySetNameError):
        await studio.save("user_1", " ", [])
