from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.apis.deps import CurrentUser, get_store, get_studio
from app.core.config import settings
from app.core.db.schemas.flashcards import FlashcardSet as DBSet
from app.core.db_services import FlashcardStore
from app.core.logging import get_logger
from app.modules.flashcards.errors import (
    GENERATE_FAILED_MESSAGE,
    SAVE_FAILED_MESSAGE,
    FlashcardError,
    SetNotFoundError,
)
from app.modules.flashcards.studio import FlashcardStudio
from app.modules.usage.quota import UsageSnapshot
from .schemas import (
    FlashcardSetRead,
    FlashcardSetSummary,
    GenerateRequest,
    GenerateResponse,
    GenerationRecordRead,
    SaveSetRequest,
    SaveSetResponse,
    UsageRead,
)


router = APIRouter()

logger = get_logger(__name__)


def _usage_read(usage: UsageSnapshot) -> UsageRead:
    return UsageRead(
        count=usage.count,
        limit=usage.limit,
        remaining=usage.remaining,
        month=usage.month,
    )


def _set_summary(s: DBSet) -> FlashcardSetSummary:
    return FlashcardSetSummary(
        name=s.name,
        card_count=len(s.flashcards or []),
        created_at=s.created_at,
        updated_at=s.updated_at,
    )


def _set_read(s: DBSet) -> FlashcardSetRead:
    return FlashcardSetRead(
        **_set_summary(s).model_dump(),
        flashcards=s.flashcards or [],
    )


def _to_http(e: FlashcardError, user_id: str) -> HTTPException:
    if e.status_code >= 500:
        logger.error(f"Flashcard request failed: {e}", extra={"user_id": user_id})
    return HTTPException(status_code=e.status_code, detail=e.message)


@router.post(
    f"/{settings.app.version}/flashcards/generate",
    response_model=GenerateResponse,
    status_code=status.HTTP_200_OK,
    tags=["flashcards"],
)
async def generate_flashcards(
    req: GenerateRequest,
    user: CurrentUser,
    studio: FlashcardStudio = Depends(get_studio),
) -> GenerateResponse:
    try:
        outcome = await studio.generate(user.id, req.text)
    except FlashcardError as e:
        raise _to_http(e, user.id) from e
    except Exception as e:
        logger.exception("Error generating flashcards", extra={"user_id": user.id})
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=GENERATE_FAILED_MESSAGE,
        ) from e

    return GenerateResponse(
        prompt=outcome.prompt,
        flashcards=outcome.flashcards,
        usage=_usage_read(outcome.usage),
    )


@router.post(
    f"/{settings.app.version}/flashcards/sets",
    response_model=SaveSetResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["flashcards"],
)
async def save_flashcard_set(
    req: SaveSetRequest,
    user: CurrentUser,
    studio: FlashcardStudio = Depends(get_studio),
) -> SaveSetResponse:
    try:
        outcome = await studio.save(user.id, req.name, req.flashcards)
    except FlashcardError as e:
        raise _to_http(e, user.id) from e
    except Exception as e:
        logger.exception("Error saving flashcards", extra={"user_id": user.id})
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=SAVE_FAILED_MESSAGE,
        ) from e

    return SaveSetResponse(
        message=outcome.message,
        redirect_to=outcome.redirect_to,
        set=_set_read(outcome.flashcard_set),
    )


@router.get(
    f"/{settings.app.version}/flashcards/sets",
    response_model=list[FlashcardSetSummary],
    tags=["flashcards"],
)
async def list_flashcard_sets(
    user: CurrentUser,
    store: FlashcardStore = Depends(get_store),
) -> list[FlashcardSetSummary]:
    sets = await store.list_sets(user.id)
    return [_set_summary(s) for s in sets]


@router.get(
    f"/{settings.app.version}/flashcards/sets/{{name}}",
    response_model=FlashcardSetRead,
    tags=["flashcards"],
)
async def get_flashcard_set(
    name: str,
    user: CurrentUser,
    store: FlashcardStore = Depends(get_store),
) -> FlashcardSetRead:
    s = await store.get_set(user.id, name)
    if not s:
        raise HTTPException(status_code=404, detail=SetNotFoundError.message)
    return _set_read(s)


@router.get(
    f"/{settings.app.version}/flashcards/history",
    response_model=list[GenerationRecordRead],
    tags=["flashcards"],
)
async def list_generation_history(
    user: CurrentUser,
    limit: int = Query(default=20, ge=1, le=100),
    store: FlashcardStore = Depends(get_store),
) -> list[GenerationRecordRead]:
    records = await store.list_generations(user.id, limit=limit)
    return [
        GenerationRecordRead(
            id=r.id,
            prompt=r.prompt,
            flashcards=r.flashcards or [],
            created_at=r.created_at,
        )
        for r in records
    ]


@router.get(
    f"/{settings.app.version}/usage",
    response_model=UsageRead,
    tags=["usage"],
)
async def get_usage(
    user: CurrentUser,
    studio: FlashcardStudio = Depends(get_studio),
) -> UsageRead:
    return _usage_read(await studio.usage(user.id))
