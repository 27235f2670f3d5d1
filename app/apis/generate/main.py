from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request, status

from app.core.logging import get_logger
from app.modules.flashcards.errors import GENERATE_FAILED_MESSAGE, EmptyPromptError
from app.modules.flashcards.generator import generate_flashcards
from app.modules.flashcards.models.flashcards import Flashcard


router = APIRouter()

logger = get_logger(__name__)


@router.post(
    "/api/generate",
    response_model=list[Flashcard],
    status_code=status.HTTP_200_OK,
    tags=["generate"],
)
async def generate(request: Request) -> list[Flashcard]:
    """Raw text in, JSON array of ``{front, back}`` out."""
    body = await request.body()
    text = body.decode("utf-8", errors="replace")
    if not text.strip():
        raise HTTPException(status_code=400, detail=EmptyPromptError.message)

    try:
        return await generate_flashcards(text)
    except Exception as e:
        logger.exception("Flashcard generation failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=GENERATE_FAILED_MESSAGE,
        ) from e
