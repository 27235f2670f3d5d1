from __future__ import annotations

from typing import Annotated, Optional

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.db.base import get_session
from app.core.db_services import FlashcardStore
from app.core.logging import get_logger
from app.modules.auth import (
    AuthenticatedUser,
    InvalidTokenError,
    ProviderTokenVerifier,
    get_token_verifier,
)
from app.modules.flashcards.client import GenerationClient, get_generation_client
from app.modules.flashcards.studio import FlashcardStudio

logger = get_logger(__name__)

SIGN_IN_MESSAGE = "Please sign in to continue."


def _unauthorized() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"message": SIGN_IN_MESSAGE, "sign_in_url": settings.auth.sign_in_url},
        headers={"WWW-Authenticate": "Bearer"},
    )


async def current_user(
    access_token: Optional[str] = None,
    authorization: Optional[str] = Header(default=None),
    verifier: ProviderTokenVerifier = Depends(get_token_verifier),
) -> AuthenticatedUser:
    """Resolve current user from Authorization header or `access_token` query param.

    The query param fallback is for clients where setting custom headers is
    inconvenient.
    """
    token: Optional[str] = None
    if authorization and authorization.lower().startswith("bearer "):
        token = authorization.split(" ", 1)[1].strip()
    elif access_token:
        token = access_token

    if not token:
        raise _unauthorized()

    try:
        return await verifier.verify(token)
    except InvalidTokenError as e:
        logger.info(f"Rejected token: {e}")
        raise _unauthorized() from e


CurrentUser = Annotated[AuthenticatedUser, Depends(current_user)]


def get_store(session: AsyncSession = Depends(get_session)) -> FlashcardStore:
    return FlashcardStore(session)


def get_studio(
    store: FlashcardStore = Depends(get_store),
    client: GenerationClient = Depends(get_generation_client),
) -> FlashcardStudio:
    return FlashcardStudio(store, client)
