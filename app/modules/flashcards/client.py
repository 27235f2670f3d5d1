"""HTTP client for the flashcard generation endpoint.

The endpoint takes the raw prompt text as the request body and answers with a
JSON array of ``{front, back}`` objects.
"""

from __future__ import annotations

from typing import Optional

import httpx
from pydantic import TypeAdapter, ValidationError

from app.core.config import settings
from app.core.logging import get_logger
from app.modules.flashcards.errors import GenerationError
from app.modules.flashcards.models.flashcards import Flashcard

logger = get_logger(__name__)

_cards_adapter = TypeAdapter(list[Flashcard])


class GenerationClient:
    def __init__(
        self,
        endpoint_url: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.endpoint_url = endpoint_url or settings.generation.endpoint_url
        self.timeout = timeout if timeout is not None else settings.generation.timeout_seconds
        # Injected in tests
        self._transport = transport

    async def generate(self, text: str) -> list[Flashcard]:
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                response = await client.post(
                    self.endpoint_url,
                    content=text.encode("utf-8"),
                    headers={"Content-Type": "text/plain; charset=utf-8"},
                )
        except httpx.HTTPError as e:
            raise GenerationError(f"HTTP error calling generation endpoint: {e}") from e

        if not response.is_success:
            raise GenerationError(
                f"Failed to generate flashcards: endpoint returned {response.status_code}"
            )

        try:
            cards = _cards_adapter.validate_json(response.content)
        except ValidationError as e:
            raise GenerationError(f"Malformed generation response: {e}") from e

        logger.debug("Generation endpoint returned %d cards", len(cards))
        return cards


def get_generation_client() -> GenerationClient:
    return GenerationClient()
