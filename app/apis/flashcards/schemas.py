from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from app.modules.flashcards.models.flashcards import Flashcard


class GenerateRequest(BaseModel):
    text: str = Field(default="", description="Subject, theme or notes to turn into flashcards")


class UsageRead(BaseModel):
    count: int
    limit: int
    remaining: int
    month: str


class GenerateResponse(BaseModel):
    prompt: str
    flashcards: list[Flashcard] = Field(default_factory=list)
    usage: UsageRead


class SaveSetRequest(BaseModel):
    name: str = Field(default="", description="Set name; unique per user")
    flashcards: list[Flashcard] = Field(default_factory=list)


class FlashcardSetSummary(BaseModel):
    name: str
    card_count: int
    created_at: datetime
    updated_at: datetime


class FlashcardSetRead(FlashcardSetSummary):
    flashcards: list[Flashcard] = Field(default_factory=list)


class SaveSetResponse(BaseModel):
    message: str
    redirect_to: str
    set: FlashcardSetRead


class GenerationRecordRead(BaseModel):
    id: int
    prompt: str
    flashcards: list[Flashcard] = Field(default_factory=list)
    created_at: datetime
