"""Pydantic schemas for the admin moderation queue."""
from datetime import datetime

from pydantic import BaseModel


class PendingStorySchema(BaseModel):
    id: int
    text: str
    type: str
    state: str | None = None
    moderation_score: float
    moderation_reasons: list[str]
    created_at: datetime

    class Config:
        from_attributes = True


class PendingListSchema(BaseModel):
    items: list[PendingStorySchema]


class RejectionSchema(BaseModel):
    error: str = "rejected"
    reasons: list[str]
    score: float
    id: int | None = None  # audit row, when rejected submissions are kept


class ModerationStatusSchema(BaseModel):
    dictionary_loaded: bool
    dictionary_words: int
    classifier_enabled: bool
    classifier_failures: int


class AdminLoginSchema(BaseModel):
    password: str


class TokenSchema(BaseModel):
    access_token: str
    token_type: str = "bearer"
