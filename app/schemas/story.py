"""Pydantic schemas for stories and comments."""
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator

StoryType = Literal["sms", "phone", "email", "investment", "social", "shopping", "other"]


def _strip_required(value: str) -> str:
    value = (value or "").strip()
    if not value:
        raise ValueError("text required")
    return value


class StoryCreateSchema(BaseModel):
    text: str = Field(max_length=5000)
    type: StoryType | None = None
    state: str | None = Field(default=None, max_length=64)

    @field_validator("text")
    @classmethod
    def text_required(cls, value: str) -> str:
        return _strip_required(value)


class StoryCreatedSchema(BaseModel):
    id: int
    moderation_status: str
    type: str


class StoryOutSchema(BaseModel):
    id: int
    text: str
    type: str
    state: str | None = None
    likes: int
    created_at: datetime
    comment_count: int = 0

    class Config:
        from_attributes = True


class StoryListSchema(BaseModel):
    items: list[StoryOutSchema]


class LikesOutSchema(BaseModel):
    id: int
    likes: int


class CommentCreateSchema(BaseModel):
    text: str = Field(max_length=2000)
    author: str | None = Field(default=None, max_length=64)

    @field_validator("text")
    @classmethod
    def text_required(cls, value: str) -> str:
        return _strip_required(value)


class CommentOutSchema(BaseModel):
    id: int
    story_id: int
    text: str
    author: str | None = None
    created_at: datetime

    class Config:
        from_attributes = True
