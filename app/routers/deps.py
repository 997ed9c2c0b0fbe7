"""Shared request dependencies."""
from typing import Annotated

from fastapi import Depends, Request

from app.core.config import Settings, get_settings
from app.services.moderation import ModerationEngine
from app.services.stories import LifecyclePolicy


def get_moderation_engine(request: Request) -> ModerationEngine:
    return request.app.state.moderation_engine


def get_lifecycle_policy(settings: Annotated[Settings, Depends(get_settings)]) -> LifecyclePolicy:
    return LifecyclePolicy.from_settings(settings)
