"""Admin routes: login, pending queue, approve/reject, moderation health."""
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import Settings, get_settings
from app.core.security import ADMIN_ROLE, create_access_token, require_admin, verify_password
from app.db.session import get_db
from app.routers.deps import get_moderation_engine
from app.schemas.moderation import (
    AdminLoginSchema,
    ModerationStatusSchema,
    PendingListSchema,
    PendingStorySchema,
    TokenSchema,
)
from app.services import stories as story_service
from app.services.moderation import ModerationEngine

router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.post("/login", response_model=TokenSchema)
async def login(
    body: AdminLoginSchema,
    settings: Annotated[Settings, Depends(get_settings)],
):
    """Exchange the admin password for a bearer token."""
    if not settings.admin_password_hash or not verify_password(body.password, settings.admin_password_hash):
        raise HTTPException(status_code=401, detail="Invalid credentials")
    token = create_access_token(ADMIN_ROLE, settings, extra={"role": ADMIN_ROLE})
    return TokenSchema(access_token=token)


@router.get("/moderation/pending", response_model=PendingListSchema)
async def pending_stories(
    _admin: Annotated[str, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
):
    """Review queue, oldest first, with score and reasons."""
    stories = await story_service.list_pending(db, limit=settings.pending_list_limit)
    return PendingListSchema(items=[PendingStorySchema.model_validate(s) for s in stories])


@router.post("/moderation/{story_id}/approve")
async def approve_story(
    story_id: int,
    _admin: Annotated[str, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
):
    if not await story_service.approve(db, story_id):
        raise HTTPException(status_code=404, detail="Not found")
    return {"ok": True, "id": story_id}


@router.post("/moderation/{story_id}/reject")
async def reject_story(
    story_id: int,
    _admin: Annotated[str, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
):
    if not await story_service.reject(db, story_id):
        raise HTTPException(status_code=404, detail="Not found")
    return {"ok": True, "id": story_id}


@router.get("/moderation/status", response_model=ModerationStatusSchema)
async def moderation_status(
    _admin: Annotated[str, Depends(require_admin)],
    engine: Annotated[ModerationEngine, Depends(get_moderation_engine)],
):
    """Whether the dictionary and classifier are live, or running fail-open."""
    dictionary = engine.validator.dictionary
    classifier = engine.classifier
    return ModerationStatusSchema(
        dictionary_loaded=dictionary is not None,
        dictionary_words=len(dictionary) if dictionary is not None else 0,
        classifier_enabled=bool(classifier and classifier.enabled),
        classifier_failures=classifier.failure_count if classifier else 0,
    )
