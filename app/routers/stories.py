"""Public story wall: list, submit, like/unlike, delete, comments."""
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import Settings, get_settings
from app.db.session import get_db
from app.routers.deps import get_lifecycle_policy, get_moderation_engine
from app.schemas.moderation import RejectionSchema
from app.schemas.story import (
    CommentCreateSchema,
    CommentOutSchema,
    LikesOutSchema,
    StoryCreateSchema,
    StoryCreatedSchema,
    StoryListSchema,
    StoryOutSchema,
)
from app.services import stories as story_service
from app.services.moderation import ModerationEngine
from app.services.stories import LifecyclePolicy, StoryRejected

router = APIRouter(prefix="/api", tags=["stories"])


@router.get("/stories", response_model=StoryListSchema)
async def list_stories(
    db: Annotated[AsyncSession, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
):
    """Approved stories only, newest first."""
    rows = await story_service.list_approved(db, limit=settings.stories_list_limit)
    items = [
        StoryOutSchema(
            id=story.id,
            text=story.text,
            type=story.type,
            state=story.state,
            likes=story.likes,
            created_at=story.created_at,
            comment_count=count,
        )
        for story, count in rows
    ]
    return StoryListSchema(items=items)


@router.post(
    "/stories",
    response_model=StoryCreatedSchema,
    status_code=201,
    responses={400: {"model": RejectionSchema}},
)
async def create_story(
    body: StoryCreateSchema,
    db: Annotated[AsyncSession, Depends(get_db)],
    engine: Annotated[ModerationEngine, Depends(get_moderation_engine)],
    policy: Annotated[LifecyclePolicy, Depends(get_lifecycle_policy)],
):
    """Submit a story; the answer carries the resulting moderation status."""
    try:
        story = await story_service.create_story(
            db, engine, body.text, story_type=body.type, state=body.state, policy=policy
        )
    except StoryRejected as exc:
        rejection = RejectionSchema(
            reasons=exc.verdict.reasons,
            score=exc.verdict.score,
            id=exc.story_id,
        )
        raise HTTPException(status_code=400, detail=rejection.model_dump())

    return StoryCreatedSchema(id=story.id, moderation_status=story.moderation_status, type=story.type)


@router.post("/stories/{story_id}/like", response_model=LikesOutSchema)
async def like_story(story_id: int, db: Annotated[AsyncSession, Depends(get_db)]):
    likes = await story_service.like(db, story_id)
    if likes is None:
        raise HTTPException(status_code=404, detail="Story not found")
    return LikesOutSchema(id=story_id, likes=likes)


@router.post("/stories/{story_id}/unlike", response_model=LikesOutSchema)
async def unlike_story(story_id: int, db: Annotated[AsyncSession, Depends(get_db)]):
    likes = await story_service.unlike(db, story_id)
    if likes is None:
        raise HTTPException(status_code=404, detail="Story not found")
    return LikesOutSchema(id=story_id, likes=likes)


@router.delete("/stories/{story_id}", status_code=204)
async def delete_story(story_id: int, db: Annotated[AsyncSession, Depends(get_db)]):
    """Hard delete of the story and its comments."""
    if not await story_service.delete_story(db, story_id):
        raise HTTPException(status_code=404, detail="Story not found")
    return Response(status_code=204)


@router.get("/stories/{story_id}/comments", response_model=list[CommentOutSchema])
async def get_comments(story_id: int, db: Annotated[AsyncSession, Depends(get_db)]):
    comments = await story_service.list_comments(db, story_id)
    return [CommentOutSchema.model_validate(c) for c in comments]


@router.post("/stories/{story_id}/comments", response_model=CommentOutSchema, status_code=201)
async def post_comment(
    story_id: int,
    body: CommentCreateSchema,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    comment = await story_service.add_comment(db, story_id, body.text, author=body.author)
    if comment is None:
        raise HTTPException(status_code=404, detail="Story not found")
    return CommentOutSchema.model_validate(comment)
