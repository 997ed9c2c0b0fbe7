"""Story lifecycle: create through moderation, list by status, admin transitions.

Status changes, like counters and deletes are single conditional statements
(or one transaction for the comment cascade), never read-then-write.
"""
import logging
from dataclasses import dataclass

from sqlalchemy import case, delete, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.comment import Comment
from app.models.story import STATUS_APPROVED, STATUS_PENDING, STATUS_REJECTED, Story
from app.services.moderation import ModerationEngine, Verdict

logger = logging.getLogger(__name__)

REASON_MANUAL_REVIEW = "manual_review"


class StoryRejected(Exception):
    """Moderation refused the submission; ``story_id`` is set when it was kept for audit."""

    def __init__(self, verdict: Verdict, story_id: int | None = None):
        super().__init__(", ".join(verdict.reasons))
        self.verdict = verdict
        self.story_id = story_id


@dataclass(frozen=True)
class LifecyclePolicy:
    """How an engine verdict becomes a stored status."""

    auto_approve: bool = True
    hold_contact_details: bool = False
    store_rejected: bool = True

    @classmethod
    def from_settings(cls, settings) -> "LifecyclePolicy":
        return cls(
            auto_approve=settings.moderation_auto_approve,
            hold_contact_details=settings.hold_stories_with_contact_details,
            store_rejected=settings.store_rejected_stories,
        )


def status_for_verdict(verdict: Verdict, policy: LifecyclePolicy) -> tuple[str, list[str]]:
    """Map a verdict to (moderation_status, reasons)."""
    if verdict.rejected:
        return STATUS_REJECTED, list(verdict.reasons)
    if policy.hold_contact_details and verdict.contact_details:
        return STATUS_PENDING, verdict.contact_details.reasons()
    if not policy.auto_approve:
        return STATUS_PENDING, [REASON_MANUAL_REVIEW]
    return STATUS_APPROVED, []


async def create_story(
    db: AsyncSession,
    engine: ModerationEngine,
    text: str,
    story_type: str | None = None,
    state: str | None = None,
    policy: LifecyclePolicy = LifecyclePolicy(),
) -> Story:
    """Moderate and persist a submission. Raises StoryRejected on a reject verdict."""
    verdict = await engine.moderate(text)
    status, reasons = status_for_verdict(verdict, policy)

    if status == STATUS_REJECTED and not policy.store_rejected:
        raise StoryRejected(verdict)

    story = Story(
        text=verdict.clean_text,
        type=story_type or verdict.category_guess or "other",
        state=(state or "").strip() or None,
        likes=0,
        moderation_status=status,
        moderation_score=verdict.score,
    )
    story.moderation_reasons = reasons
    db.add(story)
    await db.commit()
    await db.refresh(story)
    logger.info("Story %s stored as %s %s", story.id, status, reasons)

    if status == STATUS_REJECTED:
        raise StoryRejected(verdict, story.id)
    return story


def _comment_counts():
    return (
        select(Comment.story_id, func.count(Comment.id).label("cnt"))
        .group_by(Comment.story_id)
        .subquery()
    )


async def list_approved(db: AsyncSession, limit: int = 100) -> list[tuple[Story, int]]:
    """Approved stories newest first, each with its comment count."""
    counts = _comment_counts()
    result = await db.execute(
        select(Story, func.coalesce(counts.c.cnt, 0))
        .outerjoin(counts, counts.c.story_id == Story.id)
        .where(Story.moderation_status == STATUS_APPROVED)
        .order_by(Story.created_at.desc(), Story.id.desc())
        .limit(limit)
    )
    return [(story, int(cnt)) for story, cnt in result.all()]


async def list_pending(db: AsyncSession, limit: int = 200) -> list[Story]:
    """Review queue, oldest first."""
    result = await db.execute(
        select(Story)
        .where(Story.moderation_status == STATUS_PENDING)
        .order_by(Story.created_at.asc(), Story.id.asc())
        .limit(limit)
    )
    return list(result.scalars().all())


async def _transition_pending(db: AsyncSession, story_id: int, new_status: str) -> bool:
    result = await db.execute(
        update(Story)
        .where(Story.id == story_id, Story.moderation_status == STATUS_PENDING)
        .values(moderation_status=new_status, reviewed_at=func.now())
        .execution_options(synchronize_session=False)
    )
    await db.commit()
    changed = result.rowcount == 1
    if changed:
        logger.info("Story %s: pending -> %s", story_id, new_status)
    return changed


async def approve(db: AsyncSession, story_id: int) -> bool:
    """pending -> approved; False when the story is missing or already decided."""
    return await _transition_pending(db, story_id, STATUS_APPROVED)


async def reject(db: AsyncSession, story_id: int) -> bool:
    """pending -> rejected; False when the story is missing or already decided."""
    return await _transition_pending(db, story_id, STATUS_REJECTED)


async def _update_likes(db: AsyncSession, story_id: int, new_value) -> int | None:
    result = await db.execute(
        update(Story)
        .where(Story.id == story_id)
        .values(likes=new_value)
        .returning(Story.likes)
        .execution_options(synchronize_session=False)
    )
    likes = result.scalar_one_or_none()
    await db.commit()
    return likes


async def like(db: AsyncSession, story_id: int) -> int | None:
    """New like count, or None if the story does not exist."""
    return await _update_likes(db, story_id, Story.likes + 1)


async def unlike(db: AsyncSession, story_id: int) -> int | None:
    """Decrement floored at zero; None if the story does not exist."""
    return await _update_likes(
        db, story_id, case((Story.likes > 0, Story.likes - 1), else_=0)
    )


async def delete_story(db: AsyncSession, story_id: int) -> bool:
    """Remove a story and its comments in one transaction; False if not found."""
    try:
        await db.execute(delete(Comment).where(Comment.story_id == story_id))
        result = await db.execute(
            delete(Story).where(Story.id == story_id).execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            await db.rollback()
            return False
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Delete of story %s failed, rolled back", story_id)
        raise
    logger.info("Story %s deleted with its comments", story_id)
    return True


async def get_story(db: AsyncSession, story_id: int) -> Story | None:
    result = await db.execute(select(Story).where(Story.id == story_id))
    return result.scalar_one_or_none()


async def add_comment(
    db: AsyncSession,
    story_id: int,
    text: str,
    author: str | None = None,
) -> Comment | None:
    """None if the story does not exist."""
    if await get_story(db, story_id) is None:
        return None
    comment = Comment(story_id=story_id, text=text, author=author or None)
    db.add(comment)
    await db.commit()
    await db.refresh(comment)
    return comment


async def list_comments(db: AsyncSession, story_id: int) -> list[Comment]:
    result = await db.execute(
        select(Comment)
        .where(Comment.story_id == story_id)
        .order_by(Comment.created_at.asc(), Comment.id.asc())
    )
    return list(result.scalars().all())
