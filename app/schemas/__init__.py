from app.schemas.story import (
    CommentCreateSchema,
    CommentOutSchema,
    LikesOutSchema,
    StoryCreateSchema,
    StoryCreatedSchema,
    StoryListSchema,
    StoryOutSchema,
)
from app.schemas.moderation import (
    AdminLoginSchema,
    ModerationStatusSchema,
    PendingListSchema,
    PendingStorySchema,
    RejectionSchema,
    TokenSchema,
)

__all__ = [
    "AdminLoginSchema",
    "CommentCreateSchema",
    "CommentOutSchema",
    "LikesOutSchema",
    "ModerationStatusSchema",
    "PendingListSchema",
    "PendingStorySchema",
    "RejectionSchema",
    "StoryCreateSchema",
    "StoryCreatedSchema",
    "StoryListSchema",
    "StoryOutSchema",
    "TokenSchema",
]
