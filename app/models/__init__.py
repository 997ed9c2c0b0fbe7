from app.models.story import Story
from app.models.comment import Comment

__all__ = ["Story", "Comment"]
