"""SQLAlchemy declarative base and model imports for Alembic."""
from app.db.session import Base

# Import all models so Alembic can see them
from app.models.comment import Comment  # noqa: F401
from app.models.story import Story  # noqa: F401

__all__ = ["Base", "Story", "Comment"]
