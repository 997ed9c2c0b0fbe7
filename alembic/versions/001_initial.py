"""Initial tables: stories, story_comments.

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "stories",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("text", sa.Text(), nullable=False),
        sa.Column("type", sa.String(32), nullable=False, server_default="other"),
        sa.Column("state", sa.String(64), nullable=True),
        sa.Column("likes", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("moderation_status", sa.String(16), nullable=False, server_default="pending"),
        sa.Column("moderation_score", sa.Float(), nullable=False, server_default=sa.text("0")),
        sa.Column("moderation_reasons_json", sa.Text(), nullable=False, server_default="[]"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("reviewed_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_stories_moderation_status"), "stories", ["moderation_status"], unique=False)
    op.create_index(op.f("ix_stories_created_at"), "stories", ["created_at"], unique=False)

    op.create_table(
        "story_comments",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("story_id", sa.Integer(), nullable=False),
        sa.Column("text", sa.Text(), nullable=False),
        sa.Column("author", sa.String(64), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["story_id"], ["stories.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_story_comments_story_id"), "story_comments", ["story_id"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_story_comments_story_id"), table_name="story_comments")
    op.drop_table("story_comments")
    op.drop_index(op.f("ix_stories_created_at"), table_name="stories")
    op.drop_index(op.f("ix_stories_moderation_status"), table_name="stories")
    op.drop_table("stories")
