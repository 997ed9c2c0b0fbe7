"""Story model: one user-submitted scam account plus its moderation outcome."""
import json

from sqlalchemy import Column, DateTime, Float, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.db.session import Base

STORY_TYPES = ("sms", "phone", "email", "investment", "social", "shopping", "other")

STATUS_PENDING = "pending"
STATUS_APPROVED = "approved"
STATUS_REJECTED = "rejected"


class Story(Base):
    __tablename__ = "stories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    text = Column(Text, nullable=False)  # cleaned text, as shown to users
    type = Column(String(32), nullable=False, default="other")
    state = Column(String(64), nullable=True)  # free-text region tag
    likes = Column(Integer, nullable=False, default=0)

    moderation_status = Column(String(16), nullable=False, default=STATUS_PENDING, index=True)
    moderation_score = Column(Float, nullable=False, default=0.0)
    # reason codes as a JSON array string, same storage on SQLite and Postgres
    moderation_reasons_json = Column(Text, nullable=False, default="[]")

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)

    comments = relationship(
        "Comment",
        back_populates="story",
        order_by="Comment.id",
        passive_deletes=True,
    )

    @property
    def moderation_reasons(self) -> list[str]:
        return json.loads(self.moderation_reasons_json or "[]")

    @moderation_reasons.setter
    def moderation_reasons(self, reasons: list[str]) -> None:
        self.moderation_reasons_json = json.dumps(list(reasons))
