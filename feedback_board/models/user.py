"""
User Model
"""
from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship, validates

from feedback_board.database import Base
from feedback_board.utils.dates import utcnow


def normalize_name(name: str) -> str:
    """Normalised form of a display name used for mention lookups."""
    return (name or "").strip().casefold()


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    # casefolded in Python; SQL lower() does not fold non-ASCII letters on SQLite
    name_key = Column(String(255), nullable=False, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    # Relationships
    access_tokens = relationship("AccessToken", back_populates="user", cascade="all, delete-orphan")
    feedbacks = relationship("ProductFeedback", back_populates="user", cascade="all, delete-orphan")
    comments = relationship(
        "FeedbackComment",
        back_populates="user",
        cascade="all, delete-orphan",
        foreign_keys="FeedbackComment.user_id",
    )
    comment_mentions = relationship(
        "CommentMention",
        back_populates="mentioned_user",
        cascade="all, delete-orphan",
        foreign_keys="CommentMention.mentioned_user_id",
    )

    @validates("name")
    def _sync_name_key(self, key, value):
        self.name_key = normalize_name(value)
        return value
