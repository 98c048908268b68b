"""Comment mention model"""
from sqlalchemy import Column, Integer, Boolean, ForeignKey, DateTime, Index, UniqueConstraint
from sqlalchemy.orm import relationship

from feedback_board.database import Base
from feedback_board.utils.dates import utcnow


class CommentMention(Base):
    __tablename__ = "comment_mentions"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    comment_id = Column(
        Integer, ForeignKey("product_feedback_comments.id", ondelete="CASCADE"), nullable=False, index=True
    )
    mentioned_user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    mentioned_by_user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    is_read = Column(Boolean, default=False, nullable=False)
    read_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    # Relationships
    comment = relationship("FeedbackComment", back_populates="mentions")
    mentioned_user = relationship("User", foreign_keys=[mentioned_user_id], back_populates="comment_mentions")
    mentioned_by_user = relationship("User", foreign_keys=[mentioned_by_user_id])

    __table_args__ = (
        UniqueConstraint("comment_id", "mentioned_user_id", name="unique_comment_mention"),
        Index("ix_comment_mentions_user_read", "mentioned_user_id", "is_read"),
    )
