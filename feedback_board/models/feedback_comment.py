"""Feedback comment model"""
from sqlalchemy import Column, Integer, Text, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship

from feedback_board.database import Base
from feedback_board.utils.dates import utcnow


class FeedbackComment(Base):
    __tablename__ = "product_feedback_comments"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    product_feedback_id = Column(
        Integer, ForeignKey("product_feedbacks.id", ondelete="CASCADE"), nullable=False
    )
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    parent_id = Column(
        Integer, ForeignKey("product_feedback_comments.id", ondelete="CASCADE"), nullable=True, index=True
    )
    comment = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    # Relationships
    product_feedback = relationship("ProductFeedback", back_populates="comments")
    user = relationship("User", foreign_keys=[user_id], back_populates="comments")
    parent = relationship("FeedbackComment", remote_side=[id], back_populates="replies")
    replies = relationship(
        "FeedbackComment",
        back_populates="parent",
        cascade="all, delete-orphan",
        order_by="FeedbackComment.created_at",
    )
    mentions = relationship(
        "CommentMention",
        back_populates="comment",
        cascade="all, delete-orphan",
        order_by="CommentMention.id",
    )

    __table_args__ = (
        Index("ix_feedback_comments_feedback_created", "product_feedback_id", "created_at"),
    )

    @property
    def mentioned_user_ids(self):
        """Mentioned user ids, derived from the ledger in insertion order."""
        return [mention.mentioned_user_id for mention in self.mentions]
