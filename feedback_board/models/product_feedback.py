"""
Product Feedback Model
"""
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from feedback_board.database import Base
from feedback_board.utils.dates import utcnow


class ProductFeedback(Base):
    __tablename__ = "product_feedbacks"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    category = Column(String(100), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    # Relationships
    user = relationship("User", back_populates="feedbacks")
    comments = relationship(
        "FeedbackComment",
        back_populates="product_feedback",
        cascade="all, delete-orphan",
        order_by="FeedbackComment.created_at",
    )
