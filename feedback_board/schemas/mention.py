"""Schemas for the mention ledger"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from feedback_board.schemas.pagination import PageMeta
from feedback_board.schemas.user import UserSummary


class FeedbackReference(BaseModel):
    id: int
    title: str

    class Config:
        from_attributes = True


class MentionedComment(BaseModel):
    id: int
    product_feedback_id: int
    parent_id: Optional[int]
    comment: str
    created_at: datetime
    user: UserSummary
    product_feedback: FeedbackReference

    class Config:
        from_attributes = True


class MentionResponse(BaseModel):
    id: int
    comment_id: int
    mentioned_user_id: int
    mentioned_by_user_id: int
    is_read: bool
    read_at: Optional[datetime]
    created_at: datetime
    updated_at: datetime
    comment: MentionedComment
    mentioned_by_user: UserSummary

    class Config:
        from_attributes = True


class MentionPage(PageMeta):
    data: List[MentionResponse]


class MentionEnvelope(BaseModel):
    message: str
    data: MentionResponse


class MentionStats(BaseModel):
    total_mentions: int
    unread_mentions: int
    read_mentions: int
