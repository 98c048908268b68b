"""Schemas for feedback comments"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from feedback_board.schemas.pagination import PageMeta
from feedback_board.schemas.user import UserSummary


class CommentCreate(BaseModel):
    comment: str = Field(..., min_length=1)
    parent_id: Optional[int] = None


class CommentResponse(BaseModel):
    id: int
    product_feedback_id: int
    parent_id: Optional[int]
    comment: str
    created_at: datetime
    updated_at: datetime
    mentioned_users: List[int] = Field(default_factory=list)
    user: UserSummary
    replies: List["CommentResponse"] = Field(default_factory=list)
    parent: Optional["CommentResponse"] = None


CommentResponse.model_rebuild()


class CommentPage(PageMeta):
    data: List[CommentResponse]


class CommentEnvelope(BaseModel):
    message: str
    data: CommentResponse
