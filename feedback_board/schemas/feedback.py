"""Schemas for product feedback items"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from feedback_board.schemas.comment import CommentResponse
from feedback_board.schemas.pagination import PageMeta
from feedback_board.schemas.user import UserSummary


class FeedbackCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1, max_length=100)


class FeedbackUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, min_length=1)
    category: Optional[str] = Field(None, min_length=1, max_length=100)

    @field_validator("title", "description", "category")
    @classmethod
    def reject_explicit_null(cls, value):
        # omitted fields keep their default and skip this check
        if value is None:
            raise ValueError("This field may not be null.")
        return value


class FeedbackResponse(BaseModel):
    id: int
    title: str
    description: str
    category: str
    user_id: int
    created_at: datetime
    updated_at: datetime
    user: UserSummary

    class Config:
        from_attributes = True


class FeedbackSummary(FeedbackResponse):
    comments_count: int = 0


class FeedbackDetail(FeedbackResponse):
    root_comments: List[CommentResponse] = Field(default_factory=list)


class FeedbackPage(PageMeta):
    data: List[FeedbackSummary]


class FeedbackEnvelope(BaseModel):
    message: str
    data: FeedbackResponse
