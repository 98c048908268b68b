"""
Pydantic schemas for request/response validation
"""
from feedback_board.schemas.user import (
    UserCreate,
    UserLogin,
    UserSummary,
    UserResponse,
    AuthResponse,
    MessageResponse,
)
from feedback_board.schemas.pagination import PageMeta
from feedback_board.schemas.comment import CommentCreate, CommentResponse, CommentPage, CommentEnvelope
from feedback_board.schemas.feedback import (
    FeedbackCreate,
    FeedbackUpdate,
    FeedbackResponse,
    FeedbackSummary,
    FeedbackDetail,
    FeedbackPage,
    FeedbackEnvelope,
)
from feedback_board.schemas.mention import (
    FeedbackReference,
    MentionedComment,
    MentionResponse,
    MentionPage,
    MentionEnvelope,
    MentionStats,
)

__all__ = [
    "UserCreate",
    "UserLogin",
    "UserSummary",
    "UserResponse",
    "AuthResponse",
    "MessageResponse",
    "PageMeta",
    "CommentCreate",
    "CommentResponse",
    "CommentPage",
    "CommentEnvelope",
    "FeedbackCreate",
    "FeedbackUpdate",
    "FeedbackResponse",
    "FeedbackSummary",
    "FeedbackDetail",
    "FeedbackPage",
    "FeedbackEnvelope",
    "FeedbackReference",
    "MentionedComment",
    "MentionResponse",
    "MentionPage",
    "MentionEnvelope",
    "MentionStats",
]
