"""Feedback Board Database Models"""
from feedback_board.models.user import User
from feedback_board.models.access_token import AccessToken
from feedback_board.models.product_feedback import ProductFeedback
from feedback_board.models.feedback_comment import FeedbackComment
from feedback_board.models.comment_mention import CommentMention

__all__ = [
    "User",
    "AccessToken",
    "ProductFeedback",
    "FeedbackComment",
    "CommentMention",
]
