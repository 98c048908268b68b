"""Feedback items: author-owned, carrying their root comment trees."""
import logging
from typing import Any, Dict, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from feedback_board.config import settings
from feedback_board.errors import AuthorizationError, NotFoundError, ValidationError
from feedback_board.models import FeedbackComment, ProductFeedback
from feedback_board.schemas import FeedbackDetail, FeedbackResponse, FeedbackSummary
from feedback_board.services.comments import build_root_trees
from feedback_board.utils.pagination import paginate

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("title", "description", "category")


def _feedback_query(db: Session):
    return db.query(ProductFeedback).options(selectinload(ProductFeedback.user))


def _load_feedback(db: Session, feedback_id: int) -> ProductFeedback:
    feedback = _feedback_query(db).filter(ProductFeedback.id == feedback_id).first()
    if feedback is None:
        raise NotFoundError("Product feedback", feedback_id)
    return feedback


def _ensure_author(feedback: ProductFeedback, requesting_user_id: int) -> None:
    if feedback.user_id != requesting_user_id:
        raise AuthorizationError()


def create_feedback(db: Session, author_id: int, title: str, description: str, category: str) -> ProductFeedback:
    feedback = ProductFeedback(title=title, description=description, category=category, user_id=author_id)
    db.add(feedback)
    db.commit()
    logger.info("user %s created feedback %s", author_id, feedback.id)
    return _load_feedback(db, feedback.id)


def update_feedback(
    db: Session,
    feedback_id: int,
    requesting_user_id: int,
    changes: Dict[str, Any],
) -> ProductFeedback:
    """Apply a partial update; only the author may edit."""
    feedback = _load_feedback(db, feedback_id)
    _ensure_author(feedback, requesting_user_id)

    updates = {field: value for field, value in changes.items() if field in EDITABLE_FIELDS}
    for field, value in updates.items():
        if value is None:
            raise ValidationError.for_field(field, "This field may not be null.")

    for field, value in updates.items():
        setattr(feedback, field, value)

    db.commit()
    return _load_feedback(db, feedback.id)


def delete_feedback(db: Session, feedback_id: int, requesting_user_id: int) -> None:
    """Delete a feedback item with all of its comments and their mentions."""
    feedback = _load_feedback(db, feedback_id)
    _ensure_author(feedback, requesting_user_id)

    db.delete(feedback)
    db.commit()
    logger.info("user %s deleted feedback %s", requesting_user_id, feedback_id)


def get_feedback(db: Session, feedback_id: int, depth: Optional[int] = None) -> FeedbackDetail:
    """A feedback item with every root comment (newest first) and replies to ``depth``."""
    feedback = _load_feedback(db, feedback_id)
    if depth is None:
        depth = settings.FEEDBACK_COMMENT_DEPTH

    roots = (
        db.query(FeedbackComment)
        .options(selectinload(FeedbackComment.user), selectinload(FeedbackComment.mentions))
        .filter(
            FeedbackComment.product_feedback_id == feedback.id,
            FeedbackComment.parent_id.is_(None),
        )
        .order_by(FeedbackComment.created_at.desc(), FeedbackComment.id.desc())
        .all()
    )
    base = FeedbackResponse.model_validate(feedback)
    return FeedbackDetail(**base.model_dump(), root_comments=build_root_trees(db, feedback.id, roots, depth))


def list_feedback(db: Session, page: int = 1, per_page: int = 15) -> dict:
    """Page through feedback items, newest first, with comment counts."""
    query = _feedback_query(db).order_by(ProductFeedback.created_at.desc(), ProductFeedback.id.desc())
    result = paginate(query, page, per_page)

    ids = [feedback.id for feedback in result["data"]]
    counts: Dict[int, int] = {}
    if ids:
        counts = dict(
            db.query(FeedbackComment.product_feedback_id, func.count(FeedbackComment.id))
            .filter(FeedbackComment.product_feedback_id.in_(ids))
            .group_by(FeedbackComment.product_feedback_id)
            .all()
        )

    result["data"] = [
        FeedbackSummary(
            **FeedbackResponse.model_validate(feedback).model_dump(),
            comments_count=counts.get(feedback.id, 0),
        )
        for feedback in result["data"]
    ]
    return result
