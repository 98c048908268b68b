"""Comment tree store: threaded comments on a feedback item."""
import logging
from typing import Dict, List, Optional

from sqlalchemy.orm import Session, selectinload

from feedback_board.errors import NotFoundError, ValidationError
from feedback_board.models import FeedbackComment, ProductFeedback
from feedback_board.sanitizer import sanitize_html
from feedback_board.schemas import CommentResponse, UserSummary
from feedback_board.services.ledger import record_mentions
from feedback_board.services.mentions import extract_mentions
from feedback_board.utils.dates import as_utc
from feedback_board.utils.pagination import clamp_per_page, page_meta

logger = logging.getLogger(__name__)

ChildMap = Dict[Optional[int], List[FeedbackComment]]


def _comment_query(db: Session):
    return db.query(FeedbackComment).options(
        selectinload(FeedbackComment.user),
        selectinload(FeedbackComment.mentions),
    )


def _serialize_comment(
    comment: FeedbackComment,
    replies: Optional[List[CommentResponse]] = None,
    parent: Optional[CommentResponse] = None,
) -> CommentResponse:
    return CommentResponse(
        id=comment.id,
        product_feedback_id=comment.product_feedback_id,
        parent_id=comment.parent_id,
        comment=comment.comment,
        created_at=comment.created_at,
        updated_at=comment.updated_at,
        mentioned_users=comment.mentioned_user_ids,
        user=UserSummary.model_validate(comment.user),
        replies=replies or [],
        parent=parent,
    )


def _children_by_parent(comments: List[FeedbackComment]) -> ChildMap:
    children: ChildMap = {}
    for comment in sorted(comments, key=lambda c: (as_utc(c.created_at), c.id)):
        children.setdefault(comment.parent_id, []).append(comment)
    return children


def _build_subtree(comment: FeedbackComment, children: ChildMap, depth: Optional[int]) -> CommentResponse:
    """Serialize ``comment`` with replies nested up to ``depth`` levels (None = all)."""
    replies: List[CommentResponse] = []
    if depth is None or depth > 0:
        next_depth = None if depth is None else depth - 1
        replies = [_build_subtree(child, children, next_depth) for child in children.get(comment.id, [])]
    return _serialize_comment(comment, replies)


def _get_feedback_or_404(db: Session, feedback_id: int) -> ProductFeedback:
    feedback = db.get(ProductFeedback, feedback_id)
    if feedback is None:
        raise NotFoundError("Product feedback", feedback_id)
    return feedback


def _get_scoped_comment(db: Session, feedback_id: int, comment_id: int) -> FeedbackComment:
    comment = (
        _comment_query(db)
        .filter(
            FeedbackComment.id == comment_id,
            FeedbackComment.product_feedback_id == feedback_id,
        )
        .first()
    )
    if comment is None:
        raise NotFoundError("Comment", comment_id)
    return comment


def create_comment(
    db: Session,
    feedback_id: int,
    author_id: int,
    raw_text: str,
    parent_id: Optional[int] = None,
) -> CommentResponse:
    """Store a comment (or reply) and its mention ledger rows in one transaction."""
    feedback = _get_feedback_or_404(db, feedback_id)

    if parent_id is not None:
        parent = (
            db.query(FeedbackComment)
            .filter(
                FeedbackComment.id == parent_id,
                FeedbackComment.product_feedback_id == feedback.id,
            )
            .first()
        )
        if parent is None:
            raise NotFoundError("Parent comment", parent_id)

    clean_text = sanitize_html(raw_text)
    if not clean_text:
        raise ValidationError.for_field("comment", "The comment field is required.")

    try:
        comment = FeedbackComment(
            product_feedback_id=feedback.id,
            user_id=author_id,
            parent_id=parent_id,
            comment=clean_text,
        )
        db.add(comment)
        db.flush()

        mentioned_user_ids = extract_mentions(db, clean_text)
        record_mentions(db, comment.id, mentioned_user_ids, author_id)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("user %s commented on feedback %s (comment %s)", author_id, feedback.id, comment.id)
    return get_comment(db, feedback.id, comment.id)


def load_reply_levels(
    db: Session,
    feedback_id: int,
    root_ids: List[int],
    depth: Optional[int],
) -> List[FeedbackComment]:
    """Load the replies below ``root_ids`` one level per query, stopping at ``depth``."""
    replies: List[FeedbackComment] = []
    frontier = list(root_ids)
    level = 0
    while frontier and (depth is None or level < depth):
        batch = (
            _comment_query(db)
            .filter(
                FeedbackComment.product_feedback_id == feedback_id,
                FeedbackComment.parent_id.in_(frontier),
            )
            .all()
        )
        replies.extend(batch)
        frontier = [comment.id for comment in batch]
        level += 1
    return replies


def build_root_trees(
    db: Session,
    feedback_id: int,
    roots: List[FeedbackComment],
    depth: Optional[int],
) -> List[CommentResponse]:
    """Attach reply subtrees to already loaded root comments."""
    if not roots:
        return []

    replies = load_reply_levels(db, feedback_id, [root.id for root in roots], depth)
    children = _children_by_parent(replies)
    return [_build_subtree(root, children, depth) for root in roots]


def list_root_comments(
    db: Session,
    feedback_id: int,
    depth: Optional[int] = None,
    page: int = 1,
    per_page: int = 10,
) -> dict:
    """Root comments newest first, one page at a time, each with its reply tree."""
    _get_feedback_or_404(db, feedback_id)

    page = max(1, page)
    per_page = clamp_per_page(per_page)
    roots_query = _comment_query(db).filter(
        FeedbackComment.product_feedback_id == feedback_id,
        FeedbackComment.parent_id.is_(None),
    )
    total = roots_query.count()
    roots = (
        roots_query.order_by(FeedbackComment.created_at.desc(), FeedbackComment.id.desc())
        .offset((page - 1) * per_page)
        .limit(per_page)
        .all()
    )
    return {"data": build_root_trees(db, feedback_id, roots, depth), **page_meta(total, page, per_page)}


def get_comment(db: Session, feedback_id: int, comment_id: int) -> CommentResponse:
    """A single comment with its immediate parent and immediate replies."""
    comment = _get_scoped_comment(db, feedback_id, comment_id)

    parent = None
    if comment.parent_id is not None:
        parent = _serialize_comment(_get_scoped_comment(db, feedback_id, comment.parent_id))

    replies = (
        _comment_query(db)
        .filter(FeedbackComment.parent_id == comment.id)
        .order_by(FeedbackComment.created_at.asc(), FeedbackComment.id.asc())
        .all()
    )
    return _serialize_comment(comment, [_serialize_comment(reply) for reply in replies], parent)
