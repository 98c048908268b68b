"""Mention notification ledger: one row per (comment, mentioned user)."""
import logging
from typing import Iterable, List

from sqlalchemy.orm import Session, selectinload

from feedback_board.config import settings
from feedback_board.errors import AuthorizationError, NotFoundError
from feedback_board.models import CommentMention, FeedbackComment
from feedback_board.schemas import MentionStats
from feedback_board.utils.dates import utcnow
from feedback_board.utils.pagination import paginate

logger = logging.getLogger(__name__)


def _mention_query(db: Session):
    return db.query(CommentMention).options(
        selectinload(CommentMention.comment).selectinload(FeedbackComment.user),
        selectinload(CommentMention.comment).selectinload(FeedbackComment.product_feedback),
        selectinload(CommentMention.mentioned_by_user),
    )


def record_mentions(
    db: Session,
    comment_id: int,
    mentioned_user_ids: Iterable[int],
    mentioned_by_user_id: int,
) -> List[CommentMention]:
    """Insert an unread ledger row for each user not yet recorded on the comment.

    Flushes but does not commit, so the caller controls the transaction.
    Returns the rows created by this call.
    """
    unique_ids: List[int] = []
    for user_id in mentioned_user_ids:
        if user_id in unique_ids:
            continue
        if user_id == mentioned_by_user_id and not settings.RECORD_SELF_MENTIONS:
            continue
        unique_ids.append(user_id)

    if not unique_ids:
        return []

    existing = {
        row[0]
        for row in db.query(CommentMention.mentioned_user_id)
        .filter(
            CommentMention.comment_id == comment_id,
            CommentMention.mentioned_user_id.in_(unique_ids),
        )
        .all()
    }

    created = []
    for user_id in unique_ids:
        if user_id in existing:
            continue
        mention = CommentMention(
            comment_id=comment_id,
            mentioned_user_id=user_id,
            mentioned_by_user_id=mentioned_by_user_id,
            is_read=False,
        )
        db.add(mention)
        created.append(mention)

    db.flush()
    if created:
        logger.info(
            "recorded %d mention(s) on comment %s by user %s",
            len(created),
            comment_id,
            mentioned_by_user_id,
        )
    return created


def get_mention(db: Session, mention_id: int, requesting_user_id: int) -> CommentMention:
    mention = _mention_query(db).filter(CommentMention.id == mention_id).first()
    if mention is None:
        raise NotFoundError("Mention", mention_id)
    if mention.mentioned_user_id != requesting_user_id:
        raise AuthorizationError()
    return mention


def mark_read(db: Session, mention_id: int, requesting_user_id: int) -> CommentMention:
    """Mark a mention read on behalf of the mentioned user.

    Marking an already-read mention again keeps the first ``read_at``.
    """
    mention = get_mention(db, mention_id, requesting_user_id)
    if not mention.is_read:
        mention.is_read = True
        mention.read_at = utcnow()
        db.commit()
        db.refresh(mention)
    return mention


def mark_all_read(db: Session, user_id: int) -> int:
    """Mark every unread mention of ``user_id`` read. Returns the number updated."""
    now = utcnow()
    updated = (
        db.query(CommentMention)
        .filter(
            CommentMention.mentioned_user_id == user_id,
            CommentMention.is_read.is_(False),
        )
        .update(
            {CommentMention.is_read: True, CommentMention.read_at: now, CommentMention.updated_at: now},
            synchronize_session=False,
        )
    )
    db.commit()
    logger.info("user %s marked %d mention(s) read", user_id, updated)
    return updated


def stats(db: Session, user_id: int) -> MentionStats:
    base = db.query(CommentMention).filter(CommentMention.mentioned_user_id == user_id)
    total = base.count()
    unread = base.filter(CommentMention.is_read.is_(False)).count()
    return MentionStats(total_mentions=total, unread_mentions=unread, read_mentions=total - unread)


def list_mentions(db: Session, user_id: int, unread_only: bool = False, page: int = 1, per_page: int = 15):
    """Page through a user's mentions, newest first."""
    query = _mention_query(db).filter(CommentMention.mentioned_user_id == user_id)
    if unread_only:
        query = query.filter(CommentMention.is_read.is_(False))
    query = query.order_by(CommentMention.created_at.desc(), CommentMention.id.desc())
    return paginate(query, page, per_page)
