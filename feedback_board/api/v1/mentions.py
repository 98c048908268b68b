"""Mention notification endpoints"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from feedback_board.config import settings
from feedback_board.database import get_db
from feedback_board.dependencies import get_current_user
from feedback_board.models import User
from feedback_board.schemas import MentionEnvelope, MentionPage, MentionResponse, MentionStats, MessageResponse
from feedback_board.services import ledger

router = APIRouter()


@router.get("", response_model=MentionPage)
def list_mentions(
    page: int = Query(1, ge=1),
    per_page: int = Query(settings.DEFAULT_PER_PAGE, ge=1, le=settings.MAX_PER_PAGE),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Mentions of the current user, newest first."""
    return ledger.list_mentions(db, current_user.id, page=page, per_page=per_page)


@router.get("/unread", response_model=MentionPage)
def list_unread_mentions(
    page: int = Query(1, ge=1),
    per_page: int = Query(settings.DEFAULT_PER_PAGE, ge=1, le=settings.MAX_PER_PAGE),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return ledger.list_mentions(db, current_user.id, unread_only=True, page=page, per_page=per_page)


@router.get("/stats", response_model=MentionStats)
def mention_stats(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return ledger.stats(db, current_user.id)


@router.post("/mark-all-read", response_model=MessageResponse)
def mark_all_read(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    updated = ledger.mark_all_read(db, current_user.id)
    return MessageResponse(message=f"Marked {updated} mentions as read")


@router.get("/{mention_id}", response_model=MentionResponse)
def get_mention(
    mention_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return ledger.get_mention(db, mention_id, current_user.id)


@router.patch("/{mention_id}/read", response_model=MentionEnvelope)
def mark_mention_read(
    mention_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    mention = ledger.mark_read(db, mention_id, current_user.id)
    return MentionEnvelope(message="Mention marked as read", data=MentionResponse.model_validate(mention))
