"""Feedback comment endpoints"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from feedback_board.database import get_db
from feedback_board.dependencies import get_current_user
from feedback_board.models import User
from feedback_board.schemas import CommentCreate, CommentEnvelope, CommentPage, CommentResponse
from feedback_board.services import comments as comment_service

router = APIRouter()


@router.get("/{feedback_id}/comments", response_model=CommentPage)
def list_comments(
    feedback_id: int,
    depth: Optional[int] = Query(None, ge=0, description="Reply levels to include; omit for the full tree"),
    page: int = Query(1, ge=1),
    per_page: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
):
    """Root comments, newest first, each with its threaded replies."""
    return comment_service.list_root_comments(db, feedback_id, depth=depth, page=page, per_page=per_page)


@router.post("/{feedback_id}/comments", response_model=CommentEnvelope, status_code=status.HTTP_201_CREATED)
def create_comment(
    feedback_id: int,
    comment_in: CommentCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Post a comment or a reply and notify the users it mentions."""
    comment = comment_service.create_comment(
        db,
        feedback_id,
        current_user.id,
        comment_in.comment,
        parent_id=comment_in.parent_id,
    )
    return CommentEnvelope(message="Comment created successfully", data=comment)


@router.get("/{feedback_id}/comments/{comment_id}", response_model=CommentResponse)
def get_comment(
    feedback_id: int,
    comment_id: int,
    db: Session = Depends(get_db),
):
    return comment_service.get_comment(db, feedback_id, comment_id)
