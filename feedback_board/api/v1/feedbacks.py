"""Product feedback endpoints"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from feedback_board.config import settings
from feedback_board.database import get_db
from feedback_board.dependencies import get_current_user
from feedback_board.models import User
from feedback_board.schemas import (
    FeedbackCreate,
    FeedbackDetail,
    FeedbackEnvelope,
    FeedbackPage,
    FeedbackResponse,
    FeedbackUpdate,
    MessageResponse,
)
from feedback_board.services import feedback as feedback_service

router = APIRouter()


@router.get("", response_model=FeedbackPage)
def list_feedbacks(
    page: int = Query(1, ge=1),
    per_page: int = Query(settings.DEFAULT_PER_PAGE, ge=1, le=settings.MAX_PER_PAGE),
    db: Session = Depends(get_db),
):
    """Public, paginated list of feedback items, newest first."""
    return feedback_service.list_feedback(db, page, per_page)


@router.post("", response_model=FeedbackEnvelope, status_code=status.HTTP_201_CREATED)
def create_feedback(
    feedback_in: FeedbackCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    feedback = feedback_service.create_feedback(
        db,
        current_user.id,
        feedback_in.title,
        feedback_in.description,
        feedback_in.category,
    )
    return FeedbackEnvelope(
        message="Product feedback created successfully",
        data=FeedbackResponse.model_validate(feedback),
    )


@router.get("/{feedback_id}", response_model=FeedbackDetail)
def get_feedback(
    feedback_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return feedback_service.get_feedback(db, feedback_id)


@router.put("/{feedback_id}", response_model=FeedbackEnvelope)
def update_feedback(
    feedback_id: int,
    feedback_update: FeedbackUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Partial update; only the author may edit."""
    changes = feedback_update.model_dump(exclude_unset=True)
    feedback = feedback_service.update_feedback(db, feedback_id, current_user.id, changes)
    return FeedbackEnvelope(
        message="Product feedback updated successfully",
        data=FeedbackResponse.model_validate(feedback),
    )


@router.delete("/{feedback_id}", response_model=MessageResponse)
def delete_feedback(
    feedback_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    feedback_service.delete_feedback(db, feedback_id, current_user.id)
    return MessageResponse(message="Product feedback deleted successfully")
