import pytest
from sqlalchemy.orm import Session

from feedback_board.errors import AuthorizationError, NotFoundError, ValidationError
from feedback_board.models import CommentMention, FeedbackComment, ProductFeedback
from feedback_board.services import comments as comment_service
from feedback_board.services import feedback as feedback_service
from tests.conftest import make_user


def test_create_and_get_feedback_with_comment_tree(db_session: Session):
    author = make_user(db_session, "Author")
    feedback = feedback_service.create_feedback(db_session, author.id, "Add dark mode", "Please", "feature")
    root = comment_service.create_comment(db_session, feedback.id, author.id, "root")
    reply = comment_service.create_comment(db_session, feedback.id, author.id, "reply", parent_id=root.id)
    comment_service.create_comment(db_session, feedback.id, author.id, "deeper", parent_id=reply.id)

    detail = feedback_service.get_feedback(db_session, feedback.id)

    assert detail.title == "Add dark mode"
    assert detail.user.name == "Author"
    assert [node.id for node in detail.root_comments] == [root.id]
    assert [node.id for node in detail.root_comments[0].replies] == [reply.id]
    assert detail.root_comments[0].replies[0].replies == []

    full = feedback_service.get_feedback(db_session, feedback.id, depth=5)
    assert len(full.root_comments[0].replies[0].replies) == 1


def test_update_is_partial_and_author_only(db_session: Session):
    author = make_user(db_session, "Author")
    other = make_user(db_session, "Other")
    feedback = feedback_service.create_feedback(db_session, author.id, "Old title", "Body", "feature")

    updated = feedback_service.update_feedback(db_session, feedback.id, author.id, {"title": "New title"})
    assert updated.title == "New title"
    assert updated.description == "Body"
    assert updated.category == "feature"

    with pytest.raises(AuthorizationError):
        feedback_service.update_feedback(db_session, feedback.id, other.id, {"title": "Hijacked"})
    db_session.expire_all()
    assert db_session.get(ProductFeedback, feedback.id).title == "New title"


def test_update_rejects_null_for_required_fields(db_session: Session):
    author = make_user(db_session, "Author")
    feedback = feedback_service.create_feedback(db_session, author.id, "Title", "Body", "feature")

    with pytest.raises(ValidationError) as excinfo:
        feedback_service.update_feedback(db_session, feedback.id, author.id, {"description": None})

    assert "description" in excinfo.value.errors
    db_session.rollback()
    assert db_session.get(ProductFeedback, feedback.id).description == "Body"


def test_delete_cascades_to_comments_and_mentions(db_session: Session):
    author = make_user(db_session, "Author")
    bob = make_user(db_session, "Bob")
    feedback = feedback_service.create_feedback(db_session, author.id, "Doomed", "Body", "bug")
    kept = feedback_service.create_feedback(db_session, author.id, "Kept", "Body", "bug")
    root = comment_service.create_comment(db_session, feedback.id, author.id, "hi [Bob]")
    comment_service.create_comment(db_session, feedback.id, bob.id, "hey [Author]", parent_id=root.id)
    comment_service.create_comment(db_session, kept.id, author.id, "still here [Bob]")

    with pytest.raises(AuthorizationError):
        feedback_service.delete_feedback(db_session, feedback.id, bob.id)

    feedback_service.delete_feedback(db_session, feedback.id, author.id)

    assert db_session.get(ProductFeedback, feedback.id) is None
    assert db_session.query(FeedbackComment).filter(FeedbackComment.product_feedback_id == feedback.id).count() == 0
    assert db_session.query(FeedbackComment).count() == 1
    assert db_session.query(CommentMention).count() == 1
    with pytest.raises(NotFoundError):
        feedback_service.get_feedback(db_session, feedback.id)


def test_list_feedback_newest_first_with_counts(db_session: Session):
    author = make_user(db_session, "Author")
    first = feedback_service.create_feedback(db_session, author.id, "First", "Body", "feature")
    second = feedback_service.create_feedback(db_session, author.id, "Second", "Body", "bug")
    root = comment_service.create_comment(db_session, first.id, author.id, "one")
    comment_service.create_comment(db_session, first.id, author.id, "two", parent_id=root.id)

    page = feedback_service.list_feedback(db_session, page=1, per_page=10)

    assert page["total"] == 2
    assert [item.id for item in page["data"]] == [second.id, first.id]
    assert [item.comments_count for item in page["data"]] == [0, 2]
