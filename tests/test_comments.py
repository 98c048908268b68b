import pytest
from sqlalchemy.orm import Session

from feedback_board.errors import NotFoundError, ValidationError
from feedback_board.models import CommentMention, FeedbackComment
from feedback_board.services import comments as comment_service
from tests.conftest import make_feedback, make_user


def test_root_comment_records_mention_of_bob(db_session: Session):
    author = make_user(db_session, "Author")
    commenter = make_user(db_session, "Commenter")
    bob = make_user(db_session, "Bob")
    assert (author.id, commenter.id, bob.id) == (1, 2, 3)
    feedback = make_feedback(db_session, author, title="Add dark mode")

    comment = comment_service.create_comment(db_session, feedback.id, commenter.id, "I agree [Bob]")

    assert comment.parent_id is None
    assert comment.comment == "I agree [Bob]"
    assert comment.mentioned_users == [3]
    mentions = db_session.query(CommentMention).all()
    assert len(mentions) == 1
    assert mentions[0].comment_id == comment.id
    assert mentions[0].mentioned_user_id == 3
    assert mentions[0].mentioned_by_user_id == 2
    assert mentions[0].is_read is False
    assert mentions[0].read_at is None


def test_reply_is_nested_under_its_root(db_session: Session):
    author = make_user(db_session, "Author")
    feedback = make_feedback(db_session, author)
    root = comment_service.create_comment(db_session, feedback.id, author.id, "First!")

    reply = comment_service.create_comment(db_session, feedback.id, author.id, "A reply", parent_id=root.id)

    assert reply.parent_id == root.id
    assert reply.parent is not None and reply.parent.id == root.id
    page = comment_service.list_root_comments(db_session, feedback.id)
    assert page["total"] == 1
    assert len(page["data"]) == 1
    tree = page["data"][0]
    assert tree.id == root.id
    assert [node.id for node in tree.replies] == [reply.id]


def test_parent_from_other_feedback_is_rejected(db_session: Session):
    author = make_user(db_session, "Author")
    first = make_feedback(db_session, author, title="First")
    second = make_feedback(db_session, author, title="Second")
    foreign = comment_service.create_comment(db_session, second.id, author.id, "elsewhere")

    with pytest.raises(NotFoundError):
        comment_service.create_comment(db_session, first.id, author.id, "reply", parent_id=foreign.id)

    assert db_session.query(FeedbackComment).filter(FeedbackComment.product_feedback_id == first.id).count() == 0


def test_missing_feedback_or_parent_is_not_found(db_session: Session):
    author = make_user(db_session, "Author")
    feedback = make_feedback(db_session, author)

    with pytest.raises(NotFoundError):
        comment_service.create_comment(db_session, 999, author.id, "hello")
    with pytest.raises(NotFoundError):
        comment_service.create_comment(db_session, feedback.id, author.id, "hello", parent_id=999)


def test_text_is_sanitized_before_storage_and_mention_scan(db_session: Session):
    author = make_user(db_session, "Author")
    make_user(db_session, "Hidden")
    visible = make_user(db_session, "Visible")
    feedback = make_feedback(db_session, author)

    comment = comment_service.create_comment(
        db_session,
        feedback.id,
        author.id,
        '<p onclick="x()">Hi [Visible]</p><script>alert("[Hidden]")</script>',
    )

    assert "<script" not in comment.comment
    assert "onclick" not in comment.comment
    assert comment.comment.startswith("<p>Hi [Visible]</p>")
    assert comment.mentioned_users == [visible.id]


def test_markup_only_comment_is_a_validation_error(db_session: Session):
    author = make_user(db_session, "Author")
    feedback = make_feedback(db_session, author)

    with pytest.raises(ValidationError) as exc:
        comment_service.create_comment(db_session, feedback.id, author.id, "<script>boom()</script>")

    assert "comment" in exc.value.errors
    assert db_session.query(FeedbackComment).count() == 0


def test_duplicate_mentions_in_one_comment_record_once(db_session: Session):
    author = make_user(db_session, "Author")
    bob = make_user(db_session, "Bob")
    feedback = make_feedback(db_session, author)

    comment = comment_service.create_comment(db_session, feedback.id, author.id, "[Bob] and again [bob]")

    assert comment.mentioned_users == [bob.id]
    assert db_session.query(CommentMention).count() == 1


def test_ledger_failure_rolls_back_comment(db_session: Session, monkeypatch):
    author = make_user(db_session, "Author")
    make_user(db_session, "Bob")
    feedback = make_feedback(db_session, author)

    def broken_ledger(*args, **kwargs):
        raise RuntimeError("ledger unavailable")

    monkeypatch.setattr(comment_service, "record_mentions", broken_ledger)

    with pytest.raises(RuntimeError):
        comment_service.create_comment(db_session, feedback.id, author.id, "hey [Bob]")

    assert db_session.query(FeedbackComment).count() == 0
    assert db_session.query(CommentMention).count() == 0


def test_deep_threads_and_depth_limit(db_session: Session):
    author = make_user(db_session, "Author")
    feedback = make_feedback(db_session, author)
    parent_id = None
    chain = []
    for level in range(6):
        node = comment_service.create_comment(db_session, feedback.id, author.id, f"level {level}", parent_id=parent_id)
        chain.append(node.id)
        parent_id = node.id

    full = comment_service.list_root_comments(db_session, feedback.id)["data"][0]
    seen = []
    node = full
    while node is not None:
        seen.append(node.id)
        node = node.replies[0] if node.replies else None
    assert seen == chain

    shallow = comment_service.list_root_comments(db_session, feedback.id, depth=1)["data"][0]
    assert [reply.id for reply in shallow.replies] == [chain[1]]
    assert shallow.replies[0].replies == []

    flat = comment_service.list_root_comments(db_session, feedback.id, depth=0)["data"][0]
    assert flat.replies == []


def test_roots_newest_first_and_replies_in_conversation_order(db_session: Session):
    author = make_user(db_session, "Author")
    feedback = make_feedback(db_session, author)
    older = comment_service.create_comment(db_session, feedback.id, author.id, "older root")
    newer = comment_service.create_comment(db_session, feedback.id, author.id, "newer root")
    first_reply = comment_service.create_comment(db_session, feedback.id, author.id, "r1", parent_id=older.id)
    second_reply = comment_service.create_comment(db_session, feedback.id, author.id, "r2", parent_id=older.id)

    trees = comment_service.list_root_comments(db_session, feedback.id)["data"]

    assert [tree.id for tree in trees] == [newer.id, older.id]
    assert [reply.id for reply in trees[1].replies] == [first_reply.id, second_reply.id]


def test_listing_never_mixes_feedback_items(db_session: Session):
    author = make_user(db_session, "Author")
    first = make_feedback(db_session, author, title="First")
    second = make_feedback(db_session, author, title="Second")
    root_a = comment_service.create_comment(db_session, first.id, author.id, "a")
    comment_service.create_comment(db_session, first.id, author.id, "a reply", parent_id=root_a.id)
    root_b = comment_service.create_comment(db_session, second.id, author.id, "b")
    comment_service.create_comment(db_session, second.id, author.id, "b reply", parent_id=root_b.id)

    def walk(nodes):
        for node in nodes:
            yield node
            yield from walk(node.replies)

    for feedback in (first, second):
        nodes = list(walk(comment_service.list_root_comments(db_session, feedback.id)["data"]))
        assert len(nodes) == 2
        assert {node.product_feedback_id for node in nodes} == {feedback.id}


def test_reply_loading_stays_within_page_roots_and_depth(db_session: Session):
    author = make_user(db_session, "Author")
    feedback = make_feedback(db_session, author)
    paged_root = comment_service.create_comment(db_session, feedback.id, author.id, "on this page")
    other_root = comment_service.create_comment(db_session, feedback.id, author.id, "on another page")
    child = comment_service.create_comment(db_session, feedback.id, author.id, "child", parent_id=paged_root.id)
    grandchild = comment_service.create_comment(db_session, feedback.id, author.id, "grand", parent_id=child.id)
    comment_service.create_comment(db_session, feedback.id, author.id, "elsewhere", parent_id=other_root.id)

    shallow = comment_service.load_reply_levels(db_session, feedback.id, [paged_root.id], depth=1)
    assert [reply.id for reply in shallow] == [child.id]

    full = comment_service.load_reply_levels(db_session, feedback.id, [paged_root.id], depth=None)
    assert sorted(reply.id for reply in full) == [child.id, grandchild.id]

    assert comment_service.load_reply_levels(db_session, feedback.id, [paged_root.id], depth=0) == []

def test_root_comment_pagination(db_session: Session):
    author = make_user(db_session, "Author")
    feedback = make_feedback(db_session, author)
    ids = [comment_service.create_comment(db_session, feedback.id, author.id, f"c{i}").id for i in range(3)]

    page = comment_service.list_root_comments(db_session, feedback.id, page=2, per_page=2)

    assert page["total"] == 3
    assert page["last_page"] == 2
    assert [node.id for node in page["data"]] == [ids[0]]


def test_get_comment_is_scoped_to_its_feedback(db_session: Session):
    author = make_user(db_session, "Author")
    first = make_feedback(db_session, author, title="First")
    second = make_feedback(db_session, author, title="Second")
    root = comment_service.create_comment(db_session, first.id, author.id, "root")
    reply = comment_service.create_comment(db_session, first.id, author.id, "reply", parent_id=root.id)
    nested = comment_service.create_comment(db_session, first.id, author.id, "nested", parent_id=reply.id)

    fetched = comment_service.get_comment(db_session, first.id, reply.id)
    assert fetched.parent.id == root.id
    assert [child.id for child in fetched.replies] == [nested.id]

    with pytest.raises(NotFoundError):
        comment_service.get_comment(db_session, second.id, reply.id)
