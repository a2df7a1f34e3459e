# tests/test_comments.py
"""Tests for comment trees, comment mutations and cascade deletion."""

import pytest
from sqlalchemy import func, select

from forum_core.core.errors import ConflictError, ForbiddenError, NotFoundError
from forum_core.models import Comment, CommentLike, Report
from forum_core.services.comments import CommentService


def _count(db_session, model, *criteria) -> int:
    return db_session.scalar(select(func.count()).select_from(model).where(*criteria))


def test_tree_groups_replies_under_parents(db_session, author, other_user, make_post, make_comment) -> None:
    post = make_post(author)
    first = make_comment(post, author, "first")
    second = make_comment(post, other_user, "second")
    reply = make_comment(post, other_user, "reply", parent=first)
    nested = make_comment(post, author, "nested", parent=reply)
    late_reply = make_comment(post, author, "late reply", parent=first)

    tree = CommentService(db_session).get_comments_for_post(post.id)

    assert [node.id for node in tree] == [first.id, second.id]
    assert [node.id for node in tree[0].replies] == [reply.id, late_reply.id]
    assert [node.id for node in tree[0].replies[0].replies] == [nested.id]
    assert tree[1].replies == []


def test_empty_post_has_no_comments(db_session, author, make_post) -> None:
    post = make_post(author)

    assert CommentService(db_session).get_comments_for_post(post.id) == []


def test_like_counts_and_viewer_flag(db_session, author, other_user, make_post, make_comment) -> None:
    post = make_post(author)
    root = make_comment(post, author)
    reply = make_comment(post, other_user, parent=root)
    service = CommentService(db_session)
    service.like_comment(reply.id, author.id)
    service.like_comment(reply.id, other_user.id)
    service.like_comment(root.id, other_user.id)

    [node] = service.get_comments_for_post(post.id, viewer_id=author.id)

    assert node.like_count == 1
    assert node.is_voted is False
    assert node.replies[0].like_count == 2
    assert node.replies[0].is_voted is True


def test_get_comment_returns_subtree(db_session, author, make_post, make_comment) -> None:
    post = make_post(author)
    root = make_comment(post, author)
    reply = make_comment(post, author, parent=root)
    leaf = make_comment(post, author, parent=reply)
    service = CommentService(db_session)

    view = service.get_comment(reply.id)

    assert view.id == reply.id
    assert [child.id for child in view.replies] == [leaf.id]
    assert service.get_comment(9999) is None


def test_deep_thread_builds_without_recursion(db_session, author, make_post) -> None:
    post = make_post(author)
    parent_id = None
    for index in range(1500):
        comment = Comment(post_id=post.id, user_id=author.id, body=f"level {index}", parent_comment_id=parent_id)
        db_session.add(comment)
        db_session.flush()
        parent_id = comment.id
    db_session.commit()

    [root] = CommentService(db_session).get_comments_for_post(post.id)

    depth = 1
    node = root
    while node.replies:
        node = node.replies[0]
        depth += 1
    assert depth == 1500


def test_create_comment_and_reply(db_session, author, other_user, make_post) -> None:
    post = make_post(author)
    service = CommentService(db_session)

    root = service.create_comment(post.id, "Hello", author.id)
    reply = service.create_reply(root.id, "Hi back", other_user.id)

    assert reply.parent_comment_id == root.id
    assert reply.post_id == post.id
    tree = service.get_comments_for_post(post.id)
    assert tree[0].replies[0].body == "Hi back"


def test_reply_must_stay_on_parent_post(db_session, author, make_post, make_comment) -> None:
    post = make_post(author, title="one")
    elsewhere = make_post(author, title="two")
    parent = make_comment(post, author)

    with pytest.raises(ConflictError):
        CommentService(db_session).create_comment(elsewhere.id, "misplaced", author.id, parent.id)


def test_create_comment_missing_targets(db_session, author, make_post) -> None:
    service = CommentService(db_session)
    post = make_post(author)

    with pytest.raises(NotFoundError):
        service.create_comment(4242, "nowhere", author.id)
    with pytest.raises(NotFoundError):
        service.create_comment(post.id, "orphan", author.id, parent_comment_id=4242)
    with pytest.raises(NotFoundError):
        service.create_reply(4242, "orphan", author.id)


def test_restricted_user_cannot_comment(db_session, make_user, author, make_post) -> None:
    muted = make_user(is_restricted=True)
    post = make_post(author)

    with pytest.raises(ForbiddenError):
        CommentService(db_session).create_comment(post.id, "let me in", muted.id)
    assert _count(db_session, Comment) == 0


def test_update_comment_permissions(db_session, author, other_user, admin, make_post, make_comment) -> None:
    comment = make_comment(make_post(author), author)
    service = CommentService(db_session)

    with pytest.raises(ForbiddenError):
        service.update_comment(comment.id, "hijacked", other_user.id)
    assert service.update_comment(comment.id, "edited", author.id).body == "edited"
    assert service.update_comment(comment.id, "moderated", admin.id).body == "moderated"


def test_delete_removes_whole_subtree(db_session, author, other_user, make_post, make_comment, make_report) -> None:
    post = make_post(author)
    root = make_comment(post, other_user)
    child = make_comment(post, author, parent=root)
    grandchild = make_comment(post, other_user, parent=child)
    sibling = make_comment(post, author)
    service = CommentService(db_session)
    service.like_comment(grandchild.id, author.id)
    make_report(child, author)

    removed = service.delete_comment(root.id, other_user.id)

    assert removed == 3
    remaining = db_session.scalars(select(Comment.id).where(Comment.post_id == post.id)).all()
    assert remaining == [sibling.id]
    assert _count(db_session, CommentLike) == 0
    assert _count(db_session, Report) == 0


def test_delete_permissions(db_session, make_user, author, other_user, admin, make_post, make_comment) -> None:
    stranger = make_user()
    post = make_post(author)
    service = CommentService(db_session)
    by_other = make_comment(post, other_user)

    with pytest.raises(ForbiddenError):
        service.delete_comment(by_other.id, stranger.id)
    # The post owner may remove comments on their post.
    assert service.delete_comment(by_other.id, author.id) == 1

    by_author = make_comment(post, author)
    assert service.delete_comment(by_author.id, admin.id) == 1
    with pytest.raises(NotFoundError):
        service.delete_comment(by_author.id, admin.id)
