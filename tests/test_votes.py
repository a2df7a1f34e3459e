# tests/test_votes.py
"""Tests for the like ledger shared by posts and comments."""

import pytest

from forum_core.core.errors import ConflictError, NotFoundError
from forum_core.services.votes import comment_ledger, post_ledger


def test_vote_then_count(db_session, author, other_user, make_post) -> None:
    post = make_post(author)
    ledger = post_ledger(db_session)

    ledger.vote(post.id, other_user.id)
    ledger.vote(post.id, author.id)

    assert ledger.count(post.id) == 2
    assert ledger.voted_ids(other_user.id, [post.id]) == {post.id}


def test_duplicate_vote_is_conflict(db_session, author, make_post) -> None:
    post = make_post(author)
    ledger = post_ledger(db_session)
    ledger.vote(post.id, author.id)

    with pytest.raises(ConflictError):
        ledger.vote(post.id, author.id)
    assert ledger.count(post.id) == 1


def test_unvote_without_vote_is_conflict(db_session, author, make_post) -> None:
    post = make_post(author)

    with pytest.raises(ConflictError):
        post_ledger(db_session).unvote(post.id, author.id)


def test_vote_unvote_restores_count(db_session, author, other_user, make_post) -> None:
    post = make_post(author)
    ledger = post_ledger(db_session)
    ledger.vote(post.id, author.id)

    ledger.vote(post.id, other_user.id)
    ledger.unvote(post.id, other_user.id)

    assert ledger.count(post.id) == 1
    assert ledger.voted_ids(other_user.id, [post.id]) == set()


def test_vote_on_missing_target(db_session, author) -> None:
    with pytest.raises(NotFoundError):
        post_ledger(db_session).vote(999, author.id)
    with pytest.raises(NotFoundError):
        comment_ledger(db_session).vote(999, author.id)


def test_counts_are_batched_per_target(db_session, author, other_user, make_post) -> None:
    first = make_post(author, title="first")
    second = make_post(author, title="second")
    third = make_post(author, title="third")
    ledger = post_ledger(db_session)
    ledger.vote(first.id, author.id)
    ledger.vote(first.id, other_user.id)
    ledger.vote(second.id, other_user.id)

    counts = ledger.counts([first.id, second.id, third.id])

    assert counts == {first.id: 2, second.id: 1}
    assert ledger.voted_ids(None, [first.id]) == set()


def test_comment_likes(db_session, author, other_user, make_post, make_comment) -> None:
    comment = make_comment(make_post(author), author)
    ledger = comment_ledger(db_session)

    ledger.vote(comment.id, other_user.id)

    assert ledger.likes_for([comment.id]) == [(comment.id, other_user.id)]
    with pytest.raises(ConflictError):
        ledger.vote(comment.id, other_user.id)
