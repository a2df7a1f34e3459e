# tests/test_users.py
"""Tests for member restriction and statistics."""

import pytest
from sqlalchemy import select

from forum_core.core.errors import ForbiddenError, NotFoundError
from forum_core.models import Notification, PostStatus, ReportStatus
from forum_core.services.users import UserDirectory


def test_restrict_and_unrestrict_notify(db_session, author) -> None:
    directory = UserDirectory(db_session)

    directory.restrict(author.id)
    assert directory.is_restricted(author.id) is True
    with pytest.raises(ForbiddenError):
        directory.require_active(author.id)

    directory.unrestrict(author.id)
    assert directory.require_active(author.id).id == author.id

    types = db_session.scalars(select(Notification.type).order_by(Notification.id)).all()
    assert types == ["account_restricted", "account_unrestricted"]


def test_unknown_user(db_session) -> None:
    with pytest.raises(NotFoundError):
        UserDirectory(db_session).get_role(404)


def test_user_stats(db_session, author, other_user, make_post, make_comment, make_report) -> None:
    live = make_post(author)
    make_post(author, status=PostStatus.PENDING)
    make_post(author, status=PostStatus.REJECTED)
    make_comment(live, author)
    flagged = make_comment(live, author)
    make_report(flagged, other_user, status=ReportStatus.APPROVED)
    make_report(flagged, other_user, status=ReportStatus.RESOLVED)
    make_report(flagged, other_user)

    stats = UserDirectory(db_session).get_user_stats(author.id)

    assert stats.total_posts == 3
    assert stats.approved_posts == 1
    assert stats.rejected_posts == 1
    assert stats.total_comments == 2
    assert stats.reported_comments == 1
    assert stats.is_restricted is False
