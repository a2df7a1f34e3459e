"""Feed queries and post hydration.

Every listing first selects the ids of one page of posts, then hydrates that
page with a fixed number of batched queries regardless of page size.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Sequence
from enum import Enum

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session

from forum_core.core.errors import NotFoundError
from forum_core.core.settings import settings
from forum_core.models import (
    Comment,
    Post,
    PostAttachment,
    PostStatus,
    Tag,
    User,
    UserPostHide,
    UserRole,
    post_tag,
)
from forum_core.schemas.post import AttachmentView, PostView
from forum_core.schemas.tag import TagView
from forum_core.services.users import to_user_summary
from forum_core.services.votes import post_ledger

logger = logging.getLogger(__name__)


class FeedFilter(str, Enum):
    """Orderings offered by the feed."""

    DEFAULT = "default"
    NEW = "new"
    HOT = "hot"
    TOP = "top"
    CLOSED = "closed"

    @classmethod
    def parse(cls, value: str | FeedFilter | None) -> FeedFilter:
        """Resolve a filter name; unknown names fall back to ``new``."""
        if isinstance(value, FeedFilter):
            return value
        if not value:
            return cls.DEFAULT
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.NEW


def _clamp_page(page: int, page_size: int) -> tuple[int, int]:
    page = max(page, 1)
    page_size = min(max(page_size, 1), settings.feed_max_page_size)
    return page, page_size


class FeedService:
    """Read side of posts: feeds, single posts and moderation queues."""

    def __init__(self, db: Session) -> None:
        self.db = db
        self.likes = post_ledger(db)

    def get_feed(
        self,
        filter_name: str | FeedFilter | None = FeedFilter.DEFAULT,
        page: int = 1,
        page_size: int = settings.feed_default_page_size,
        tag_name: str | None = None,
        viewer_id: int | None = None,
    ) -> list[PostView]:
        """Return one page of the feed seen by ``viewer_id``.

        Only approved, globally visible posts appear. Posts the viewer hid are
        excluded, except under ``closed`` which lists exactly those posts.
        Pinned posts lead every ordering.
        """
        mode = FeedFilter.parse(filter_name)
        page, page_size = _clamp_page(page, page_size)

        if mode is FeedFilter.CLOSED and viewer_id is None:
            return []

        stmt = select(Post.id).where(
            Post.status == PostStatus.APPROVED,
            Post.is_hidden.is_(False),
        )
        hidden_by_viewer = select(UserPostHide.post_id).where(UserPostHide.user_id == viewer_id)
        if mode is FeedFilter.CLOSED:
            stmt = stmt.where(Post.id.in_(hidden_by_viewer))
        elif viewer_id is not None:
            stmt = stmt.where(Post.id.not_in(hidden_by_viewer))

        if tag_name:
            tag_id = self.db.scalar(
                select(Tag.id).where(func.lower(Tag.name) == tag_name.strip().lower())
            )
            if tag_id is None:
                return []
            stmt = stmt.where(Post.id.in_(select(post_tag.c.post_id).where(post_tag.c.tag_id == tag_id)))

        offset = (page - 1) * page_size
        if mode is FeedFilter.TOP:
            post_ids = self._top_page(stmt, offset, page_size)
        else:
            order = [Post.is_pinned.desc()]
            if mode is FeedFilter.HOT:
                order.append(Post.view_count.desc())
            order.extend([Post.created_at.desc(), Post.id.desc()])
            post_ids = list(self.db.scalars(stmt.order_by(*order).offset(offset).limit(page_size)))

        logger.debug("Feed %s page %s for viewer %s: %s posts", mode.value, page, viewer_id, len(post_ids))
        return self._assemble(post_ids, viewer_id)

    def _top_page(self, candidates: Select, offset: int, limit: int) -> list[int]:
        """Order candidates by like count in memory, then slice one page."""
        rows = self.db.execute(
            candidates.add_columns(Post.is_pinned).order_by(Post.created_at.desc(), Post.id.desc())
        ).all()
        like_counts = self.likes.counts(candidates)
        # Stable sort keeps the newest-first order among equal like counts.
        rows = sorted(rows, key=lambda row: (not row.is_pinned, -like_counts.get(row.id, 0)))
        return [row.id for row in rows[offset:offset + limit]]

    def get_post(self, post_id: int, viewer_id: int | None = None) -> PostView:
        """Return one post as seen by ``viewer_id``.

        Posts that are not approved, or are globally hidden, are visible only to
        their owner and to moderators; everybody else gets ``NotFoundError``.
        """
        post = self.db.get(Post, post_id)
        if post is None or not self._can_view(post, viewer_id):
            raise NotFoundError("Post not found")
        return self._assemble([post.id], viewer_id)[0]

    def _can_view(self, post: Post, viewer_id: int | None) -> bool:
        if post.status == PostStatus.APPROVED and not post.is_hidden:
            return True
        if viewer_id is None:
            return False
        if post.user_id == viewer_id:
            return True
        role = self.db.scalar(select(User.role).where(User.id == viewer_id))
        return role in (UserRole.MODERATOR, UserRole.ADMIN)

    def list_pending_posts(self, page: int = 1, page_size: int = settings.feed_default_page_size) -> list[PostView]:
        return self._list_by_status(PostStatus.PENDING, page, page_size)

    def list_rejected_posts(self, page: int = 1, page_size: int = settings.feed_default_page_size) -> list[PostView]:
        return self._list_by_status(PostStatus.REJECTED, page, page_size)

    def _list_by_status(self, status: PostStatus, page: int, page_size: int) -> list[PostView]:
        page, page_size = _clamp_page(page, page_size)
        post_ids = list(
            self.db.scalars(
                select(Post.id)
                .where(Post.status == status)
                .order_by(Post.is_pinned.desc(), Post.created_at.desc(), Post.id.desc())
                .offset((page - 1) * page_size)
                .limit(page_size)
            )
        )
        return self._assemble(post_ids, viewer_id=None)

    def _assemble(self, post_ids: Sequence[int], viewer_id: int | None) -> list[PostView]:
        """Hydrate ``post_ids`` into views, preserving the given order."""
        if not post_ids:
            return []

        rows = self.db.execute(
            select(Post, User).join(User, User.id == Post.user_id).where(Post.id.in_(post_ids))
        ).all()

        tags: dict[int, list[TagView]] = defaultdict(list)
        for post_id, tag_id, tag_name in self.db.execute(
            select(post_tag.c.post_id, Tag.id, Tag.name)
            .join(Tag, Tag.id == post_tag.c.tag_id)
            .where(post_tag.c.post_id.in_(post_ids))
            .order_by(Tag.name)
        ):
            tags[post_id].append(TagView(id=tag_id, name=tag_name))

        attachments: dict[int, list[AttachmentView]] = defaultdict(list)
        for attachment in self.db.scalars(
            select(PostAttachment)
            .where(PostAttachment.post_id.in_(post_ids))
            .order_by(PostAttachment.id)
        ):
            attachments[attachment.post_id].append(AttachmentView.model_validate(attachment))

        comment_counts = dict(
            self.db.execute(
                select(Comment.post_id, func.count())
                .where(Comment.post_id.in_(post_ids))
                .group_by(Comment.post_id)
            ).all()
        )
        like_counts = self.likes.counts(post_ids)
        voted = self.likes.voted_ids(viewer_id, post_ids)
        hidden: set[int] = set()
        if viewer_id is not None:
            hidden = set(
                self.db.scalars(
                    select(UserPostHide.post_id).where(
                        UserPostHide.user_id == viewer_id,
                        UserPostHide.post_id.in_(post_ids),
                    )
                )
            )

        views = {
            post.id: PostView(
                id=post.id,
                title=post.title,
                body=post.body,
                status=post.status.value,
                created_at=post.created_at,
                updated_at=post.updated_at,
                view_count=post.view_count,
                comment_count=comment_counts.get(post.id, 0),
                like_count=like_counts.get(post.id, 0),
                is_voted=post.id in voted,
                is_pinned=post.is_pinned,
                is_hidden_by_viewer=post.id in hidden,
                rejection_reason=post.rejection_reason,
                owner=to_user_summary(owner),
                tags=tags.get(post.id, []),
                attachments=attachments.get(post.id, []),
            )
            for post, owner in rows
        }
        return [views[post_id] for post_id in post_ids if post_id in views]
