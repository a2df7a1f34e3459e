"""Post lifecycle: creation, editing, deletion and per-member interactions."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from sqlalchemy import delete, func, select, update
from sqlalchemy.orm import Session

from forum_core.core.errors import ForbiddenError, NotFoundError
from forum_core.db.time import utcnow
from forum_core.db.transaction import transaction
from forum_core.models import (
    Comment,
    CommentLike,
    Notification,
    Post,
    PostAttachment,
    PostLike,
    PostStatus,
    Report,
    Tag,
    User,
    UserPostHide,
    UserRole,
)
from forum_core.schemas.post import AttachmentIn, PostCreate, PostUpdate, PostView
from forum_core.services.feed import FeedService
from forum_core.services.users import UserDirectory
from forum_core.services.votes import post_ledger

logger = logging.getLogger(__name__)


def normalize_tag_names(names: Iterable[str]) -> list[str]:
    """Strip names, drop blanks and case-insensitive duplicates, keep first-seen order."""
    seen: dict[str, str] = {}
    for name in names:
        cleaned = name.strip()
        if cleaned:
            seen.setdefault(cleaned.lower(), cleaned)
    return list(seen.values())


class PostService:
    """Write side of posts."""

    def __init__(self, db: Session, users: UserDirectory | None = None) -> None:
        self.db = db
        self.users = users or UserDirectory(db)
        self.feed = FeedService(db)
        self.likes = post_ledger(db)

    def create_post(self, payload: PostCreate, user_id: int) -> PostView:
        """Create a pending post for ``user_id``.

        Raises:
            NotFoundError: If the user does not exist.
            ForbiddenError: If the user is restricted.
        """
        self.users.require_active(user_id)

        post = Post(
            user_id=user_id,
            title=payload.title,
            body=payload.body,
            status=PostStatus.PENDING,
        )
        with transaction(self.db, "post creation"):
            post.tags = self._resolve_tags(payload.tag_names)
            post.attachments = self._build_attachments(payload.attachments)
            self.db.add(post)
        logger.info("User %s created post %s", user_id, post.id)
        return self.feed.get_post(post.id, viewer_id=user_id)

    def update_post(self, post_id: int, payload: PostUpdate, actor_id: int) -> PostView:
        """Edit a post. Only the owner or an admin may do so.

        Tags and attachments are replaced wholesale when supplied.
        """
        post = self._require_post(post_id)
        self._require_owner_or_admin(post, actor_id, "edit")

        with transaction(self.db, f"update of post {post_id}"):
            if payload.title and payload.title.strip():
                post.title = payload.title
            if payload.body and payload.body.strip():
                post.body = payload.body
            if payload.tag_names is not None:
                post.tags = self._resolve_tags(payload.tag_names)
            if payload.attachments is not None:
                post.attachments = self._build_attachments(payload.attachments)
            post.updated_at = utcnow()
        return self.feed.get_post(post_id, viewer_id=actor_id)

    def delete_post(self, post_id: int, actor_id: int) -> None:
        """Delete a post with its comments, likes, hides, tags and attachments.

        Reports against its comments are detached rather than deleted, keeping
        the captured comment author. Notifications keep their row with the post
        reference cleared.
        """
        post = self._require_post(post_id)
        self._require_owner_or_admin(post, actor_id, "delete")

        comment_rows = self.db.execute(
            select(Comment.id, Comment.user_id).where(Comment.post_id == post_id)
        ).all()
        authors = {comment_id: author_id for comment_id, author_id in comment_rows}

        with transaction(self.db, f"deletion of post {post_id}"):
            if authors:
                self.db.execute(delete(CommentLike).where(CommentLike.comment_id.in_(authors)))
                for report in self.db.scalars(select(Report).where(Report.comment_id.in_(authors))):
                    if report.comment_author_user_id is None:
                        report.comment_author_user_id = authors[report.comment_id]
                    report.comment_id = None
                self.db.flush()
                # Replies reference their parents; unlink before the bulk delete.
                self.db.execute(
                    update(Comment)
                    .where(Comment.post_id == post_id)
                    .values(parent_comment_id=None)
                    .execution_options(synchronize_session=False)
                )
                self.db.execute(delete(Comment).where(Comment.post_id == post_id))
            self.db.execute(delete(PostLike).where(PostLike.post_id == post_id))
            self.db.execute(delete(UserPostHide).where(UserPostHide.post_id == post_id))
            self.db.execute(
                update(Notification)
                .where(Notification.post_id == post_id)
                .values(post_id=None)
                .execution_options(synchronize_session=False)
            )
            post.tags = []
            self.db.delete(post)
        logger.info("User %s deleted post %s", actor_id, post_id)

    def vote_post(self, post_id: int, user_id: int) -> None:
        self.likes.vote(post_id, user_id)

    def unvote_post(self, post_id: int, user_id: int) -> None:
        self.likes.unvote(post_id, user_id)

    def pin_post(self, post_id: int) -> None:
        self._set_pinned(post_id, True)

    def unpin_post(self, post_id: int) -> None:
        self._set_pinned(post_id, False)

    def _set_pinned(self, post_id: int, pinned: bool) -> None:
        post = self._require_post(post_id)
        with transaction(self.db, f"pin change of post {post_id}"):
            post.is_pinned = pinned
        logger.info("Post %s pinned=%s", post_id, pinned)

    def hide_post(self, post_id: int, user_id: int) -> None:
        """Hide a post from one member's feed. Hiding twice is a no-op."""
        self._require_post(post_id)
        if self.db.get(UserPostHide, (user_id, post_id)) is not None:
            return
        with transaction(self.db, f"hide of post {post_id}"):
            self.db.add(UserPostHide(user_id=user_id, post_id=post_id))

    def unhide_post(self, post_id: int, user_id: int) -> None:
        """Show a previously hidden post again. Unhiding a visible post is a no-op."""
        self._require_post(post_id)
        marker = self.db.get(UserPostHide, (user_id, post_id))
        if marker is None:
            return
        with transaction(self.db, f"unhide of post {post_id}"):
            self.db.delete(marker)

    def increment_view_count(self, post_id: int) -> None:
        self._require_post(post_id)
        with transaction(self.db, f"view count of post {post_id}"):
            self.db.execute(
                update(Post)
                .where(Post.id == post_id)
                .values(view_count=Post.view_count + 1)
            )

    def _resolve_tags(self, names: Iterable[str]) -> list[Tag]:
        """Load existing tags by name in one query and create the missing ones.

        Names match regardless of case; an existing tag keeps its spelling.
        """
        wanted = normalize_tag_names(names)
        if not wanted:
            return []
        existing = {
            tag.name.lower(): tag
            for tag in self.db.scalars(
                select(Tag).where(func.lower(Tag.name).in_([name.lower() for name in wanted]))
            )
        }
        tags = []
        for name in wanted:
            tag = existing.get(name.lower())
            if tag is None:
                tag = Tag(name=name)
                self.db.add(tag)
            tags.append(tag)
        return tags

    @staticmethod
    def _build_attachments(items: Iterable[AttachmentIn]) -> list[PostAttachment]:
        return [PostAttachment(**item.model_dump()) for item in items]

    def _require_post(self, post_id: int) -> Post:
        post = self.db.get(Post, post_id)
        if post is None:
            raise NotFoundError("Post not found")
        return post

    def _require_owner_or_admin(self, post: Post, actor_id: int, action: str) -> None:
        actor = self.db.get(User, actor_id)
        if actor is None:
            raise ForbiddenError("Unknown user")
        if post.user_id != actor.id and actor.role != UserRole.ADMIN:
            raise ForbiddenError(f"You can only {action} your own posts")
