"""Threaded comments: tree reads, mutations and cascade removal."""

from __future__ import annotations

import logging
from collections import Counter, defaultdict

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from forum_core.core.errors import ConflictError, ForbiddenError, NotFoundError
from forum_core.db.transaction import transaction
from forum_core.models import Comment, CommentLike, Post, Report, User, UserRole
from forum_core.schemas.comment import CommentView
from forum_core.services.users import UserDirectory, to_user_summary
from forum_core.services.votes import comment_ledger

logger = logging.getLogger(__name__)


class CommentService:
    """Read and mutate the comment forest of posts."""

    def __init__(self, db: Session, users: UserDirectory | None = None) -> None:
        self.db = db
        self.users = users or UserDirectory(db)
        self.likes = comment_ledger(db)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_comments_for_post(self, post_id: int, viewer_id: int | None = None) -> list[CommentView]:
        """Return the root comments of a post, each with its full reply subtree.

        Siblings are ordered oldest first at every level. A post without
        comments, or an unknown post, yields an empty list.
        """
        views, roots = self._build_forest(post_id, viewer_id)
        return [views[comment_id] for comment_id in roots]

    def get_comment(self, comment_id: int, viewer_id: int | None = None) -> CommentView | None:
        """Return one comment with its subtree, or ``None`` if it does not exist."""
        post_id = self.db.scalar(select(Comment.post_id).where(Comment.id == comment_id))
        if post_id is None:
            return None
        views, _ = self._build_forest(post_id, viewer_id)
        return views.get(comment_id)

    def _build_forest(self, post_id: int, viewer_id: int | None) -> tuple[dict[int, CommentView], list[int]]:
        # One query for the comments with their authors, one for their likes.
        rows = self.db.execute(
            select(Comment, User)
            .join(User, User.id == Comment.user_id)
            .where(Comment.post_id == post_id)
            .order_by(Comment.created_at.asc(), Comment.id.asc())
        ).all()
        if not rows:
            return {}, []

        comment_ids = [comment.id for comment, _ in rows]
        like_counts: Counter[int] = Counter()
        voted: set[int] = set()
        for comment_id, user_id in self.likes.likes_for(comment_ids):
            like_counts[comment_id] += 1
            if user_id == viewer_id:
                voted.add(comment_id)

        views: dict[int, CommentView] = {}
        for comment, author in rows:
            views[comment.id] = CommentView(
                id=comment.id,
                post_id=comment.post_id,
                body=comment.body,
                created_at=comment.created_at,
                parent_comment_id=comment.parent_comment_id,
                like_count=like_counts[comment.id],
                is_voted=comment.id in voted,
                author=to_user_summary(author),
            )

        # Linking in creation order keeps every replies list oldest first and
        # avoids recursion on deep threads.
        roots: list[int] = []
        for comment, _ in rows:
            parent_id = comment.parent_comment_id
            if parent_id is not None and parent_id in views:
                views[parent_id].replies.append(views[comment.id])
            else:
                roots.append(comment.id)
        return views, roots

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def create_comment(
        self,
        post_id: int,
        body: str,
        user_id: int,
        parent_comment_id: int | None = None,
    ) -> CommentView:
        """Add a comment to a post, optionally as a reply.

        Raises:
            NotFoundError: If the post, the parent or the user does not exist.
            ConflictError: If the parent belongs to a different post.
            ForbiddenError: If the user is restricted.
        """
        if self.db.get(Post, post_id) is None:
            raise NotFoundError("Post not found")
        if parent_comment_id is not None:
            parent = self.db.get(Comment, parent_comment_id)
            if parent is None:
                raise NotFoundError("Parent comment not found")
            if parent.post_id != post_id:
                raise ConflictError("A reply must belong to the same post as its parent")
        self.users.require_active(user_id)

        comment = Comment(
            post_id=post_id,
            user_id=user_id,
            body=body,
            parent_comment_id=parent_comment_id,
        )
        with transaction(self.db, "comment creation"):
            self.db.add(comment)
        logger.info("User %s commented on post %s (comment %s)", user_id, post_id, comment.id)
        return self._single_view(comment.id, user_id)

    def create_reply(self, parent_comment_id: int, body: str, user_id: int) -> CommentView:
        """Reply to an existing comment on the same post."""
        parent = self.db.get(Comment, parent_comment_id)
        if parent is None:
            raise NotFoundError("Parent comment not found")
        return self.create_comment(parent.post_id, body, user_id, parent_comment_id=parent.id)

    def update_comment(self, comment_id: int, body: str, actor_id: int) -> CommentView:
        """Edit a comment body; only the author or an admin may do so."""
        comment = self._require_comment(comment_id)
        actor = self._require_actor(actor_id)
        if comment.user_id != actor.id and actor.role != UserRole.ADMIN:
            raise ForbiddenError("You can only edit your own comments")

        with transaction(self.db, f"update of comment {comment_id}"):
            comment.body = body
        return self._single_view(comment_id, actor_id)

    def delete_comment(self, comment_id: int, actor_id: int) -> int:
        """Delete a comment and its whole subtree.

        Allowed for the comment author, the owner of the post and admins.
        Reports against the removed comments are deleted with them. Returns the
        number of comments removed.
        """
        comment = self._require_comment(comment_id)
        actor = self._require_actor(actor_id)
        post_owner_id = self.db.scalar(select(Post.user_id).where(Post.id == comment.post_id))
        if actor.id not in (comment.user_id, post_owner_id) and actor.role != UserRole.ADMIN:
            raise ForbiddenError("You are not allowed to delete this comment")

        with transaction(self.db, f"deletion of comment {comment_id}"):
            removed = self.remove_subtree(comment, detach_reports=False)
        logger.info("User %s deleted comment %s (%s comments removed)", actor_id, comment_id, removed)
        return removed

    def like_comment(self, comment_id: int, user_id: int) -> None:
        self.likes.vote(comment_id, user_id)

    def unlike_comment(self, comment_id: int, user_id: int) -> None:
        self.likes.unvote(comment_id, user_id)

    # ------------------------------------------------------------------
    # Cascade
    # ------------------------------------------------------------------

    def remove_subtree(self, comment: Comment, *, detach_reports: bool) -> int:
        """Delete ``comment`` and every descendant inside the caller's transaction.

        Likes go first. Reports are either deleted, or detached with the
        comment author captured so violation history survives. Comments are then
        removed deepest level first so no row outlives its parent.
        """
        levels = self._subtree_levels(comment)
        authors = {comment_id: author_id for level in levels for comment_id, author_id in level}
        comment_ids = list(authors)

        self.db.flush()
        self.db.execute(delete(CommentLike).where(CommentLike.comment_id.in_(comment_ids)))

        reports = self.db.scalars(select(Report).where(Report.comment_id.in_(comment_ids))).all()
        for report in reports:
            if detach_reports:
                if report.comment_author_user_id is None:
                    report.comment_author_user_id = authors[report.comment_id]
                report.comment_id = None
            else:
                self.db.delete(report)
        self.db.flush()

        for level in reversed(levels):
            self.db.execute(delete(Comment).where(Comment.id.in_([comment_id for comment_id, _ in level])))
        return len(comment_ids)

    def _subtree_levels(self, root: Comment) -> list[list[tuple[int, int]]]:
        """Breadth-first ``(comment_id, author_id)`` levels of the subtree under ``root``."""
        children: dict[int, list[tuple[int, int]]] = defaultdict(list)
        for comment_id, parent_id, author_id in self.db.execute(
            select(Comment.id, Comment.parent_comment_id, Comment.user_id).where(
                Comment.post_id == root.post_id
            )
        ):
            if parent_id is not None:
                children[parent_id].append((comment_id, author_id))

        levels = [[(root.id, root.user_id)]]
        while True:
            next_level = [child for comment_id, _ in levels[-1] for child in children.get(comment_id, [])]
            if not next_level:
                return levels
            levels.append(next_level)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _require_comment(self, comment_id: int) -> Comment:
        comment = self.db.get(Comment, comment_id)
        if comment is None:
            raise NotFoundError("Comment not found")
        return comment

    def _require_actor(self, actor_id: int) -> User:
        actor = self.db.get(User, actor_id)
        if actor is None:
            raise ForbiddenError("Unknown user")
        return actor

    def _single_view(self, comment_id: int, viewer_id: int | None) -> CommentView:
        view = self.get_comment(comment_id, viewer_id)
        if view is None:
            raise NotFoundError("Comment not found")
        return view
