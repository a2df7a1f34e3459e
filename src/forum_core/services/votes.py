"""Like ledger shared by posts and comments.

A like is a row keyed by ``(user_id, target_id)``. Counts are derived from the
rows, never stored, so a count is always exactly the number of existing likes.
"""

from __future__ import annotations

import logging
from collections.abc import Collection

from sqlalchemy import Select, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from forum_core.core.errors import ConflictError, NotFoundError
from forum_core.db.transaction import transaction
from forum_core.models import Comment, CommentLike, Post, PostLike

logger = logging.getLogger(__name__)

TargetIds = Collection[int] | Select


class VoteLedger:
    """Vote, unvote and count likes for one kind of target."""

    def __init__(
        self,
        db: Session,
        like_model: type[PostLike] | type[CommentLike],
        target_model: type[Post] | type[Comment],
        target_column: str,
        label: str,
    ) -> None:
        self.db = db
        self.like_model = like_model
        self.target_model = target_model
        self.target_column = getattr(like_model, target_column)
        self.target_column_name = target_column
        self.label = label

    def _require_target(self, target_id: int) -> None:
        if self.db.get(self.target_model, target_id) is None:
            raise NotFoundError(f"{self.label.capitalize()} not found")

    def _existing(self, target_id: int, user_id: int) -> PostLike | CommentLike | None:
        return self.db.scalar(
            select(self.like_model).where(
                self.target_column == target_id,
                self.like_model.user_id == user_id,
            )
        )

    def vote(self, target_id: int, user_id: int) -> None:
        """Record a like by ``user_id``.

        Raises:
            NotFoundError: If the target does not exist.
            ConflictError: If the user already liked the target.
        """
        self._require_target(target_id)
        if self._existing(target_id, user_id) is not None:
            raise ConflictError(f"You have already liked this {self.label}")

        like = self.like_model(user_id=user_id, **{self.target_column_name: target_id})
        try:
            with transaction(self.db, f"{self.label} like"):
                self.db.add(like)
        except IntegrityError as err:
            # A concurrent request inserted the same key first.
            raise ConflictError(f"You have already liked this {self.label}") from err
        logger.debug("User %s liked %s %s", user_id, self.label, target_id)

    def unvote(self, target_id: int, user_id: int) -> None:
        """Remove the like by ``user_id``; a missing like is a conflict."""
        self._require_target(target_id)
        like = self._existing(target_id, user_id)
        if like is None:
            raise ConflictError(f"You haven't liked this {self.label}")

        with transaction(self.db, f"{self.label} unlike"):
            self.db.delete(like)
        logger.debug("User %s unliked %s %s", user_id, self.label, target_id)

    def count(self, target_id: int) -> int:
        return self.db.scalar(
            select(func.count()).select_from(self.like_model).where(self.target_column == target_id)
        ) or 0

    def counts(self, target_ids: TargetIds) -> dict[int, int]:
        """Like counts per target in a single grouped query.

        ``target_ids`` may be a collection of ids or a ``SELECT`` yielding ids.
        Targets without likes are absent from the result.
        """
        if not isinstance(target_ids, Select) and not target_ids:
            return {}
        rows = self.db.execute(
            select(self.target_column, func.count())
            .where(self.target_column.in_(target_ids))
            .group_by(self.target_column)
        ).all()
        return {target_id: total for target_id, total in rows}

    def voted_ids(self, user_id: int | None, target_ids: Collection[int]) -> set[int]:
        """Subset of ``target_ids`` liked by ``user_id``; empty for anonymous viewers."""
        if user_id is None or not target_ids:
            return set()
        return set(
            self.db.scalars(
                select(self.target_column).where(
                    self.like_model.user_id == user_id,
                    self.target_column.in_(target_ids),
                )
            )
        )

    def likes_for(self, target_ids: Collection[int]) -> list[tuple[int, int]]:
        """All ``(target_id, user_id)`` pairs for ``target_ids``."""
        if not target_ids:
            return []
        rows = self.db.execute(
            select(self.target_column, self.like_model.user_id).where(
                self.target_column.in_(target_ids)
            )
        ).all()
        return [(target_id, user_id) for target_id, user_id in rows]


def post_ledger(db: Session) -> VoteLedger:
    return VoteLedger(db, PostLike, Post, "post_id", "post")


def comment_ledger(db: Session) -> VoteLedger:
    return VoteLedger(db, CommentLike, Comment, "comment_id", "comment")
