"""Tag catalogue maintenance."""

from __future__ import annotations

import logging

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from forum_core.core.errors import ConflictError, NotFoundError
from forum_core.db.transaction import transaction
from forum_core.models import Tag, post_tag
from forum_core.schemas.tag import TagView

logger = logging.getLogger(__name__)


class TagService:
    """CRUD for tags; names are unique regardless of case."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def list_tags(self) -> list[TagView]:
        """All tags, alphabetically, with the number of posts using each."""
        rows = self.db.execute(
            select(Tag, func.count(post_tag.c.post_id))
            .outerjoin(post_tag, post_tag.c.tag_id == Tag.id)
            .group_by(Tag.id)
            .order_by(Tag.name)
        ).all()
        return [self._view(tag, post_count) for tag, post_count in rows]

    def search_tags(self, query: str, limit: int = 20) -> list[TagView]:
        pattern = f"%{query.strip()}%"
        tags = self.db.scalars(select(Tag).where(Tag.name.ilike(pattern)).order_by(Tag.name).limit(limit))
        return [self._view(tag) for tag in tags]

    def get_tag(self, tag_id: int) -> TagView:
        return self._view(self._require_tag(tag_id), self._post_count(tag_id))

    def get_tag_by_name(self, name: str) -> TagView | None:
        tag = self._find_by_name(name)
        if tag is None:
            return None
        return self._view(tag, self._post_count(tag.id))

    def create_tag(self, name: str) -> TagView:
        name = name.strip()
        if self._find_by_name(name) is not None:
            raise ConflictError(f"Tag '{name}' already exists")
        tag = Tag(name=name)
        try:
            with transaction(self.db, "tag creation"):
                self.db.add(tag)
        except IntegrityError as err:
            raise ConflictError(f"Tag '{name}' already exists") from err
        logger.info("Created tag %s (%s)", tag.id, name)
        return self._view(tag, 0)

    def rename_tag(self, tag_id: int, name: str) -> TagView:
        tag = self._require_tag(tag_id)
        name = name.strip()
        clash = self._find_by_name(name)
        if clash is not None and clash.id != tag.id:
            raise ConflictError(f"Tag '{name}' already exists")
        try:
            with transaction(self.db, f"rename of tag {tag_id}"):
                tag.name = name
        except IntegrityError as err:
            raise ConflictError(f"Tag '{name}' already exists") from err
        return self._view(tag, self._post_count(tag_id))

    def delete_tag(self, tag_id: int) -> None:
        """Delete an unused tag; a tag still attached to posts is a conflict."""
        tag = self._require_tag(tag_id)
        if self._post_count(tag_id):
            raise ConflictError("Cannot delete a tag that is used by posts")
        with transaction(self.db, f"deletion of tag {tag_id}"):
            self.db.delete(tag)
        logger.info("Deleted tag %s", tag_id)

    def _find_by_name(self, name: str) -> Tag | None:
        return self.db.scalar(select(Tag).where(func.lower(Tag.name) == name.strip().lower()))

    def _require_tag(self, tag_id: int) -> Tag:
        tag = self.db.get(Tag, tag_id)
        if tag is None:
            raise NotFoundError("Tag not found")
        return tag

    def _post_count(self, tag_id: int) -> int:
        return self.db.scalar(
            select(func.count()).select_from(post_tag).where(post_tag.c.tag_id == tag_id)
        ) or 0

    @staticmethod
    def _view(tag: Tag, post_count: int | None = None) -> TagView:
        return TagView(id=tag.id, name=tag.name, created_at=tag.created_at, post_count=post_count)
