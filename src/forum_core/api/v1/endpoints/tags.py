"""Tag endpoints. Reads are public; changes need a moderator."""

from fastapi import APIRouter, HTTPException, status

from forum_core.schemas.tag import TagCreate, TagUpdate, TagView
from forum_core.services.tags import TagService

from ..dependencies import ModeratorDep, SessionDep

router = APIRouter(prefix="/tags", tags=["tags"])


@router.get("/")
def list_tags(db: SessionDep, q: str | None = None) -> list[TagView]:
    service = TagService(db)
    if q:
        return service.search_tags(q)
    return service.list_tags()


@router.get("/by-name/{name}")
def get_tag_by_name(name: str, db: SessionDep) -> TagView:
    tag = TagService(db).get_tag_by_name(name)
    if tag is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tag not found")
    return tag


@router.get("/{tag_id}")
def get_tag(tag_id: int, db: SessionDep) -> TagView:
    return TagService(db).get_tag(tag_id)


@router.post("/", status_code=status.HTTP_201_CREATED)
def create_tag(payload: TagCreate, db: SessionDep, _moderator: ModeratorDep) -> TagView:
    return TagService(db).create_tag(payload.name)


@router.put("/{tag_id}")
def rename_tag(tag_id: int, payload: TagUpdate, db: SessionDep, _moderator: ModeratorDep) -> TagView:
    return TagService(db).rename_tag(tag_id, payload.name)


@router.delete("/{tag_id}")
def delete_tag(tag_id: int, db: SessionDep, _moderator: ModeratorDep) -> dict[str, str]:
    TagService(db).delete_tag(tag_id)
    return {"status": "deleted"}
