"""Post and feed endpoints."""

from typing import Annotated

from fastapi import APIRouter, Query, status

from forum_core.core.settings import settings
from forum_core.schemas.post import PostCreate, PostUpdate, PostView
from forum_core.services.feed import FeedService
from forum_core.services.posts import PostService

from ..dependencies import CurrentUserDep, SessionDep, ViewerIdDep

router = APIRouter(prefix="/posts", tags=["posts"])


@router.get("/")
def get_feed(
    db: SessionDep,
    viewer_id: ViewerIdDep,
    filter_name: Annotated[
        str, Query(alias="filter", description="default, new, hot, top or closed")
    ] = "default",
    page: Annotated[int, Query(ge=1)] = 1,
    page_size: Annotated[int, Query(ge=1, le=settings.feed_max_page_size)] = settings.feed_default_page_size,
    tag: str | None = None,
) -> list[PostView]:
    """List approved posts for the viewer."""
    return FeedService(db).get_feed(filter_name, page, page_size, tag_name=tag, viewer_id=viewer_id)


@router.get("/{post_id}")
def get_post(post_id: int, db: SessionDep, viewer_id: ViewerIdDep) -> PostView:
    return FeedService(db).get_post(post_id, viewer_id=viewer_id)


@router.post("/", status_code=status.HTTP_201_CREATED)
def create_post(payload: PostCreate, db: SessionDep, current_user: CurrentUserDep) -> PostView:
    """Submit a post for moderation."""
    return PostService(db).create_post(payload, current_user.id)


@router.put("/{post_id}")
def update_post(
    post_id: int,
    payload: PostUpdate,
    db: SessionDep,
    current_user: CurrentUserDep,
) -> PostView:
    return PostService(db).update_post(post_id, payload, current_user.id)


@router.delete("/{post_id}")
def delete_post(post_id: int, db: SessionDep, current_user: CurrentUserDep) -> dict[str, str]:
    PostService(db).delete_post(post_id, current_user.id)
    return {"status": "deleted"}


@router.post("/{post_id}/vote", status_code=status.HTTP_201_CREATED)
def vote_post(post_id: int, db: SessionDep, current_user: CurrentUserDep) -> dict[str, str]:
    PostService(db).vote_post(post_id, current_user.id)
    return {"status": "liked"}


@router.delete("/{post_id}/vote")
def unvote_post(post_id: int, db: SessionDep, current_user: CurrentUserDep) -> dict[str, str]:
    PostService(db).unvote_post(post_id, current_user.id)
    return {"status": "unliked"}


@router.post("/{post_id}/hide")
def hide_post(post_id: int, db: SessionDep, current_user: CurrentUserDep) -> dict[str, str]:
    """Hide a post from the caller's feed only."""
    PostService(db).hide_post(post_id, current_user.id)
    return {"status": "hidden"}


@router.delete("/{post_id}/hide")
def unhide_post(post_id: int, db: SessionDep, current_user: CurrentUserDep) -> dict[str, str]:
    PostService(db).unhide_post(post_id, current_user.id)
    return {"status": "visible"}


@router.post("/{post_id}/view")
def record_view(post_id: int, db: SessionDep) -> dict[str, str]:
    PostService(db).increment_view_count(post_id)
    return {"status": "ok"}
