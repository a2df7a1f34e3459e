"""Moderator-only endpoints."""

from fastapi import APIRouter, Depends, Query

from forum_core.schemas.moderation import ModeratorStats, RejectPostRequest, ReportedCommentView, ReportView
from forum_core.schemas.post import PostView
from forum_core.schemas.user import UserStats
from forum_core.services.feed import FeedService
from forum_core.services.moderation import ModerationService
from forum_core.services.posts import PostService
from forum_core.services.users import UserDirectory

from ..dependencies import SessionDep, require_moderator

router = APIRouter(
    prefix="/moderation",
    tags=["moderation"],
    dependencies=[Depends(require_moderator)],
)


@router.get("/stats")
def get_stats(db: SessionDep) -> ModeratorStats:
    return ModerationService(db).moderator_stats()


@router.get("/posts/pending")
def list_pending_posts(db: SessionDep, page: int = Query(1, ge=1)) -> list[PostView]:
    return FeedService(db).list_pending_posts(page=page)


@router.get("/posts/rejected")
def list_rejected_posts(db: SessionDep, page: int = Query(1, ge=1)) -> list[PostView]:
    return FeedService(db).list_rejected_posts(page=page)


@router.post("/posts/{post_id}/approve")
def approve_post(post_id: int, db: SessionDep) -> dict[str, str]:
    ModerationService(db).approve_post(post_id)
    return {"status": "approved"}


@router.post("/posts/{post_id}/reject")
def reject_post(post_id: int, payload: RejectPostRequest, db: SessionDep) -> dict[str, str]:
    ModerationService(db).reject_post(post_id, payload.reason)
    return {"status": "rejected"}


@router.post("/posts/{post_id}/pin")
def pin_post(post_id: int, db: SessionDep) -> dict[str, str]:
    PostService(db).pin_post(post_id)
    return {"status": "pinned"}


@router.delete("/posts/{post_id}/pin")
def unpin_post(post_id: int, db: SessionDep) -> dict[str, str]:
    PostService(db).unpin_post(post_id)
    return {"status": "unpinned"}


@router.get("/reports")
def list_reported_comments(db: SessionDep, page: int = Query(1, ge=1)) -> list[ReportedCommentView]:
    """Pending reports, newest first."""
    return ModerationService(db).list_reported_comments(page=page)


@router.post("/reports/{report_id}/approve")
def approve_report(report_id: int, db: SessionDep) -> ReportView:
    """Remove the reported comment and its replies."""
    service = ModerationService(db)
    service.approve_report(report_id)
    return service.get_report(report_id)


@router.post("/reports/{report_id}/dismiss")
def dismiss_report(report_id: int, db: SessionDep) -> ReportView:
    service = ModerationService(db)
    service.dismiss_report(report_id)
    return service.get_report(report_id)


@router.get("/users/{user_id}/stats")
def get_user_stats(user_id: int, db: SessionDep) -> UserStats:
    return UserDirectory(db).get_user_stats(user_id)


@router.post("/users/{user_id}/restrict")
def restrict_user(user_id: int, db: SessionDep) -> dict[str, str]:
    UserDirectory(db).restrict(user_id)
    return {"status": "restricted"}


@router.delete("/users/{user_id}/restrict")
def unrestrict_user(user_id: int, db: SessionDep) -> dict[str, str]:
    UserDirectory(db).unrestrict(user_id)
    return {"status": "unrestricted"}
