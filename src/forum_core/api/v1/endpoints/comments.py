"""Comment endpoints: threads, replies, likes and reports."""

from fastapi import APIRouter, HTTPException, status

from forum_core.schemas.comment import CommentCreate, CommentUpdate, CommentView
from forum_core.schemas.moderation import ReportCreate, ReportView
from forum_core.services.comments import CommentService
from forum_core.services.moderation import ModerationService

from ..dependencies import CurrentUserDep, SessionDep, ViewerIdDep

router = APIRouter(tags=["comments"])


@router.get("/posts/{post_id}/comments")
def get_comments(post_id: int, db: SessionDep, viewer_id: ViewerIdDep) -> list[CommentView]:
    """Return the full comment forest of a post."""
    return CommentService(db).get_comments_for_post(post_id, viewer_id=viewer_id)


@router.post("/posts/{post_id}/comments", status_code=status.HTTP_201_CREATED)
def create_comment(
    post_id: int,
    payload: CommentCreate,
    db: SessionDep,
    current_user: CurrentUserDep,
) -> CommentView:
    return CommentService(db).create_comment(
        post_id,
        payload.body,
        current_user.id,
        parent_comment_id=payload.parent_comment_id,
    )


@router.get("/comments/{comment_id}")
def get_comment(comment_id: int, db: SessionDep, viewer_id: ViewerIdDep) -> CommentView:
    comment = CommentService(db).get_comment(comment_id, viewer_id=viewer_id)
    if comment is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Comment not found")
    return comment


@router.post("/comments/{comment_id}/replies", status_code=status.HTTP_201_CREATED)
def create_reply(
    comment_id: int,
    payload: CommentUpdate,
    db: SessionDep,
    current_user: CurrentUserDep,
) -> CommentView:
    return CommentService(db).create_reply(comment_id, payload.body, current_user.id)


@router.put("/comments/{comment_id}")
def update_comment(
    comment_id: int,
    payload: CommentUpdate,
    db: SessionDep,
    current_user: CurrentUserDep,
) -> CommentView:
    return CommentService(db).update_comment(comment_id, payload.body, current_user.id)


@router.delete("/comments/{comment_id}")
def delete_comment(comment_id: int, db: SessionDep, current_user: CurrentUserDep) -> dict[str, int]:
    """Delete a comment together with all of its replies."""
    removed = CommentService(db).delete_comment(comment_id, current_user.id)
    return {"removed": removed}


@router.post("/comments/{comment_id}/like", status_code=status.HTTP_201_CREATED)
def like_comment(comment_id: int, db: SessionDep, current_user: CurrentUserDep) -> dict[str, str]:
    CommentService(db).like_comment(comment_id, current_user.id)
    return {"status": "liked"}


@router.delete("/comments/{comment_id}/like")
def unlike_comment(comment_id: int, db: SessionDep, current_user: CurrentUserDep) -> dict[str, str]:
    CommentService(db).unlike_comment(comment_id, current_user.id)
    return {"status": "unliked"}


@router.post("/comments/{comment_id}/report", status_code=status.HTTP_201_CREATED)
def report_comment(
    comment_id: int,
    payload: ReportCreate,
    db: SessionDep,
    current_user: CurrentUserDep,
) -> ReportView:
    return ModerationService(db).report_comment(comment_id, payload.reason, current_user.id)
