"""Notification inbox of the authenticated member."""

from fastapi import APIRouter

from forum_core.schemas.notification import NotificationView
from forum_core.services.notifications import list_notifications

from ..dependencies import CurrentUserDep, SessionDep

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("/")
def get_notifications(db: SessionDep, current_user: CurrentUserDep) -> list[NotificationView]:
    return list_notifications(db, current_user.id)
