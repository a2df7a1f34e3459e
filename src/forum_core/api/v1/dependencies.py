"""Shared API dependencies for authentication and common functionality."""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from forum_core.core.errors import ForbiddenError
from forum_core.core.security import decode_user_id
from forum_core.db.session import get_db
from forum_core.models import User, UserRole

# Anonymous requests are allowed; endpoints that need a member say so.
bearer_scheme = HTTPBearer(auto_error=False)

SessionDep = Annotated[Session, Depends(get_db)]


def get_viewer_id(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> int | None:
    """Return the user id of the bearer token, or ``None`` for anonymous requests.

    Raises:
        HTTPException: If a token is present but invalid.
    """
    if credentials is None:
        return None
    try:
        return decode_user_id(credentials.credentials)
    except ValueError as err:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
        ) from err


ViewerIdDep = Annotated[int | None, Depends(get_viewer_id)]


def get_current_user(viewer_id: ViewerIdDep, db: SessionDep) -> User:
    """Return the authenticated member.

    Raises:
        HTTPException: If no token was sent or the user does not exist.
    """
    if viewer_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    user = db.get(User, viewer_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )
    return user


CurrentUserDep = Annotated[User, Depends(get_current_user)]


def require_moderator(current_user: CurrentUserDep) -> User:
    """Allow moderators and admins only."""
    if current_user.role not in (UserRole.MODERATOR, UserRole.ADMIN):
        raise ForbiddenError("Moderator privileges required")
    return current_user


ModeratorDep = Annotated[User, Depends(require_moderator)]
