# tests/v1/test_dependencies.py
"""Tests for API dependencies and token handling."""

import pytest
from fastapi import HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials

from forum_core.api.v1.dependencies import get_current_user, get_viewer_id, require_moderator
from forum_core.core.errors import ForbiddenError
from forum_core.core.security import create_access_token, decode_user_id


def _credentials(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


def test_token_round_trip() -> None:
    assert decode_user_id(create_access_token(42)) == 42


def test_decode_rejects_garbage() -> None:
    with pytest.raises(ValueError):
        decode_user_id("not-a-token")


def test_viewer_is_optional() -> None:
    assert get_viewer_id(None) is None
    assert get_viewer_id(_credentials(create_access_token(7))) == 7


def test_invalid_token_is_unauthorized() -> None:
    with pytest.raises(HTTPException) as exc_info:
        get_viewer_id(_credentials("broken"))
    assert exc_info.value.status_code == status.HTTP_401_UNAUTHORIZED


def test_current_user_requires_token(db_session) -> None:
    with pytest.raises(HTTPException) as exc_info:
        get_current_user(None, db_session)
    assert exc_info.value.status_code == status.HTTP_401_UNAUTHORIZED


def test_current_user_must_exist(db_session) -> None:
    with pytest.raises(HTTPException) as exc_info:
        get_current_user(9999, db_session)
    assert exc_info.value.detail == "User not found"


def test_require_moderator(author, moderator, admin) -> None:
    assert require_moderator(moderator) is moderator
    assert require_moderator(admin) is admin
    with pytest.raises(ForbiddenError):
        require_moderator(author)
