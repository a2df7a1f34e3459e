"""Error taxonomy shared by every service in the engine.

Services raise these exceptions; the HTTP layer maps them onto status codes.
Storage failures are not part of the hierarchy and propagate unchanged.
"""

from __future__ import annotations

HTTP_FORBIDDEN = 403
HTTP_NOT_FOUND = 404
HTTP_CONFLICT = 409


class ForumError(RuntimeError):
    """Base exception for expected, user-facing failures."""

    status_code: int = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(ForumError):
    """Raised when a referenced post, comment, report, tag or user does not exist."""

    status_code = HTTP_NOT_FOUND


class ForbiddenError(ForumError):
    """Raised when the actor lacks the capability for an operation or is restricted."""

    status_code = HTTP_FORBIDDEN


class ConflictError(ForumError):
    """Raised when an operation clashes with existing state.

    Duplicate votes, missing votes to remove, duplicate tag names and illegal
    workflow transitions all surface as conflicts.
    """

    status_code = HTTP_CONFLICT
