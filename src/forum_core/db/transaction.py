"""Unit-of-work helper wrapping multi-step mutations."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.orm import Session

from forum_core.core.errors import ForumError

logger = logging.getLogger(__name__)


@contextmanager
def transaction(db: Session, action: str) -> Iterator[Session]:
    """Commit everything done inside the block, or roll all of it back.

    Expected failures (``ForumError``) roll back quietly; anything else is
    logged and re-raised unmodified.
    """
    try:
        yield db
        db.commit()
    except ForumError:
        db.rollback()
        raise
    except Exception:
        db.rollback()
        logger.error("Rolled back %s", action, exc_info=True)
        raise
