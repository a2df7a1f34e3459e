# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from datetime import UTC, datetime, timedelta
from itertools import count

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("DATABASE_URL", "sqlite://")

from forum_core.core.security import create_access_token
from forum_core.db.session import Base, enable_sqlite_foreign_keys
from forum_core.db.session import get_db as app_get_session
from forum_core.main import app as fastapi_app
from forum_core.models import Comment, Post, PostStatus, Report, ReportStatus, Tag, User, UserRole

TEST_DB_URL = "sqlite://"

_USER_COUNTER = count(1)
_BASE_TIME = datetime(2024, 1, 1, tzinfo=UTC)
_CLOCK = count(1)


def _next_timestamp() -> datetime:
    """Strictly increasing timestamps so creation order is deterministic."""
    return _BASE_TIME + timedelta(minutes=next(_CLOCK))


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    SessionLocal = sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()

        # Services commit, so every test wipes the tables it touched.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def make_user(db_session: Session) -> Callable[..., User]:
    def _make_user(
        username: str | None = None,
        role: UserRole = UserRole.USER,
        is_restricted: bool = False,
    ) -> User:
        index = next(_USER_COUNTER)
        user = User(
            username=username or f"member{index}",
            email=f"member{index}@example.com",
            role=role,
            is_restricted=is_restricted,
        )
        db_session.add(user)
        db_session.commit()
        return user

    return _make_user


@pytest.fixture()
def author(make_user: Callable[..., User]) -> User:
    return make_user("author")


@pytest.fixture()
def other_user(make_user: Callable[..., User]) -> User:
    return make_user("other")


@pytest.fixture()
def moderator(make_user: Callable[..., User]) -> User:
    return make_user("moderator", role=UserRole.MODERATOR)


@pytest.fixture()
def admin(make_user: Callable[..., User]) -> User:
    return make_user("admin", role=UserRole.ADMIN)


@pytest.fixture()
def make_post(db_session: Session) -> Callable[..., Post]:
    def _make_post(
        owner: User,
        title: str = "A post",
        status: PostStatus = PostStatus.APPROVED,
        is_pinned: bool = False,
        is_hidden: bool = False,
        view_count: int = 0,
        tags: list[str] | None = None,
    ) -> Post:
        post = Post(
            user_id=owner.id,
            title=title,
            body=f"Body of {title}",
            status=status,
            is_pinned=is_pinned,
            is_hidden=is_hidden,
            view_count=view_count,
            created_at=_next_timestamp(),
        )
        for name in tags or []:
            tag = db_session.query(Tag).filter(Tag.name == name).first() or Tag(name=name)
            post.tags.append(tag)
        db_session.add(post)
        db_session.commit()
        return post

    return _make_post


@pytest.fixture()
def make_comment(db_session: Session) -> Callable[..., Comment]:
    def _make_comment(
        post: Post,
        user: User,
        body: str = "A comment",
        parent: Comment | None = None,
    ) -> Comment:
        comment = Comment(
            post_id=post.id,
            user_id=user.id,
            body=body,
            parent_comment_id=parent.id if parent is not None else None,
            created_at=_next_timestamp(),
        )
        db_session.add(comment)
        db_session.commit()
        return comment

    return _make_comment


@pytest.fixture()
def make_report(db_session: Session) -> Callable[..., Report]:
    def _make_report(
        comment: Comment,
        reporter: User,
        reason: str = "Spam",
        status: ReportStatus = ReportStatus.PENDING,
    ) -> Report:
        report = Report(
            user_id=reporter.id,
            comment_id=comment.id,
            comment_author_user_id=comment.user_id,
            reason=reason,
            status=status,
            created_at=_next_timestamp(),
        )
        db_session.add(report)
        db_session.commit()
        return report

    return _make_report


@pytest.fixture()
def auth_headers() -> Callable[[User], dict[str, str]]:
    def _auth_headers(user: User) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(user.id)}"}

    return _auth_headers
