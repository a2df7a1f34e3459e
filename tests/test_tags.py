# tests/test_tags.py
"""Tests for tag maintenance."""

import pytest

from forum_core.core.errors import ConflictError, NotFoundError
from forum_core.services.tags import TagService


def test_create_and_list(db_session, author, make_post) -> None:
    make_post(author, tags=["python"])
    service = TagService(db_session)

    created = service.create_tag("  rust ")

    assert created.name == "rust"
    listing = {tag.name: tag.post_count for tag in service.list_tags()}
    assert listing == {"python": 1, "rust": 0}


def test_duplicate_names_conflict_regardless_of_case(db_session) -> None:
    service = TagService(db_session)
    service.create_tag("Python")

    with pytest.raises(ConflictError):
        service.create_tag("python")


def test_lookup_and_search(db_session) -> None:
    service = TagService(db_session)
    tag = service.create_tag("FastAPI")
    service.create_tag("Flask")

    assert service.get_tag_by_name("fastapi").id == tag.id
    assert service.get_tag_by_name("django") is None
    assert [found.name for found in service.search_tags("fa")] == ["FastAPI"]
    assert service.get_tag(tag.id).post_count == 0
    with pytest.raises(NotFoundError):
        service.get_tag(999)


def test_rename(db_session) -> None:
    service = TagService(db_session)
    tag = service.create_tag("pyhton")
    service.create_tag("rust")

    assert service.rename_tag(tag.id, "python").name == "python"
    # Changing only the case of its own name is allowed.
    assert service.rename_tag(tag.id, "Python").name == "Python"
    with pytest.raises(ConflictError):
        service.rename_tag(tag.id, "Rust")


def test_delete_refuses_tags_in_use(db_session, author, make_post) -> None:
    make_post(author, tags=["busy"])
    service = TagService(db_session)
    busy = service.get_tag_by_name("busy")
    idle = service.create_tag("idle")

    with pytest.raises(ConflictError):
        service.delete_tag(busy.id)
    service.delete_tag(idle.id)

    assert [tag.name for tag in service.list_tags()] == ["busy"]
