# tests/v1/test_tags.py
"""Tests for tag endpoints."""

from fastapi import status


def test_tag_changes_need_moderator(client, author, auth_headers) -> None:
    response = client.post("/api/v1/tags/", json={"name": "python"}, headers=auth_headers(author))
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_tag_crud(client, moderator, auth_headers) -> None:
    headers = auth_headers(moderator)

    created = client.post("/api/v1/tags/", json={"name": "python"}, headers=headers)
    assert created.status_code == status.HTTP_201_CREATED
    tag_id = created.json()["id"]

    duplicate = client.post("/api/v1/tags/", json={"name": "Python"}, headers=headers)
    assert duplicate.status_code == status.HTTP_409_CONFLICT

    renamed = client.put(f"/api/v1/tags/{tag_id}", json={"name": "py"}, headers=headers)
    assert renamed.json()["name"] == "py"
    assert client.get("/api/v1/tags/by-name/PY").json()["id"] == tag_id
    assert [tag["name"] for tag in client.get("/api/v1/tags/", params={"q": "p"}).json()] == ["py"]

    assert client.delete(f"/api/v1/tags/{tag_id}", headers=headers).status_code == status.HTTP_200_OK
    assert client.get(f"/api/v1/tags/{tag_id}").status_code == status.HTTP_404_NOT_FOUND


def test_tag_in_use_cannot_be_deleted(client, author, moderator, make_post, auth_headers) -> None:
    make_post(author, tags=["busy"])
    tag = client.get("/api/v1/tags/by-name/busy").json()

    response = client.delete(f"/api/v1/tags/{tag['id']}", headers=auth_headers(moderator))

    assert response.status_code == status.HTTP_409_CONFLICT
    assert tag["post_count"] == 1
