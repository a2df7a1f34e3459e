# tests/v1/test_comments.py
"""Tests for comment endpoints."""

from fastapi import status


def test_comment_thread_round_trip(client, author, other_user, make_post, auth_headers) -> None:
    post = make_post(author)

    root = client.post(
        f"/api/v1/posts/{post.id}/comments",
        json={"body": "First!"},
        headers=auth_headers(author),
    )
    assert root.status_code == status.HTTP_201_CREATED
    reply = client.post(
        f"/api/v1/comments/{root.json()['id']}/replies",
        json={"body": "Welcome"},
        headers=auth_headers(other_user),
    )
    assert reply.status_code == status.HTTP_201_CREATED

    thread = client.get(f"/api/v1/posts/{post.id}/comments").json()
    assert len(thread) == 1
    assert thread[0]["replies"][0]["body"] == "Welcome"
    assert thread[0]["replies"][0]["author"]["username"] == "other"


def test_cross_post_parent_is_conflict(client, author, make_post, make_comment, auth_headers) -> None:
    first = make_post(author, title="first")
    second = make_post(author, title="second")
    parent = make_comment(first, author)

    response = client.post(
        f"/api/v1/posts/{second.id}/comments",
        json={"body": "wrong thread", "parent_comment_id": parent.id},
        headers=auth_headers(author),
    )

    assert response.status_code == status.HTTP_409_CONFLICT


def test_like_comment(client, author, other_user, make_post, make_comment, auth_headers) -> None:
    comment = make_comment(make_post(author), author)
    headers = auth_headers(other_user)

    assert client.post(f"/api/v1/comments/{comment.id}/like", headers=headers).status_code == 201
    view = client.get(f"/api/v1/comments/{comment.id}", headers=headers).json()
    assert view["like_count"] == 1
    assert view["is_voted"] is True


def test_delete_comment_subtree(client, author, other_user, make_post, make_comment, auth_headers) -> None:
    post = make_post(author)
    root = make_comment(post, other_user)
    make_comment(post, author, parent=root)

    stranger = client.delete(f"/api/v1/comments/{root.id}")
    assert stranger.status_code == status.HTTP_401_UNAUTHORIZED

    # The post owner may clean up their thread.
    response = client.delete(f"/api/v1/comments/{root.id}", headers=auth_headers(author))
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"removed": 2}
    assert client.get(f"/api/v1/comments/{root.id}").status_code == status.HTTP_404_NOT_FOUND


def test_report_comment(client, author, other_user, make_post, make_comment, auth_headers) -> None:
    comment = make_comment(make_post(author), author)

    response = client.post(
        f"/api/v1/comments/{comment.id}/report",
        json={"reason": "Spam"},
        headers=auth_headers(other_user),
    )

    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["status"] == "Pending"
    assert response.json()["comment_author_user_id"] == author.id
