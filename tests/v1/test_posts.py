# mypy: ignore-errors
# tests/v1/test_posts.py
"""Tests for post interaction endpoints."""

from fastapi import status


def test_get_post(client, post, owner) -> None:
    """A post is returned with its author snapshot."""
    response = client.get(f"/api/v1/posts/{post.id}")
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["content"] == "Weekly puzzle thread"
    assert data["author_id"] == owner.id
    assert data["author_display_name"] == "Alice"


def test_get_missing_post(client) -> None:
    """Unknown posts return 404."""
    assert client.get("/api/v1/posts/99999").status_code == status.HTTP_404_NOT_FOUND


def test_toggle_reaction(client, post, member, member_headers) -> None:
    """Posting the same reaction twice toggles it on and off."""
    url = f"/api/v1/posts/{post.id}/reactions"

    response = client.post(url, json={"kind": "like"}, headers=member_headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {
        "post_id": post.id,
        "kind": "like",
        "active": True,
        "reactions": {"like": [member.id]},
    }

    response = client.post(url, json={"kind": "like"}, headers=member_headers)
    assert response.json()["active"] is False
    assert response.json()["reactions"] == {}


def test_unknown_reaction(client, post, member_headers) -> None:
    """Unknown reaction kinds are a 400."""
    response = client.post(
        f"/api/v1/posts/{post.id}/reactions", json={"kind": "shrug"}, headers=member_headers
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_comment_reply_and_delete(
    client, post, owner_headers, member_headers, outsider_headers
) -> None:
    """Comments and replies are addressed by id and deleted by their authors."""
    response = client.post(
        f"/api/v1/posts/{post.id}/comments", json={"content": "nice club"}, headers=member_headers
    )
    assert response.status_code == status.HTTP_201_CREATED
    comment = response.json()
    assert comment["content"] == "nice club"
    assert comment["replies"] == []

    response = client.post(
        f"/api/v1/posts/{post.id}/comments/{comment['id']}/replies",
        json={"content": "thanks!"},
        headers=owner_headers,
    )
    assert response.status_code == status.HTTP_201_CREATED
    reply = response.json()

    data = client.get(f"/api/v1/posts/{post.id}").json()
    assert [c["id"] for c in data["comments"]] == [comment["id"]]
    assert [r["id"] for r in data["comments"][0]["replies"]] == [reply["id"]]

    comment_url = f"/api/v1/posts/{post.id}/comments/{comment['id']}"
    assert client.delete(comment_url, headers=owner_headers).status_code == 403
    assert client.delete(comment_url, headers=outsider_headers).status_code == 403

    response = client.delete(comment_url, headers=member_headers)
    assert response.status_code == status.HTTP_204_NO_CONTENT
    assert client.get(f"/api/v1/posts/{post.id}").json()["comments"] == []


def test_blank_comment_rejected(client, post, member_headers) -> None:
    """Whitespace-only comments are a 400."""
    response = client.post(
        f"/api/v1/posts/{post.id}/comments", json={"content": "   "}, headers=member_headers
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"] == "Comment cannot be empty"


def test_delete_post(client, post, owner_headers, member_headers) -> None:
    """Only the author can delete a post."""
    url = f"/api/v1/posts/{post.id}"
    assert client.delete(url, headers=member_headers).status_code == 403
    assert client.delete(url, headers=owner_headers).status_code == status.HTTP_204_NO_CONTENT
    assert client.get(url).status_code == status.HTTP_404_NOT_FOUND


def test_backend_failure_is_reported(client, post, member_headers, failing_commit) -> None:
    """A failed write is a 503 with a generic message."""
    failing_commit(1)
    response = client.post(
        f"/api/v1/posts/{post.id}/reactions", json={"kind": "like"}, headers=member_headers
    )
    assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
    assert response.json()["detail"] == "Failed to update reaction"
    assert client.get(f"/api/v1/posts/{post.id}").json()["reactions"] == {}
