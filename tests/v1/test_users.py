# mypy: ignore-errors
# tests/v1/test_users.py
"""Tests for profile endpoints."""

from fastapi import status


def test_get_me_lists_communities(client, owner_headers, owner, community) -> None:
    """The private profile includes the e-mail and joined communities."""
    response = client.get("/api/v1/users/me", headers=owner_headers)
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["email"] == "alice@example.com"
    assert data["communities"] == [community.id]


def test_update_profile(client, member_headers, member) -> None:
    """Only the fields sent are changed."""
    response = client.patch(
        "/api/v1/users/me",
        json={"display_name": "  Bobby ", "bio": "Plays the Sicilian"},
        headers=member_headers,
    )
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["display_name"] == "Bobby"
    assert data["bio"] == "Plays the Sicilian"
    assert data["location"] == ""
    assert member.display_name == "Bobby"


def test_update_profile_keeps_post_author_name(
    client, member_headers, member, interactions, membership, community
) -> None:
    """Existing posts keep the name captured when they were written."""
    membership.join(member, community.id)
    post = interactions.create_post(member, community.id, content="Gambit ideas")

    client.patch("/api/v1/users/me", json={"display_name": "Bobby"}, headers=member_headers)

    response = client.get(f"/api/v1/posts/{post.id}")
    assert response.json()["author_display_name"] == "Bob"


def test_get_public_profile(client, owner, community) -> None:
    """Public profiles omit the e-mail address."""
    response = client.get(f"/api/v1/users/{owner.id}")
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["display_name"] == "Alice"
    assert data["communities"] == [community.id]
    assert "email" not in data


def test_get_missing_profile(client) -> None:
    """Unknown users return 404."""
    response = client.get("/api/v1/users/99999")
    assert response.status_code == status.HTTP_404_NOT_FOUND
