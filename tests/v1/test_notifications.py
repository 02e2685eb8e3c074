# mypy: ignore-errors
# tests/v1/test_notifications.py
"""Tests for the notification feed endpoints."""

import asyncio
import json

import pytest
from fastapi import status

from niche_communities.api.v1.endpoints.notifications import stream_notifications
from niche_communities.models import NotificationType
from niche_communities.services.notifications import emit_notification


def _interact(client, community, post, member_headers):
    client.post(f"/api/v1/communities/{community.id}/join", headers=member_headers)
    client.post(f"/api/v1/posts/{post.id}/reactions", json={"kind": "love"}, headers=member_headers)
    client.post(
        f"/api/v1/posts/{post.id}/comments", json={"content": "nice club"}, headers=member_headers
    )


def test_feed_is_newest_first(client, community, post, owner, owner_headers, member_headers) -> None:
    """The snapshot lists notifications newest first with their links."""
    _interact(client, community, post, member_headers)

    response = client.get("/api/v1/notifications/", headers=owner_headers)
    assert response.status_code == status.HTTP_200_OK
    feed = response.json()
    assert feed["recipient_id"] == owner.id
    assert feed["unread_count"] == 3
    assert [n["type"] for n in feed["notifications"]] == ["comment", "reaction", "join"]
    assert [n["link"] for n in feed["notifications"]] == [
        f"/community/{community.id}#post-{post.id}",
        f"/community/{community.id}#post-{post.id}",
        f"/community/{community.id}",
    ]
    assert feed["notifications"][1]["message"] == "Bob reacted with love to your post"


def test_feed_requires_auth(client) -> None:
    """Anonymous callers have no feed."""
    response = client.get("/api/v1/notifications/")
    assert response.status_code in {status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN}


def test_mark_read(client, community, post, owner_headers, member_headers) -> None:
    """Marking a notification read twice gives the same snapshot."""
    _interact(client, community, post, member_headers)
    feed = client.get("/api/v1/notifications/", headers=owner_headers).json()
    target = feed["notifications"][0]["id"]

    first = client.post(f"/api/v1/notifications/{target}/read", headers=owner_headers)
    assert first.status_code == status.HTTP_200_OK
    assert first.json()["unread_count"] == 2

    second = client.post(f"/api/v1/notifications/{target}/read", headers=owner_headers)
    assert second.json() == first.json()


def test_mark_read_of_someone_else(client, community, post, owner_headers, member_headers) -> None:
    """Another user's notification is left untouched."""
    _interact(client, community, post, member_headers)
    target = client.get("/api/v1/notifications/", headers=owner_headers).json()["notifications"][0]

    response = client.post(f"/api/v1/notifications/{target['id']}/read", headers=member_headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["notifications"] == []
    assert client.get("/api/v1/notifications/", headers=owner_headers).json()["unread_count"] == 3


def test_mark_all_read(client, community, post, owner_headers, member_headers) -> None:
    """Mark-all clears the unread count in the returned snapshot."""
    _interact(client, community, post, member_headers)

    response = client.post("/api/v1/notifications/read-all", headers=owner_headers)
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["updated"] == 3
    assert data["snapshot"]["unread_count"] == 0
    assert all(n["read"] for n in data["snapshot"]["notifications"])


def _frame_payload(frame: str) -> dict:
    event, data = frame.rstrip("\n").split("\n")
    assert event == "event: snapshot"
    return json.loads(data.removeprefix("data: "))


@pytest.mark.asyncio
async def test_stream_sends_snapshot_frames(
    db_session, session_factory, hub, owner, member
) -> None:
    """The stream sends the current snapshot, then a new frame after each change."""
    emit_notification(
        db_session,
        hub,
        recipient_id=owner.id,
        sender=member,
        notification_type=NotificationType.JOIN,
        community_id=1,
        community_name="Chess Club",
    )

    # The feed never ends, so frames are read from the response body directly.
    response = await stream_notifications(
        current_user=owner, session_factory=session_factory, hub=hub
    )
    assert response.media_type == "text/event-stream"
    assert response.headers["cache-control"] == "no-cache"
    frames = response.body_iterator

    first = _frame_payload(await asyncio.wait_for(frames.__anext__(), timeout=1))
    assert first["recipient_id"] == owner.id
    assert first["unread_count"] == 1

    emit_notification(
        db_session,
        hub,
        recipient_id=owner.id,
        sender=member,
        notification_type=NotificationType.NEW_POST,
        community_id=1,
        community_name="Chess Club",
    )
    second = _frame_payload(await asyncio.wait_for(frames.__anext__(), timeout=1))
    assert second["unread_count"] == 2
    assert second["notifications"][0]["type"] == "new_post"

    await frames.aclose()
    assert hub.listener_count(owner.id) == 0


def test_stream_requires_auth(client) -> None:
    """Anonymous callers cannot open the stream."""
    response = client.get("/api/v1/notifications/stream")
    assert response.status_code in {status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN}
