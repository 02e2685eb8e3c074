"""Notification feed schemas."""

from datetime import datetime

from pydantic import BaseModel


class NotificationResponse(BaseModel):
    """Notification plus its rendered sentence and navigation link."""

    id: int
    type: str
    recipient_id: int
    sender_id: int | None
    sender_display_name: str
    community_id: int | None
    community_name: str | None
    post_id: int | None
    content: str | None
    reaction_kind: str | None
    created_at: datetime
    read: bool
    message: str
    link: str | None


class NotificationSnapshot(BaseModel):
    """Full notification list of one recipient, newest first.

    ``unread_count`` is always derived from ``notifications``.
    """

    recipient_id: int
    notifications: list[NotificationResponse]
    unread_count: int

    @classmethod
    def from_items(
        cls, recipient_id: int, items: list[NotificationResponse]
    ) -> "NotificationSnapshot":
        return cls(
            recipient_id=recipient_id,
            notifications=items,
            unread_count=sum(1 for item in items if not item.read),
        )


class MarkAllReadResponse(BaseModel):
    """Result of marking every unread notification as read."""

    updated: int
    snapshot: NotificationSnapshot
