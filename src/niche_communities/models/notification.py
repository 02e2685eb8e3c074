"""SQLAlchemy model for recipient-addressed notification records."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from sqlalchemy import Boolean, DateTime, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from niche_communities.db.session import Base
from niche_communities.db.time import utcnow


class NotificationType(str, Enum):
    """Kinds of events that produce a notification."""

    JOIN = "join"
    LEAVE = "leave"
    REACTION = "reaction"
    COMMENT = "comment"
    REPLY = "reply"
    REMOVED = "removed"
    NEW_POST = "new_post"


class Notification(Base):
    """Durable notification addressed to one recipient.

    References to communities and posts are plain integers: notifications are
    never deleted and may outlive the records they mention.
    """

    __tablename__ = "notification"
    __table_args__ = (Index("ix_notification_recipient_created", "recipient_id", "created_at"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    recipient_id: Mapped[int] = mapped_column(Integer, nullable=False)
    sender_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    sender_display_name: Mapped[str] = mapped_column(Text, nullable=False, default="")
    type: Mapped[str] = mapped_column(Text, nullable=False)
    community_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    community_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    post_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    content: Mapped[str | None] = mapped_column(Text, nullable=True)
    reaction_kind: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    read_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
