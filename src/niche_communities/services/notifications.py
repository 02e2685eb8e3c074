"""Notification fan-out, live feeds and read-state handling.

Notifications are appended as a side effect of a primary mutation that has
already been committed. Emission never fails the caller: a notification that
cannot be stored is logged and dropped.

Live feeds are push-based. Every change for a recipient wakes the listeners
registered on the :class:`NotificationHub`, and each wake-up re-reads the
recipient's full notification list. Consumers replace their local list with
every snapshot they receive and never adjust the unread count on their own.
"""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from collections.abc import AsyncIterator, Callable, Iterator
from contextlib import contextmanager
from threading import Lock

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from niche_communities.core.settings import settings
from niche_communities.db.time import utcnow
from niche_communities.models import Notification, NotificationType, User
from niche_communities.schemas.notification import NotificationResponse, NotificationSnapshot

from .errors import BackendError

# Configure logger for this module
logger = logging.getLogger(__name__)

_TEMPLATES: dict[str, str] = {
    NotificationType.COMMENT.value: '{sender} commented on your post: "{content}"',
    NotificationType.REPLY.value: '{sender} replied to your comment: "{content}"',
    NotificationType.REACTION.value: "{sender} reacted with {reaction} to your post",
    NotificationType.JOIN.value: '{sender} joined your community "{community}"',
    NotificationType.LEAVE.value: '{sender} left your community "{community}"',
    NotificationType.NEW_POST.value: (
        '{sender} created a new post in your community "{community}"'
    ),
    NotificationType.REMOVED.value: '{sender} removed you from the community "{community}"',
}
FALLBACK_MESSAGE = "New notification"

_POST_LINK_TYPES = frozenset(
    {NotificationType.COMMENT.value, NotificationType.REPLY.value, NotificationType.REACTION.value}
)
_COMMUNITY_LINK_TYPES = frozenset(
    {NotificationType.JOIN.value, NotificationType.LEAVE.value, NotificationType.NEW_POST.value}
)


def _offer(queue: asyncio.Queue[None]) -> None:
    # A pending wake-up already covers this change: every emission is a full snapshot.
    try:
        queue.put_nowait(None)
    except asyncio.QueueFull:
        pass


class NotificationHub:
    """In-process registry of live notification listeners, keyed by recipient."""

    def __init__(self) -> None:
        self._listeners: dict[
            int, set[tuple[asyncio.AbstractEventLoop, asyncio.Queue[None]]]
        ] = defaultdict(set)
        self._lock = Lock()

    @contextmanager
    def listen(self, recipient_id: int) -> Iterator[asyncio.Queue[None]]:
        """Register a wake-up queue for ``recipient_id`` until the block exits.

        Must be entered from a running event loop.
        """
        queue: asyncio.Queue[None] = asyncio.Queue(maxsize=1)
        entry = (asyncio.get_running_loop(), queue)
        with self._lock:
            self._listeners[recipient_id].add(entry)
        try:
            yield queue
        finally:
            with self._lock:
                listeners = self._listeners.get(recipient_id)
                if listeners is not None:
                    listeners.discard(entry)
                    if not listeners:
                        del self._listeners[recipient_id]

    def listener_count(self, recipient_id: int) -> int:
        """Return how many live feeds are open for ``recipient_id``."""
        with self._lock:
            return len(self._listeners.get(recipient_id, ()))

    def publish(self, recipient_id: int) -> None:
        """Wake every listener of ``recipient_id``. Safe to call from any thread."""
        with self._lock:
            entries = list(self._listeners.get(recipient_id, ()))
        if not entries:
            return

        try:
            current_loop: asyncio.AbstractEventLoop | None = asyncio.get_running_loop()
        except RuntimeError:
            current_loop = None

        for loop, queue in entries:
            if loop is current_loop:
                _offer(queue)
            elif not loop.is_closed():
                loop.call_soon_threadsafe(_offer, queue)


_hub = NotificationHub()


def get_notification_hub() -> NotificationHub:
    """Return the process-wide notification hub."""
    return _hub


def snippet(text: str | None) -> str | None:
    """Shorten ``text`` for storage inside a notification."""
    if text is None:
        return None
    limit = settings.notification_snippet_length
    if len(text) <= limit:
        return text
    return text[:limit] + "..."


def emit_notification(
    db: Session,
    hub: NotificationHub,
    *,
    recipient_id: int,
    sender: User,
    notification_type: NotificationType,
    community_id: int | None = None,
    community_name: str | None = None,
    post_id: int | None = None,
    content: str | None = None,
    reaction_kind: str | None = None,
) -> Notification | None:
    """Append one notification for ``recipient_id`` and wake their live feeds.

    Returns:
        The stored notification, or None when it was skipped (self-action) or
        could not be stored.
    """
    if recipient_id == sender.id:
        logger.debug(
            "Skipping self-notification %s for user %s", notification_type.value, sender.id
        )
        return None

    notification = Notification(
        recipient_id=recipient_id,
        sender_id=sender.id,
        sender_display_name=sender.public_name,
        type=notification_type.value,
        community_id=community_id,
        community_name=community_name,
        post_id=post_id,
        content=snippet(content),
        reaction_kind=reaction_kind,
        read=False,
    )
    db.add(notification)
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.warning(
            "Failed to create %s notification for user %s",
            notification_type.value,
            recipient_id,
            exc_info=True,
        )
        return None

    logger.info(
        "Created %s notification %s for user %s",
        notification_type.value,
        notification.id,
        recipient_id,
    )
    hub.publish(recipient_id)
    return notification


def describe(notification: Notification) -> str:
    """Render a notification as a sentence for its recipient."""
    template = _TEMPLATES.get(notification.type)
    if template is None:
        return FALLBACK_MESSAGE
    if notification.type == NotificationType.REACTION.value and not notification.reaction_kind:
        template = "{sender} reacted to your post"
    return template.format(
        sender=notification.sender_display_name or "Someone",
        content=notification.content or "",
        community=notification.community_name or "",
        reaction=notification.reaction_kind,
    )


def navigation_target(notification: Notification) -> str | None:
    """Return where a click on the notification should lead, if anywhere."""
    if notification.community_id is None:
        return None
    community_link = f"/community/{notification.community_id}"
    if notification.type in _POST_LINK_TYPES:
        if notification.post_id is None:
            return community_link
        return f"{community_link}#post-{notification.post_id}"
    if notification.type in _COMMUNITY_LINK_TYPES:
        return community_link
    return None


def to_response(notification: Notification) -> NotificationResponse:
    """Convert a notification row to its API representation."""
    return NotificationResponse(
        id=notification.id,
        type=notification.type,
        recipient_id=notification.recipient_id,
        sender_id=notification.sender_id,
        sender_display_name=notification.sender_display_name,
        community_id=notification.community_id,
        community_name=notification.community_name,
        post_id=notification.post_id,
        content=notification.content,
        reaction_kind=notification.reaction_kind,
        created_at=notification.created_at,
        read=notification.read,
        message=describe(notification),
        link=navigation_target(notification),
    )


def load_snapshot(db: Session, recipient_id: int) -> NotificationSnapshot:
    """Read the full notification list of ``recipient_id``, newest first."""
    rows = (
        db.query(Notification)
        .filter(Notification.recipient_id == recipient_id)
        .order_by(Notification.created_at.desc(), Notification.id.desc())
        .all()
    )
    return NotificationSnapshot.from_items(recipient_id, [to_response(row) for row in rows])


async def subscribe(
    recipient_id: int,
    *,
    session_factory: Callable[[], Session],
    hub: NotificationHub,
) -> AsyncIterator[NotificationSnapshot]:
    """Yield the recipient's snapshot now and again after every change.

    The feed never ends on its own; close the generator (or cancel the task
    consuming it) to unregister the listener.
    """
    with hub.listen(recipient_id) as wakeups:
        logger.debug("Opened notification feed for user %s", recipient_id)
        try:
            while True:
                with session_factory() as db:
                    snapshot = load_snapshot(db, recipient_id)
                yield snapshot
                await wakeups.get()
        finally:
            logger.debug("Closed notification feed for user %s", recipient_id)


def mark_read(
    db: Session,
    hub: NotificationHub,
    *,
    recipient_id: int,
    notification_id: int,
) -> bool:
    """Mark one notification as read.

    Marking an already-read notification is a no-op, and so is a notification
    that no longer exists or belongs to someone else.

    Returns:
        True if the read flag changed.
    """
    notification = (
        db.query(Notification)
        .filter(Notification.id == notification_id, Notification.recipient_id == recipient_id)
        .first()
    )
    if notification is None:
        logger.debug(
            "Notification %s for user %s no longer exists", notification_id, recipient_id
        )
        return False
    if notification.read:
        return False

    notification.read = True
    notification.read_at = utcnow()
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.warning("Failed to mark notification %s as read: %s", notification_id, exc)
        raise BackendError("Failed to update notification") from exc

    hub.publish(recipient_id)
    return True


def mark_all_read(db: Session, hub: NotificationHub, *, recipient_id: int) -> int:
    """Mark every unread notification of the latest snapshot as read.

    The update is one best-effort batch. The caller's unread count is not
    reset here; it follows from the next snapshot.

    Returns:
        Number of notifications that changed.
    """
    snapshot = load_snapshot(db, recipient_id)
    unread_ids = [item.id for item in snapshot.notifications if not item.read]
    if not unread_ids:
        return 0

    try:
        updated = (
            db.query(Notification)
            .filter(
                Notification.id.in_(unread_ids),
                Notification.recipient_id == recipient_id,
                Notification.read.is_(False),
            )
            .update({"read": True, "read_at": utcnow()})
        )
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.warning("Failed to mark notifications of user %s as read: %s", recipient_id, exc)
        raise BackendError("Failed to update notifications") from exc

    logger.info("Marked %d notifications of user %s as read", updated, recipient_id)
    hub.publish(recipient_id)
    return int(updated)
