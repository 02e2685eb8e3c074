"""Notification feed endpoints, including the live event stream."""

from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import APIRouter, status
from fastapi.responses import StreamingResponse

from niche_communities.schemas.notification import MarkAllReadResponse, NotificationSnapshot
from niche_communities.services import notifications as notification_service

from ..dependencies import CurrentUserDep, HubDep, SessionDep, SessionFactoryDep

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("/", response_model=NotificationSnapshot)
async def get_notifications(current_user: CurrentUserDep, db: SessionDep) -> NotificationSnapshot:
    """Return the caller's notifications, newest first, with the unread count."""
    return notification_service.load_snapshot(db, current_user.id)


@router.get("/stream")
async def stream_notifications(
    current_user: CurrentUserDep,
    session_factory: SessionFactoryDep,
    hub: HubDep,
) -> StreamingResponse:
    """Push a full snapshot now and after every change (Server-Sent Events)."""
    recipient_id = current_user.id

    async def event_generator() -> AsyncIterator[str]:
        feed = notification_service.subscribe(
            recipient_id, session_factory=session_factory, hub=hub
        )
        try:
            async for snapshot in feed:
                yield f"event: snapshot\ndata: {snapshot.model_dump_json()}\n\n"
        finally:
            await feed.aclose()

    return StreamingResponse(
        event_generator(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
        },
    )


@router.post("/{notification_id}/read", response_model=NotificationSnapshot)
async def mark_notification_read(
    notification_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
    hub: HubDep,
) -> NotificationSnapshot:
    """Mark one notification as read; repeating the call changes nothing."""
    notification_service.mark_read(
        db, hub, recipient_id=current_user.id, notification_id=notification_id
    )
    return notification_service.load_snapshot(db, current_user.id)


@router.post("/read-all", response_model=MarkAllReadResponse, status_code=status.HTTP_200_OK)
async def mark_all_notifications_read(
    current_user: CurrentUserDep,
    db: SessionDep,
    hub: HubDep,
) -> MarkAllReadResponse:
    """Mark every unread notification as read."""
    updated = notification_service.mark_all_read(db, hub, recipient_id=current_user.id)
    return MarkAllReadResponse(
        updated=updated,
        snapshot=notification_service.load_snapshot(db, current_user.id),
    )
