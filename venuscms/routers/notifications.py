"""Notification endpoints for the editor."""

from fastapi import APIRouter, HTTPException, status

from venuscms.routers.deps import Notifications
from venuscms.schemas.notification import Notification

router = APIRouter()


@router.get("/", response_model=list[Notification])
async def list_notifications(notifications: Notifications) -> list[Notification]:
    """List active notifications, newest first."""
    return notifications.active()


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
async def dismiss_notification(notification_id: str, notifications: Notifications) -> None:
    """Dismiss a notification."""
    if not notifications.dismiss(notification_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Notification '{notification_id}' not found",
        )
