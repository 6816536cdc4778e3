"""User-facing notifications with auto-dismiss and bounded retention."""

import logging
import uuid
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from venuscms.schemas.import_schemas import ImportSummary
from venuscms.schemas.notification import Notification, NotificationKind
from venuscms.services.import_service.constants import ALL_PAGES, IMPORT_TARGET_PAGES

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class NotificationCenter:
    """Holds the most recent notifications, newest first.

    A notification with a positive duration expires that many milliseconds
    after it was created; a duration of 0 keeps it until dismissed.
    """

    def __init__(
        self,
        max_retained: int = 5,
        default_duration_ms: int = 5000,
        clock: Clock = _utcnow,
    ) -> None:
        self.max_retained = max_retained
        self.default_duration_ms = default_duration_ms
        self._clock = clock
        self._items: list[Notification] = []

    def notify(
        self,
        kind: NotificationKind,
        title: str,
        message: str,
        duration_ms: int | None = None,
    ) -> Notification:
        """Add a notification, dropping the oldest beyond max_retained."""
        notification = Notification(
            id=uuid.uuid4().hex,
            kind=kind,
            title=title,
            message=message,
            created_at=self._clock(),
            duration_ms=self.default_duration_ms if duration_ms is None else duration_ms,
        )
        self._items.insert(0, notification)
        del self._items[self.max_retained:]
        logger.debug("Notification [%s] %s: %s", kind.value, title, message)
        return notification

    def success(self, title: str, message: str, duration_ms: int | None = None) -> Notification:
        return self.notify(NotificationKind.SUCCESS, title, message, duration_ms)

    def error(self, title: str, message: str, duration_ms: int | None = None) -> Notification:
        return self.notify(NotificationKind.ERROR, title, message, duration_ms)

    def warning(self, title: str, message: str, duration_ms: int | None = None) -> Notification:
        return self.notify(NotificationKind.WARNING, title, message, duration_ms)

    def info(self, title: str, message: str, duration_ms: int | None = None) -> Notification:
        return self.notify(NotificationKind.INFO, title, message, duration_ms)

    def _expired(self, notification: Notification, now: datetime) -> bool:
        if notification.duration_ms <= 0:
            return False
        expires_at = notification.created_at + timedelta(milliseconds=notification.duration_ms)
        return now >= expires_at

    def active(self) -> list[Notification]:
        """Prune expired notifications and return the rest, newest first."""
        now = self._clock()
        self._items = [n for n in self._items if not self._expired(n, now)]
        return list(self._items)

    def dismiss(self, notification_id: str) -> bool:
        """Remove a notification. Returns False if it was not present."""
        before = len(self._items)
        self._items = [n for n in self._items if n.id != notification_id]
        return len(self._items) < before

    def clear(self) -> None:
        self._items.clear()


def import_summary_notification(
    center: NotificationCenter,
    summary: ImportSummary,
    target_category: str | None = None,
) -> Notification:
    """Post the notification shown when an import run finishes.

    Row failures do not change the title; they are counted in the message.
    """
    message = f"Imported {summary.success_count} {summary.record_type.value}"
    if target_category and target_category != ALL_PAGES:
        page = IMPORT_TARGET_PAGES.get(target_category, target_category)
        message += f" to {page} page"
    if summary.failure_count:
        message += f" ({summary.failure_count} errors)"
    return center.success("Import Successful", message)
