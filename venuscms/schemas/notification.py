"""Pydantic schemas for user-facing notifications."""

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field


class NotificationKind(str, Enum):
    """Notification kinds shown in the editor."""

    SUCCESS = "success"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class Notification(BaseModel):
    """A single notification. duration_ms of 0 means it stays until dismissed."""

    id: str
    kind: NotificationKind
    title: str
    message: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    duration_ms: int = 5000
