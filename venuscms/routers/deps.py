"""Shared router dependencies resolved from application state."""

from typing import Annotated

from fastapi import Depends, Request

from venuscms.config import Settings
from venuscms.models import ImportSessionStore
from venuscms.schemas.import_schemas import RecordType
from venuscms.services.notifications import NotificationCenter
from venuscms.services.records import RecordStore


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_notification_center(request: Request) -> NotificationCenter:
    return request.app.state.notifications


def get_session_store(request: Request) -> ImportSessionStore:
    return request.app.state.import_sessions


def get_record_stores(request: Request) -> dict[RecordType, RecordStore]:
    return request.app.state.record_stores


AppSettings = Annotated[Settings, Depends(get_app_settings)]
Notifications = Annotated[NotificationCenter, Depends(get_notification_center)]
Sessions = Annotated[ImportSessionStore, Depends(get_session_store)]
RecordStores = Annotated[dict[RecordType, RecordStore], Depends(get_record_stores)]
