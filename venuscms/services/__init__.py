"""Services for VenusCMS application."""

from venuscms.services.notifications import NotificationCenter
from venuscms.services.records import RecordStore, get_record_store

__all__ = ["NotificationCenter", "RecordStore", "get_record_store"]
