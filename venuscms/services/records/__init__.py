"""Record storage backends for VenusCMS content."""

from venuscms.services.records.api import ApiRecordStore
from venuscms.services.records.base import (
    PersistError,
    RecordPage,
    RecordStore,
    get_record_store,
)
from venuscms.services.records.memory import InMemoryRecordStore

__all__ = [
    "ApiRecordStore",
    "InMemoryRecordStore",
    "PersistError",
    "RecordPage",
    "RecordStore",
    "get_record_store",
]
