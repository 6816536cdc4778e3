"""In-memory record store for development and tests."""

import logging
import uuid

from venuscms.schemas.import_schemas import RecordType
from venuscms.services.records.base import PersistError, Record, RecordPage, RecordStore

logger = logging.getLogger(__name__)


class InMemoryRecordStore(RecordStore):
    """Record store that keeps records in a dict keyed by id."""

    def __init__(
        self,
        record_type: RecordType,
        records: list[Record] | None = None,
        page_size: int = 100,
    ) -> None:
        super().__init__(record_type, page_size=page_size)
        self._records: dict[str, Record] = {}
        for record in records or []:
            record = dict(record)
            record.setdefault("id", str(uuid.uuid4()))
            self._records[str(record["id"])] = record

    def __len__(self) -> int:
        return len(self._records)

    async def create(self, record: Record) -> Record:
        stored = dict(record)
        record_id = str(stored.setdefault("id", str(uuid.uuid4())))
        if record_id in self._records:
            raise PersistError(f"Record with id '{record_id}' already exists", status_code=409)
        self._records[record_id] = stored
        logger.debug("Created %s record %s", self.record_type.value, record_id)
        return dict(stored)

    async def update(self, record_id: str, partial: Record) -> Record:
        if record_id not in self._records:
            raise PersistError(f"Record '{record_id}' not found", status_code=404)
        self._records[record_id].update({k: v for k, v in partial.items() if k != "id"})
        return dict(self._records[record_id])

    async def delete(self, record_id: str) -> None:
        if self._records.pop(record_id, None) is None:
            raise PersistError(f"Record '{record_id}' not found", status_code=404)

    async def list(
        self,
        page: int = 1,
        limit: int = 10,
        category: str | None = None,
        published: bool | None = None,
    ) -> RecordPage:
        records = list(self._records.values())
        if category is not None:
            records = [r for r in records if r.get("category") == category]
        if published is not None:
            records = [r for r in records if bool(r.get("isPublished")) == published]
        return RecordPage.slice([dict(r) for r in records], page, limit)
