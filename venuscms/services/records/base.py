"""Base record store protocol and factory."""

import logging
import math
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field

from venuscms.schemas.import_schemas import RecordType

if TYPE_CHECKING:
    from venuscms.config import Settings

logger = logging.getLogger(__name__)

Record = dict[str, Any]
RecordList = list[Record]


class PersistError(Exception):
    """Raised when the storage layer rejects or cannot complete a request."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class RecordPage(BaseModel):
    """One page of records with the backend's pagination envelope."""

    data: list[Record] = Field(default_factory=list)
    page: int = 1
    limit: int = 10
    total: int = 0
    total_pages: int = 0

    @classmethod
    def slice(cls, records: list[Record], page: int, limit: int) -> "RecordPage":
        """Build a page from a full, already filtered list."""
        start = (page - 1) * limit
        return cls(
            data=records[start:start + limit],
            page=page,
            limit=limit,
            total=len(records),
            total_pages=math.ceil(len(records) / limit) if limit else 0,
        )


class RecordStore(ABC):
    """Abstract base class for content record storage."""

    def __init__(self, record_type: RecordType, page_size: int = 100) -> None:
        """Initialize the record store.

        Args:
            record_type: Record type this store holds.
            page_size: Page size used by list_all.
        """
        self.record_type = record_type
        self.page_size = page_size

    @abstractmethod
    async def create(self, record: Record) -> Record:
        """Store a new record.

        Args:
            record: Candidate record.

        Returns:
            The stored record as the backend returns it.

        Raises:
            PersistError: If the backend rejects the record.
        """

    @abstractmethod
    async def update(self, record_id: str, partial: Record) -> Record:
        """Apply a partial update to a stored record."""

    @abstractmethod
    async def delete(self, record_id: str) -> None:
        """Delete a stored record."""

    @abstractmethod
    async def list(
        self,
        page: int = 1,
        limit: int = 10,
        category: str | None = None,
        published: bool | None = None,
    ) -> RecordPage:
        """List one page of records, optionally filtered.

        Args:
            page: 1-based page number.
            limit: Page size.
            category: Only records in this category.
            published: Only published (True) or draft (False) records.

        Returns:
            The requested page.
        """

    async def list_all(self) -> RecordList:
        """Fetch every record by walking the pages."""
        records: RecordList = []
        page = 1
        while True:
            result = await self.list(page=page, limit=self.page_size)
            records.extend(result.data)
            if not result.data or page >= result.total_pages:
                break
            page += 1
        logger.debug("Fetched %d %s records", len(records), self.record_type.value)
        return records

    async def aclose(self) -> None:
        """Release any resources held by the store."""


def get_record_store(record_type: RecordType, settings: "Settings | None" = None) -> RecordStore:
    """Get the configured record store for a record type.

    Args:
        record_type: Record type the store will hold.
        settings: Application settings; the global settings when omitted.

    Returns:
        RecordStore instance based on settings.
    """
    if settings is None:
        from venuscms.config import settings

    if settings.records_backend == "api":
        from venuscms.services.records.api import ApiRecordStore

        return ApiRecordStore(
            record_type,
            base_url=settings.records_api_url,
            token=settings.api_token,
            timeout=settings.records_timeout_seconds,
            page_size=settings.records_page_size,
        )
    else:
        from venuscms.services.records.memory import InMemoryRecordStore

        return InMemoryRecordStore(record_type, page_size=settings.records_page_size)
