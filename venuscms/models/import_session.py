"""ImportSession model for tracking CSV imports through preview and processing."""

import logging
import uuid
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from enum import Enum

from pydantic import BaseModel, Field

from venuscms.schemas.import_schemas import (
    FieldMapping,
    ImportProgress,
    RawTable,
    RecordType,
    TableIssue,
)
from venuscms.services.import_service import (
    count_by_severity,
    has_blocking_errors,
    summarize_rows,
    validate_table,
)

logger = logging.getLogger(__name__)


class ImportStatus(str, Enum):
    """Status of an import session."""

    PREVIEWED = "previewed"
    MAPPED = "mapped"
    PROCESSING = "processing"
    COMPLETED = "completed"


class ImportSession(BaseModel):
    """Tracks one upload or paste through the preview/mapping/process workflow."""

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    filename: str
    record_type: RecordType
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    status: ImportStatus = ImportStatus.PREVIEWED

    table: RawTable
    mapping: list[FieldMapping] = Field(default_factory=list)
    issues: list[TableIssue] = Field(default_factory=list)
    progress: ImportProgress = Field(default_factory=ImportProgress)

    def revalidate(self) -> list[TableIssue]:
        """Re-run validation against the current mapping."""
        self.issues = validate_table(self.table, self.mapping)
        return self.issues

    @property
    def can_import(self) -> bool:
        return self.table.row_count > 0 and not has_blocking_errors(self.issues)

    @property
    def severity_counts(self) -> tuple[int, int]:
        return count_by_severity(self.issues)

    @property
    def row_counts(self) -> tuple[int, int]:
        return summarize_rows(self.table, self.issues)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ImportSessionStore:
    """Keeps import sessions in memory and tracks the single active run.

    Sessions older than the time-to-live are dropped, and beyond
    max_sessions the oldest go first. The running session is never dropped.
    """

    def __init__(
        self,
        max_sessions: int = 20,
        ttl_minutes: int = 60,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._sessions: dict[str, ImportSession] = {}
        self._active_run: str | None = None
        self.max_sessions = max_sessions
        self.ttl = timedelta(minutes=ttl_minutes)
        self._clock = clock

    def __len__(self) -> int:
        return len(self._sessions)

    @property
    def active_run(self) -> str | None:
        return self._active_run

    def add(self, session: ImportSession) -> ImportSession:
        session.revalidate()
        self._sessions[session.id] = session
        self.prune()
        logger.debug(
            "Created import session %s (%s, %d rows)",
            session.id,
            session.record_type.value,
            session.table.row_count,
        )
        return session

    def get(self, session_id: str) -> ImportSession | None:
        self.prune()
        return self._sessions.get(session_id)

    def prune(self) -> int:
        """Drop expired sessions, then the oldest ones over the limit.

        Returns:
            Number of sessions dropped.
        """
        cutoff = self._clock() - self.ttl
        idle = sorted(
            (s for s in self._sessions.values() if s.id != self._active_run),
            key=lambda s: s.created_at,
        )
        excess = len(self._sessions) - self.max_sessions
        dropped = 0
        for session in idle:
            if session.created_at >= cutoff and dropped >= excess:
                break
            del self._sessions[session.id]
            dropped += 1
        if dropped:
            logger.info("Dropped %d stale import sessions", dropped)
        return dropped

    def discard(self, session_id: str) -> bool:
        """Remove a session. A session with a running import is kept."""
        if session_id == self._active_run:
            return False
        return self._sessions.pop(session_id, None) is not None

    def begin_run(self, session_id: str) -> bool:
        """Mark a session's import as running; False if another run is active."""
        if self._active_run is not None:
            return False
        self._active_run = session_id
        return True

    def end_run(self, session_id: str) -> None:
        if self._active_run == session_id:
            self._active_run = None
