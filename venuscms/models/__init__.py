"""In-memory models for VenusCMS."""

from venuscms.models.import_session import ImportSession, ImportSessionStore, ImportStatus

__all__ = ["ImportSession", "ImportSessionStore", "ImportStatus"]
