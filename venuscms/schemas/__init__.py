"""Pydantic schemas for VenusCMS."""

from venuscms.schemas.export import (
    DateRange,
    ExportFilters,
    ExportFormat,
    ExportRequest,
    PublishedState,
)
from venuscms.schemas.import_schemas import (
    ColumnMappingRequest,
    FieldMapping,
    FieldShape,
    ImportPreviewResponse,
    ImportProcessRequest,
    ImportProgress,
    ImportResultResponse,
    ImportStage,
    ImportSummary,
    ParseIssue,
    PasteImportRequest,
    RawTable,
    RecordType,
    RowFailure,
    Severity,
    TableIssue,
    ValidationIssue,
)
from venuscms.schemas.notification import Notification, NotificationKind

__all__ = [
    # Export
    "DateRange",
    "ExportFilters",
    "ExportFormat",
    "ExportRequest",
    "PublishedState",
    # Import
    "ColumnMappingRequest",
    "FieldMapping",
    "FieldShape",
    "ImportPreviewResponse",
    "ImportProcessRequest",
    "ImportProgress",
    "ImportResultResponse",
    "ImportStage",
    "ImportSummary",
    "ParseIssue",
    "PasteImportRequest",
    "RawTable",
    "RecordType",
    "RowFailure",
    "Severity",
    "TableIssue",
    "ValidationIssue",
    # Notifications
    "Notification",
    "NotificationKind",
]
