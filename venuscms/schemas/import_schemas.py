"""Pydantic schemas for CSV bulk import functionality."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class RecordType(str, Enum):
    """Content record types that support bulk import/export."""

    DOCUMENT = "documents"
    UPDATE_LOG = "update-logs"


class FieldShape(str, Enum):
    """Primitive shape a mapped field is coerced to."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    STRING_LIST = "stringList"


class Severity(str, Enum):
    """Issue severity. Errors block import, warnings do not."""

    ERROR = "error"
    WARNING = "warning"


class ImportStage(str, Enum):
    """Stages of an import run, in order."""

    UPLOADING = "uploading"
    PARSING = "parsing"
    VALIDATING = "validating"
    IMPORTING = "importing"
    COMPLETE = "complete"


STAGE_ORDER = list(ImportStage)


class TableIssue(BaseModel):
    """A finding about the uploaded table.

    row_index is the 1-based position in RawTable.rows, or 0 when the
    finding is not tied to a single row.
    """

    model_config = ConfigDict(frozen=True)

    row_index: int = Field(ge=0)
    column: str = "general"
    message: str
    severity: Severity

    @property
    def is_error(self) -> bool:
        return self.severity == Severity.ERROR


class ParseIssue(TableIssue):
    """Row-shape anomaly found while parsing."""


class ValidationIssue(TableIssue):
    """Semantic or shape mismatch found while validating a mapped row."""


class RawTable(BaseModel):
    """Parsed CSV content: header row plus string cells, immutable."""

    model_config = ConfigDict(frozen=True)

    headers: tuple[str, ...]
    rows: tuple[tuple[str, ...], ...] = ()
    issues: tuple[ParseIssue, ...] = ()

    @property
    def row_count(self) -> int:
        return len(self.rows)

    def column_index(self, name: str) -> int | None:
        """Position of the first header equal to name, or None."""
        if not name:
            return None
        try:
            return self.headers.index(name)
        except ValueError:
            return None

    def cell(self, row: tuple[str, ...], name: str) -> str | None:
        """Cell of row under header name; None if unmapped or the row is short."""
        index = self.column_index(name)
        if index is None or index >= len(row):
            return None
        return row[index]


class FieldMapping(BaseModel):
    """Which source column feeds one logical field."""

    logical_field: str
    source_column: str = ""
    required: bool = False
    shape: FieldShape = FieldShape.STRING

    @property
    def is_mapped(self) -> bool:
        return bool(self.source_column)


class ImportProgress(BaseModel):
    """Live progress of one import run."""

    stage: ImportStage = ImportStage.UPLOADING
    processed: int = 0
    total: int = 0
    failure_count: int = 0
    message: str = ""

    @property
    def percent(self) -> int:
        if self.stage == ImportStage.COMPLETE:
            return 100
        if not self.total:
            return 0
        return round(self.processed * 100 / self.total)

    def advance_to(self, stage: ImportStage, message: str = "") -> None:
        """Move to a later (or the same) stage.

        Raises:
            ValueError: If the stage would move backwards.
        """
        if STAGE_ORDER.index(stage) < STAGE_ORDER.index(self.stage):
            raise ValueError(f"Cannot move import from '{self.stage.value}' back to '{stage.value}'")
        self.stage = stage
        if message:
            self.message = message


class RowFailure(BaseModel):
    """A row whose persist call failed."""

    row_index: int
    message: str


class ImportSummary(BaseModel):
    """Terminal result of an import run."""

    record_type: RecordType
    success_count: int = 0
    failure_count: int = 0
    failures: list[RowFailure] = Field(default_factory=list)

    @property
    def total(self) -> int:
        return self.success_count + self.failure_count

    @property
    def message(self) -> str:
        text = f"Imported {self.success_count} {self.record_type.value}"
        if self.failure_count:
            text += f" ({self.failure_count} errors)"
        return text


# =============================================================================
# API request/response schemas
# =============================================================================


class PasteImportRequest(BaseModel):
    """CSV text pasted directly into the editor."""

    text: str
    record_type: RecordType = RecordType.DOCUMENT


class ColumnMappingRequest(BaseModel):
    """Request to replace the mapping set of an import session."""

    mapping: list[FieldMapping]


class ImportProcessRequest(BaseModel):
    """Options for running an import."""

    target_category: str | None = Field(
        None,
        description="Import target page used as the document category when a row has none",
    )


class ImportPreviewResponse(BaseModel):
    """Preview of an uploaded table with its mapping and issues."""

    session_id: str
    filename: str
    record_type: RecordType
    headers: list[str]
    preview_rows: list[list[str]]
    total_rows: int
    valid_rows: int
    invalid_rows: int
    issues: list[TableIssue]
    mapping: list[FieldMapping]
    error_count: int
    warning_count: int
    can_import: bool


class ImportResultResponse(BaseModel):
    """Response after running an import."""

    session_id: str
    record_type: RecordType
    success_count: int
    failure_count: int
    failures: list[RowFailure]
    message: str
    progress: ImportProgress
