"""Pydantic schemas for data export functionality."""

from datetime import date
from enum import Enum

from pydantic import BaseModel, Field, model_validator


class ExportFormat(str, Enum):
    """Supported export formats."""

    CSV = "csv"
    JSON = "json"
    SPREADSHEET = "spreadsheet"

    @property
    def extension(self) -> str:
        """File extension for the format."""
        if self is ExportFormat.SPREADSHEET:
            return "xlsx"
        return self.value


class PublishedState(str, Enum):
    """Publication state derived from a record's isPublished flag."""

    PUBLISHED = "published"
    DRAFT = "draft"


class DateRange(BaseModel):
    """Inclusive date range."""

    start: date
    end: date

    @model_validator(mode="after")
    def _check_order(self) -> "DateRange":
        if self.end < self.start:
            raise ValueError("date range end must not be before start")
        return self


class ExportFilters(BaseModel):
    """Filters applied to a collection before export. All compose with AND."""

    search_text: str | None = None
    categories: list[str] = Field(default_factory=list)
    statuses: list[PublishedState] = Field(default_factory=list)
    date_range: DateRange | None = None

    def applied(self) -> dict[str, object]:
        """Filters that are actually set, for logging and notifications."""
        applied: dict[str, object] = {}
        if self.search_text:
            applied["search_text"] = self.search_text
        if self.categories:
            applied["categories"] = self.categories
        if self.statuses:
            applied["statuses"] = [s.value for s in self.statuses]
        if self.date_range:
            applied["date_range"] = self.date_range.model_dump(mode="json")
        return applied


class ExportRequest(BaseModel):
    """Options for one export."""

    format: ExportFormat = ExportFormat.CSV
    columns: list[str] = Field(default_factory=list, description="Empty means all columns")
    filters: ExportFilters = Field(default_factory=ExportFilters)
    filename_override: str | None = None
