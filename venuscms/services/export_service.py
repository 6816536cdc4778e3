"""Export service for filtering and serializing content records."""

import csv
import io
import json
import logging
from collections.abc import Iterable, Sequence
from datetime import date, datetime, timezone
from typing import Any
from urllib.parse import quote

from pydantic_core import to_jsonable_python

from venuscms.schemas.export import (
    ExportFilters,
    ExportFormat,
    ExportRequest,
    PublishedState,
)
from venuscms.schemas.import_schemas import RecordType
from venuscms.services.import_service.constants import EXPORT_LIST_SEPARATOR, RECORD_DATE_FIELDS
from venuscms.services.import_service.converters import parse_date
from venuscms.services.import_service.errors import EmptyExportError

logger = logging.getLogger(__name__)

Record = dict[str, Any]


def _record_text(record: Record) -> str:
    return json.dumps(record, default=str, ensure_ascii=False).lower()


def _published_state(record: Record) -> PublishedState:
    return PublishedState.PUBLISHED if record.get("isPublished") else PublishedState.DRAFT


def _record_date(record: Record) -> date | None:
    for field in RECORD_DATE_FIELDS:
        value = record.get(field)
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        if isinstance(value, str) and value:
            return parse_date(value)
    return None


def filter_records(records: Iterable[Record], filters: ExportFilters) -> list[Record]:
    """Apply export filters in order: text, category, state, date range.

    Args:
        records: Records to filter.
        filters: Filters; unset filters match everything.

    Returns:
        Records matching every set filter.
    """
    result = list(records)

    if filters.search_text:
        needle = filters.search_text.lower()
        result = [r for r in result if needle in _record_text(r)]

    if filters.categories:
        result = [r for r in result if r.get("category") in filters.categories]

    if filters.statuses:
        result = [r for r in result if _published_state(r) in filters.statuses]

    if filters.date_range:
        start, end = filters.date_range.start, filters.date_range.end
        kept = []
        for record in result:
            record_date = _record_date(record)
            if record_date is not None and start <= record_date <= end:
                kept.append(record)
        result = kept

    return result


def select_columns(records: Sequence[Record], columns: Sequence[str]) -> list[str]:
    """Requested columns, or every key of the first record when none are requested."""
    if columns:
        return list(columns)
    if not records:
        return []
    return list(records[0].keys())


def _format_cell(value: Any) -> str:
    """Render one value as CSV cell text."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return EXPORT_LIST_SEPARATOR.join(_format_cell(v) for v in value)
    if isinstance(value, dict):
        return json.dumps(to_jsonable_python(value), separators=(",", ":"), ensure_ascii=False)
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


def export_records_to_csv(records: Sequence[Record], columns: Sequence[str]) -> bytes:
    """Export records to CSV format.

    Args:
        records: Records to export.
        columns: Columns in output order.

    Returns:
        CSV content as bytes
    """
    output = io.StringIO()
    writer = csv.writer(output, lineterminator="\n")

    writer.writerow(columns)
    for record in records:
        writer.writerow([_format_cell(record.get(column)) for column in columns])

    return output.getvalue().encode("utf-8")


def export_records_to_json(records: Sequence[Record], columns: Sequence[str]) -> bytes:
    """Export records to indented JSON, keeping only the selected keys each record has."""
    projected = [
        {column: record[column] for column in columns if column in record}
        for record in records
    ]
    return json.dumps(
        to_jsonable_python(projected), indent=2, ensure_ascii=False
    ).encode("utf-8")


def get_content_type(export_format: ExportFormat) -> str:
    """Get the MIME type for an export format."""
    content_types = {
        ExportFormat.CSV: "text/csv",
        ExportFormat.JSON: "application/json",
        ExportFormat.SPREADSHEET: "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    }
    return content_types[export_format]


def generate_filename(
    record_type: RecordType,
    export_format: ExportFormat,
    today: date | None = None,
) -> str:
    """Default export filename, e.g. documents-2024-05-01.csv."""
    today = today or datetime.now(timezone.utc).date()
    return f"{record_type.value}-{today.isoformat()}.{export_format.extension}"


def content_disposition(filename: str) -> str:
    """Attachment header value with an ASCII fallback and a UTF-8 filename* parameter."""
    fallback = "".join(ch if ch.isascii() and ch.isprintable() else "_" for ch in filename)
    fallback = fallback.replace("\\", "\\\\").replace('"', '\\"')
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename, safe='')}"


def export_records(
    records: Iterable[Record],
    request: ExportRequest,
    record_type: RecordType,
) -> tuple[str, bytes]:
    """Filter, project and serialize records.

    The spreadsheet format carries CSV content under an .xlsx name.

    Args:
        records: Full collection.
        request: Format, columns, filters and optional filename.
        record_type: Record type, used for the default filename.

    Returns:
        Tuple of (filename, content).

    Raises:
        EmptyExportError: If no records are left after filtering.
    """
    filtered = filter_records(records, request.filters)
    if not filtered:
        raise EmptyExportError("There is no data available to export")

    columns = select_columns(filtered, request.columns)
    if request.format == ExportFormat.JSON:
        content = export_records_to_json(filtered, columns)
    else:
        content = export_records_to_csv(filtered, columns)

    filename = request.filename_override or generate_filename(record_type, request.format)
    logger.info(
        "Exported %d %s as %s (filters: %s)",
        len(filtered),
        record_type.value,
        request.format.value,
        request.filters.applied(),
    )
    return filename, content
