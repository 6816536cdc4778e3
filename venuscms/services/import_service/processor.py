"""Row-by-row execution of content imports."""

import inspect
import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import Any

from venuscms.schemas.import_schemas import (
    FieldMapping,
    ImportProgress,
    ImportStage,
    ImportSummary,
    RawTable,
    RecordType,
    RowFailure,
)

from .constants import ALL_PAGES, RECORD_DEFAULTS, RECORD_FLAG_DEFAULTS
from .converters import coerce_row
from .errors import ImportBlockedError
from .validation import has_blocking_errors, validate_table

logger = logging.getLogger(__name__)

Persist = Callable[[dict[str, Any]], Awaitable[Any]]
ProgressCallback = Callable[[ImportProgress], Awaitable[None] | None]

_LABELS = {
    RecordType.DOCUMENT: "document",
    RecordType.UPDATE_LOG: "update log",
}


def apply_record_defaults(
    candidate: dict[str, Any],
    record_type: RecordType,
    target_category: str | None = None,
) -> dict[str, Any]:
    """Fill the fields the backend requires that the row left unset.

    Args:
        candidate: Coerced record; modified in place.
        record_type: Target record type.
        target_category: Import target page, used as a document's category
            when the row has none.

    Returns:
        The same candidate dict.
    """
    for field, factory in RECORD_DEFAULTS[record_type].items():
        if not candidate.get(field):
            candidate[field] = factory()

    for field, flag in RECORD_FLAG_DEFAULTS[record_type].items():
        candidate.setdefault(field, flag)

    if (
        record_type == RecordType.DOCUMENT
        and target_category
        and target_category != ALL_PAGES
        and not candidate.get("category")
    ):
        candidate["category"] = target_category

    return candidate


def _row_context(candidate: dict[str, Any]) -> str:
    """Short identification of a candidate for log lines."""
    parts = [f"{key}={candidate[key]!r}" for key in ("id", "title", "version") if candidate.get(key)]
    return ", ".join(parts) or "no identifying fields"


async def _emit(on_progress: ProgressCallback | None, progress: ImportProgress) -> None:
    if on_progress is None:
        return
    result = on_progress(progress.model_copy())
    if inspect.isawaitable(result):
        await result


async def run_import(
    table: RawTable,
    mapping: Sequence[FieldMapping],
    record_type: RecordType,
    persist: Persist,
    on_progress: ProgressCallback | None = None,
    target_category: str | None = None,
    progress: ImportProgress | None = None,
) -> ImportSummary:
    """Import every row of a table, one at a time.

    Each row is coerced, given record-type defaults and passed to persist.
    A failing persist call is counted and logged; the remaining rows are
    still imported.

    Args:
        table: Parsed table.
        mapping: Confirmed mapping set.
        record_type: Target record type.
        persist: Awaitable that stores one candidate record.
        on_progress: Called with a snapshot after each stage change and row.
        target_category: Import target page for documents.
        progress: Progress object to update in place, so callers can poll it.

    Returns:
        Success and failure counts with per-row failure messages.

    Raises:
        ImportBlockedError: If validation found error-severity issues.
    """
    if progress is None:
        progress = ImportProgress()
    progress.total = table.row_count
    label = _LABELS[record_type]

    progress.advance_to(ImportStage.PARSING, f"Loaded {table.row_count} rows")
    await _emit(on_progress, progress)

    progress.advance_to(ImportStage.VALIDATING, "Validating rows...")
    await _emit(on_progress, progress)
    issues = validate_table(table, mapping)
    if has_blocking_errors(issues):
        blocked = ImportBlockedError(issues)
        progress.message = str(blocked)
        logger.info("Import of %s blocked: %s", record_type.value, blocked)
        raise blocked

    progress.advance_to(ImportStage.IMPORTING, "Starting import...")
    await _emit(on_progress, progress)

    summary = ImportSummary(record_type=record_type)

    for row_index, row in enumerate(table.rows, start=1):
        progress.message = f"Processing {label} {row_index} of {table.row_count}..."
        candidate = coerce_row(row, table.headers, mapping)
        apply_record_defaults(candidate, record_type, target_category)

        try:
            await persist(candidate)
            summary.success_count += 1
        except Exception as e:
            summary.failure_count += 1
            summary.failures.append(RowFailure(row_index=row_index, message=str(e)))
            progress.failure_count += 1
            logger.warning(
                "Import error on row %d (%s): %s", row_index, _row_context(candidate), e
            )

        progress.processed = row_index
        await _emit(on_progress, progress)

    progress.advance_to(ImportStage.COMPLETE, "Import completed!")
    await _emit(on_progress, progress)

    logger.info(
        "Import of %s finished: %d imported, %d failed",
        record_type.value,
        summary.success_count,
        summary.failure_count,
    )
    return summary
