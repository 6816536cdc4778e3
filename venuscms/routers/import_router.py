"""Import endpoints for CSV content import."""

import logging

from fastapi import APIRouter, File, HTTPException, Query, UploadFile, status

from venuscms.models import ImportSession, ImportSessionStore, ImportStatus
from venuscms.routers.deps import AppSettings, Notifications, RecordStores, Sessions
from venuscms.schemas.import_schemas import (
    ColumnMappingRequest,
    ImportPreviewResponse,
    ImportProcessRequest,
    ImportProgress,
    ImportResultResponse,
    PasteImportRequest,
    RawTable,
    RecordType,
)
from venuscms.services.import_service import (
    ALL_PAGES,
    IMPORT_TARGET_PAGES,
    EmptyInputError,
    ImportBlockedError,
    InputRejectedError,
    auto_assign,
    check_upload,
    default_mapping,
    merge_user_mapping,
    parse_csv,
    parse_csv_text,
    run_import,
)
from venuscms.services.notifications import NotificationCenter, import_summary_notification

logger = logging.getLogger(__name__)

router = APIRouter()

READ_CHUNK_SIZE = 64 * 1024


def _build_preview(session: ImportSession, preview_rows: int) -> ImportPreviewResponse:
    """Build the preview response for a session."""
    table = session.table
    error_count, warning_count = session.severity_counts
    valid_rows, invalid_rows = session.row_counts
    return ImportPreviewResponse(
        session_id=session.id,
        filename=session.filename,
        record_type=session.record_type,
        headers=list(table.headers),
        preview_rows=[list(row) for row in table.rows[:preview_rows]],
        total_rows=table.row_count,
        valid_rows=valid_rows,
        invalid_rows=invalid_rows,
        issues=session.issues,
        mapping=session.mapping,
        error_count=error_count,
        warning_count=warning_count,
        can_import=session.can_import,
    )


def _open_session(
    sessions: ImportSessionStore,
    notifications: NotificationCenter,
    table: RawTable,
    filename: str,
    record_type: RecordType,
) -> ImportSession:
    """Create a session with the auto-assigned mapping and announce it."""
    session = sessions.add(ImportSession(
        filename=filename,
        record_type=record_type,
        table=table,
        mapping=auto_assign(default_mapping(record_type), table.headers),
    ))
    notifications.success(
        "File Processed",
        f"Found {table.row_count} rows with {len(table.headers)} columns",
    )
    return session


def _reject(notifications: NotificationCenter, title: str, error: Exception, status_code: int) -> HTTPException:
    """Post an error notification and build the matching HTTP error."""
    notifications.error(title, str(error))
    return HTTPException(status_code=status_code, detail=str(error))


async def _read_upload(file: UploadFile, max_bytes: int) -> bytes:
    """Read an upload in chunks, stopping as soon as it exceeds max_bytes.

    Raises:
        InputRejectedError: With status 413 when the file is too large.
    """
    chunks: list[bytes] = []
    total_size = 0
    while True:
        chunk = await file.read(READ_CHUNK_SIZE)
        if not chunk:
            break
        total_size += len(chunk)
        check_upload(file.filename, file.content_type, size=total_size, max_bytes=max_bytes)
        chunks.append(chunk)
    return b"".join(chunks)


@router.post("/upload", response_model=ImportPreviewResponse)
async def upload_csv(
    settings: AppSettings,
    sessions: Sessions,
    notifications: Notifications,
    record_type: RecordType = Query(default=RecordType.DOCUMENT, description="Record type to import"),
    file: UploadFile = File(..., description="CSV file"),
) -> ImportPreviewResponse:
    """Upload a CSV file for import.

    Parses the file and returns the preview with an auto-assigned mapping.
    """
    max_bytes = settings.max_upload_size_bytes
    try:
        check_upload(file.filename, file.content_type, size=file.size, max_bytes=max_bytes)
        content = await _read_upload(file, max_bytes)
    except InputRejectedError as e:
        title = "File Too Large" if e.status_code == status.HTTP_413_REQUEST_ENTITY_TOO_LARGE else "Invalid File Type"
        raise _reject(notifications, title, e, e.status_code)

    try:
        table = parse_csv(content, max_rows=settings.max_import_rows)
    except EmptyInputError as e:
        raise _reject(notifications, "File Processing Failed", e, status.HTTP_400_BAD_REQUEST)

    session = _open_session(sessions, notifications, table, file.filename or "upload.csv", record_type)
    logger.info("Uploaded %s: %d rows for %s", session.filename, table.row_count, record_type.value)
    return _build_preview(session, settings.preview_rows)


@router.post("/paste", response_model=ImportPreviewResponse)
async def paste_csv(
    request: PasteImportRequest,
    settings: AppSettings,
    sessions: Sessions,
    notifications: Notifications,
) -> ImportPreviewResponse:
    """Preview CSV text pasted into the editor."""
    try:
        table = parse_csv_text(request.text, max_rows=settings.max_import_rows)
    except EmptyInputError as e:
        raise _reject(notifications, "File Processing Failed", e, status.HTTP_400_BAD_REQUEST)

    session = _open_session(sessions, notifications, table, "pasted.csv", request.record_type)
    return _build_preview(session, settings.preview_rows)


@router.get("/{session_id}", response_model=ImportPreviewResponse)
async def get_session(
    session_id: str,
    settings: AppSettings,
    sessions: Sessions,
) -> ImportPreviewResponse:
    """Get the current preview of an import session."""
    session = _get_session(sessions, session_id)
    return _build_preview(session, settings.preview_rows)


@router.put("/{session_id}/mapping", response_model=ImportPreviewResponse)
async def set_column_mapping(
    session_id: str,
    request: ColumnMappingRequest,
    settings: AppSettings,
    sessions: Sessions,
) -> ImportPreviewResponse:
    """Replace the mapping set of a session and re-validate."""
    session = _get_session(sessions, session_id)
    if session.status == ImportStatus.PROCESSING:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Import is running, mapping cannot be changed",
        )

    try:
        session.mapping = merge_user_mapping(request.mapping, session.record_type)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )

    session.status = ImportStatus.MAPPED
    session.revalidate()
    return _build_preview(session, settings.preview_rows)


@router.post("/{session_id}/process", response_model=ImportResultResponse)
async def process_session(
    session_id: str,
    sessions: Sessions,
    notifications: Notifications,
    record_stores: RecordStores,
    request: ImportProcessRequest | None = None,
) -> ImportResultResponse:
    """Run the import: create one record per row, tolerating row failures."""
    session = _get_session(sessions, session_id)
    opts = request or ImportProcessRequest()

    target = opts.target_category
    if target and target != ALL_PAGES and target not in IMPORT_TARGET_PAGES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown import target page '{target}'",
        )

    if session.table.row_count == 0:
        raise _reject(
            notifications,
            "No Data to Import",
            ValueError("Please upload and preview a CSV file first"),
            status.HTTP_400_BAD_REQUEST,
        )

    if not sessions.begin_run(session.id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Another import is already running",
        )

    previous_status = session.status
    session.status = ImportStatus.PROCESSING
    session.progress = ImportProgress()
    store = record_stores[session.record_type]
    try:
        summary = await run_import(
            session.table,
            session.mapping,
            session.record_type,
            store.create,
            target_category=target,
            progress=session.progress,
        )
    except ImportBlockedError as e:
        session.status = previous_status
        raise _reject(notifications, "Validation Failed", e, status.HTTP_400_BAD_REQUEST)
    finally:
        sessions.end_run(session.id)

    session.status = ImportStatus.COMPLETED
    notification = import_summary_notification(notifications, summary, target)
    sessions.discard(session.id)

    return ImportResultResponse(
        session_id=session.id,
        record_type=summary.record_type,
        success_count=summary.success_count,
        failure_count=summary.failure_count,
        failures=summary.failures,
        message=notification.message,
        progress=session.progress,
    )


@router.get("/{session_id}/progress", response_model=ImportProgress)
async def get_progress(
    session_id: str,
    sessions: Sessions,
) -> ImportProgress:
    """Get the live progress of a session's import run."""
    session = _get_session(sessions, session_id)
    return session.progress


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def cancel_session(
    session_id: str,
    sessions: Sessions,
) -> None:
    """Discard an import session (records already created are kept)."""
    _get_session(sessions, session_id)
    if not sessions.discard(session_id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Import is running, session cannot be cancelled",
        )


def _get_session(sessions: ImportSessionStore, session_id: str) -> ImportSession:
    """Get an import session by ID.

    Raises:
        HTTPException: If the session does not exist.
    """
    session = sessions.get(session_id)
    if not session:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Import session '{session_id}' not found",
        )
    return session
