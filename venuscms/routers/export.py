"""Export endpoints for downloading content records."""

import logging

from fastapi import APIRouter, HTTPException, status
from fastapi.responses import Response

from venuscms.routers.deps import AppSettings, Notifications, RecordStores
from venuscms.schemas.export import ExportFormat, ExportRequest
from venuscms.schemas.import_schemas import RecordType
from venuscms.services import export_service
from venuscms.services.import_service import EmptyExportError
from venuscms.services.records import PersistError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/{record_type}")
async def export_records(
    record_type: RecordType,
    settings: AppSettings,
    notifications: Notifications,
    record_stores: RecordStores,
    request: ExportRequest | None = None,
) -> Response:
    """Export a record collection.

    Returns the filtered records in the requested format (CSV, JSON or
    spreadsheet) as an attachment.
    """
    opts = request or ExportRequest(format=ExportFormat(settings.default_export_format))

    try:
        records = await record_stores[record_type].list_all()
    except PersistError as e:
        notifications.error("Export Failed", e.message)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Could not load {record_type.value}: {e.message}",
        )

    try:
        filename, content = export_service.export_records(records, opts, record_type)
    except EmptyExportError as e:
        notifications.warning("No Data to Export", str(e))
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )

    notifications.success("Export Successful", f"Exported {record_type.value} to {filename}")
    return Response(
        content=content,
        media_type=export_service.get_content_type(opts.format),
        headers={"Content-Disposition": export_service.content_disposition(filename)},
    )
