"""Integration tests for import endpoints."""

import csv
import io

import pytest
from httpx import AsyncClient

from venuscms.schemas.import_schemas import RecordType
from venuscms.services.records import PersistError


def _make_csv(headers: list[str], rows: list[list[str]]) -> bytes:
    """Helper to create CSV bytes."""
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(headers)
    for row in rows:
        writer.writerow(row)
    return output.getvalue().encode("utf-8")


async def _upload(client: AsyncClient, content: bytes, record_type: str = "documents", filename: str = "documents.csv"):
    files = {"file": (filename, io.BytesIO(content), "text/csv")}
    return await client.post(f"/api/import/upload?record_type={record_type}", files=files)


async def _notification_titles(client: AsyncClient) -> list[str]:
    response = await client.get("/api/notifications/")
    return [n["title"] for n in response.json()]


# =============================================================================
# Upload and preview
# =============================================================================


@pytest.mark.asyncio
async def test_upload_csv_preview(client: AsyncClient, documents_csv) -> None:
    """Test uploading a CSV file returns a preview with auto-assigned mapping."""
    response = await _upload(client, documents_csv)
    assert response.status_code == 200

    data = response.json()
    assert data["record_type"] == "documents"
    assert data["filename"] == "documents.csv"
    assert data["headers"] == ["Title", "Content", "Category", "Tags", "Author", "Published"]
    assert data["total_rows"] == 2
    assert data["preview_rows"][1][1] == "Fixed bugs, added events"
    assert data["error_count"] == 0
    assert data["can_import"] is True

    mapping = {m["logical_field"]: m["source_column"] for m in data["mapping"]}
    assert mapping["title"] == "Title"
    assert mapping["isPublished"] == "Published"
    assert mapping["createdAt"] == ""

    assert "File Processed" in await _notification_titles(client)


@pytest.mark.asyncio
async def test_upload_preview_rows_limited(client: AsyncClient) -> None:
    rows = [[f"Doc {i}", "body", "gacha"] for i in range(25)]
    response = await _upload(client, _make_csv(["Title", "Content", "Category"], rows))
    data = response.json()
    assert data["total_rows"] == 25
    assert len(data["preview_rows"]) == 10


@pytest.mark.asyncio
async def test_upload_rejects_non_csv(client: AsyncClient) -> None:
    files = {"file": ("documents.xlsx", io.BytesIO(b"PK\x03\x04"), "application/vnd.ms-excel")}
    response = await client.post("/api/import/upload", files=files)
    assert response.status_code == 400
    assert response.json()["detail"] == "Please select a CSV file"
    assert "Invalid File Type" in await _notification_titles(client)


@pytest.mark.asyncio
async def test_upload_rejects_oversized_file(client: AsyncClient, settings) -> None:
    settings.config.imports.max_upload_mb = 1
    content = b"Title,Content,Category\n" + b"x,y,z\n" * (200 * 1024)
    response = await _upload(client, content)
    assert response.status_code == 413
    assert "File Too Large" in await _notification_titles(client)


@pytest.mark.asyncio
async def test_upload_rejects_empty_file(client: AsyncClient) -> None:
    response = await _upload(client, b"\n\n")
    assert response.status_code == 400
    assert response.json()["detail"] == "CSV file is empty"


@pytest.mark.asyncio
async def test_upload_reports_issues(client: AsyncClient) -> None:
    content = _make_csv(["Title", "Content", "Category"], [["A", "", "gacha"], ["B", "x", "shop"]])
    response = await _upload(client, content)
    data = response.json()
    assert data["error_count"] == 1
    assert data["valid_rows"] == 1
    assert data["invalid_rows"] == 1
    assert data["can_import"] is False
    assert data["issues"][0]["message"] == "Required field 'content' is empty"


@pytest.mark.asyncio
async def test_paste_csv_preview(client: AsyncClient) -> None:
    response = await client.post(
        "/api/import/paste",
        json={
            "text": "Version,Title,Content,Date\nv1.2.0,Patch,Notes,2024-04-01\n",
            "record_type": "update-logs",
        },
    )
    assert response.status_code == 200
    data = response.json()
    assert data["record_type"] == "update-logs"
    assert data["total_rows"] == 1
    assert data["can_import"] is True


@pytest.mark.asyncio
async def test_paste_empty_text(client: AsyncClient) -> None:
    response = await client.post("/api/import/paste", json={"text": "   "})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_get_unknown_session(client: AsyncClient) -> None:
    response = await client.get("/api/import/nope")
    assert response.status_code == 404


# =============================================================================
# Mapping
# =============================================================================


@pytest.mark.asyncio
async def test_set_mapping_revalidates(client: AsyncClient) -> None:
    content = _make_csv(["Heading", "Body", "Section"], [["A", "x", "gacha"]])
    upload = (await _upload(client, content)).json()
    assert upload["can_import"] is False

    response = await client.put(
        f"/api/import/{upload['session_id']}/mapping",
        json={"mapping": [
            {"logical_field": "title", "source_column": "Heading"},
            {"logical_field": "content", "source_column": "Body"},
            {"logical_field": "category", "source_column": "Section"},
        ]},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["error_count"] == 0
    assert data["can_import"] is True
    assert len(data["mapping"]) == 8


@pytest.mark.asyncio
async def test_set_mapping_rejects_unknown_field(client: AsyncClient, documents_csv) -> None:
    upload = (await _upload(client, documents_csv)).json()
    response = await client.put(
        f"/api/import/{upload['session_id']}/mapping",
        json={"mapping": [{"logical_field": "price", "source_column": "Title"}]},
    )
    assert response.status_code == 400
    assert "Unknown field" in response.json()["detail"]


# =============================================================================
# Processing
# =============================================================================


@pytest.mark.asyncio
async def test_process_creates_records(client: AsyncClient, documents_csv, document_store) -> None:
    upload = (await _upload(client, documents_csv)).json()

    response = await client.post(f"/api/import/{upload['session_id']}/process", json={})
    assert response.status_code == 200
    data = response.json()
    assert data["success_count"] == 2
    assert data["failure_count"] == 0
    assert data["message"] == "Imported 2 documents"
    assert data["progress"]["stage"] == "complete"

    records = await document_store.list_all()
    assert {r["title"] for r in records} == {"Welcome", "Patch notes"}
    welcome = next(r for r in records if r["title"] == "Welcome")
    assert welcome["tags"] == ["news", "intro"]
    assert welcome["isPublished"] is True
    assert welcome["author"] == "Kasumi"

    assert "Import Successful" in await _notification_titles(client)

    # Session is discarded after the run
    assert (await client.get(f"/api/import/{upload['session_id']}")).status_code == 404


@pytest.mark.asyncio
async def test_process_with_target_page(client: AsyncClient, documents_csv, document_store) -> None:
    upload = (await _upload(client, documents_csv)).json()
    response = await client.post(
        f"/api/import/{upload['session_id']}/process",
        json={"target_category": "gacha"},
    )
    assert response.json()["message"] == "Imported 2 documents to Gacha page"


@pytest.mark.asyncio
async def test_process_rejects_unknown_target_page(client: AsyncClient, documents_csv) -> None:
    upload = (await _upload(client, documents_csv)).json()
    response = await client.post(
        f"/api/import/{upload['session_id']}/process",
        json={"target_category": "casino"},
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_process_blocked_by_errors(client: AsyncClient, document_store) -> None:
    content = _make_csv(["Title", "Content", "Category"], [["A", "", "gacha"], ["B", "x", "shop"]])
    upload = (await _upload(client, content)).json()

    response = await client.post(f"/api/import/{upload['session_id']}/process")
    assert response.status_code == 400
    assert response.json()["detail"] == "Found 1 critical errors. Please fix them before importing."
    assert len(document_store) == 0
    assert "Validation Failed" in await _notification_titles(client)

    # Session survives so the mapping can be fixed
    assert (await client.get(f"/api/import/{upload['session_id']}")).status_code == 200


@pytest.mark.asyncio
async def test_process_partial_failure(client: AsyncClient, documents_csv, document_store) -> None:
    original_create = document_store.create

    async def flaky_create(record: dict) -> dict:
        if record["title"] == "Patch notes":
            raise PersistError("Failed to create document", status_code=500)
        return await original_create(record)

    document_store.create = flaky_create
    upload = (await _upload(client, documents_csv)).json()

    response = await client.post(f"/api/import/{upload['session_id']}/process")
    data = response.json()
    assert response.status_code == 200
    assert data["success_count"] == 1
    assert data["failure_count"] == 1
    assert data["failures"] == [{"row_index": 2, "message": "Failed to create document"}]
    assert data["message"] == "Imported 1 documents (1 errors)"


@pytest.mark.asyncio
async def test_process_rejected_while_another_run_is_active(client: AsyncClient, documents_csv, app) -> None:
    upload = (await _upload(client, documents_csv)).json()
    app.state.import_sessions.begin_run("someone-else")

    response = await client.post(f"/api/import/{upload['session_id']}/process")
    assert response.status_code == 409

    app.state.import_sessions.end_run("someone-else")
    response = await client.post(f"/api/import/{upload['session_id']}/process")
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_process_update_logs(client: AsyncClient, update_log_store) -> None:
    content = _make_csv(
        ["Version", "Title", "Content", "Date", "Tags"],
        [["v2.0.0", "Big update", "Lots", "2024-06-15", "major;event"]],
    )
    upload = (await _upload(client, content, record_type=RecordType.UPDATE_LOG.value)).json()
    response = await client.post(f"/api/import/{upload['session_id']}/process")
    assert response.json()["message"] == "Imported 1 update-logs"

    records = await update_log_store.list_all()
    assert records[0]["version"] == "v2.0.0"
    assert records[0]["screenshots"] == []


@pytest.mark.asyncio
async def test_progress_and_cancel(client: AsyncClient, documents_csv) -> None:
    upload = (await _upload(client, documents_csv)).json()
    session_id = upload["session_id"]

    progress = await client.get(f"/api/import/{session_id}/progress")
    assert progress.status_code == 200
    assert progress.json()["stage"] == "uploading"

    response = await client.delete(f"/api/import/{session_id}")
    assert response.status_code == 204
    assert (await client.get(f"/api/import/{session_id}")).status_code == 404
