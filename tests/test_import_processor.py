"""Tests for the row-by-row import executor."""

from datetime import date

import pytest

from venuscms.schemas.import_schemas import (
    FieldMapping,
    ImportProgress,
    ImportStage,
    RecordType,
)
from venuscms.services.import_service import (
    ImportBlockedError,
    apply_record_defaults,
    auto_assign,
    default_mapping,
    parse_csv_text,
    run_import,
)
from venuscms.services.records import InMemoryRecordStore, PersistError


def _auto(record_type: RecordType, table) -> list[FieldMapping]:
    return auto_assign(default_mapping(record_type), table.headers)


class RecordingPersist:
    """Persist callable that stores candidates and fails for chosen titles."""

    def __init__(self, fail_titles: set[str] | None = None) -> None:
        self.fail_titles = fail_titles or set()
        self.calls: list[dict] = []

    async def __call__(self, candidate: dict) -> dict:
        self.calls.append(candidate)
        if candidate.get("title") in self.fail_titles:
            raise PersistError("Title already exists", status_code=400)
        return candidate


# =============================================================================
# Record Defaults
# =============================================================================


def test_document_defaults_fill_missing_fields() -> None:
    candidate = apply_record_defaults({"title": "T", "content": "C", "category": "event"}, RecordType.DOCUMENT)
    assert candidate["author"] == "Admin"
    assert candidate["isPublished"] is False
    assert isinstance(candidate["createdAt"], date)
    assert candidate["updatedAt"] == candidate["createdAt"]
    assert len(candidate["id"]) == 36


def test_document_defaults_keep_explicit_values() -> None:
    candidate = apply_record_defaults(
        {"title": "T", "author": "Misaki", "isPublished": True, "id": "doc-1"},
        RecordType.DOCUMENT,
    )
    assert candidate["author"] == "Misaki"
    assert candidate["isPublished"] is True
    assert candidate["id"] == "doc-1"


def test_document_defaults_empty_author_replaced() -> None:
    candidate = apply_record_defaults({"author": ""}, RecordType.DOCUMENT)
    assert candidate["author"] == "Admin"


def test_document_target_page_sets_missing_category() -> None:
    candidate = apply_record_defaults({"title": "T"}, RecordType.DOCUMENT, target_category="gacha")
    assert candidate["category"] == "gacha"


def test_document_target_page_keeps_row_category() -> None:
    candidate = apply_record_defaults({"category": "shop"}, RecordType.DOCUMENT, target_category="gacha")
    assert candidate["category"] == "shop"


def test_document_all_pages_sets_no_category() -> None:
    candidate = apply_record_defaults({}, RecordType.DOCUMENT, target_category="all")
    assert "category" not in candidate


def test_update_log_defaults() -> None:
    candidate = apply_record_defaults({}, RecordType.UPDATE_LOG)
    assert candidate["version"] == "v1.0.0"
    assert candidate["title"] == "Untitled Update"
    assert candidate["content"] == ""
    assert candidate["tags"] == []
    assert candidate["technicalDetails"] == []
    assert candidate["bugFixes"] == []
    assert candidate["screenshots"] == []
    assert candidate["metrics"] == {
        "performanceImprovement": "0%",
        "userSatisfaction": "0%",
        "bugReports": 0,
    }
    assert isinstance(candidate["date"], date)


def test_update_log_defaults_do_not_share_lists() -> None:
    first = apply_record_defaults({}, RecordType.UPDATE_LOG)
    second = apply_record_defaults({}, RecordType.UPDATE_LOG)
    first["tags"].append("x")
    assert second["tags"] == []


# =============================================================================
# Import Runs
# =============================================================================


@pytest.mark.asyncio
async def test_run_import_all_rows_succeed() -> None:
    table = parse_csv_text(
        "Title,Content,Category,Tags,Published\n"
        "A,Body A,gacha,x;y,yes\n"
        "B,Body B,event,,no\n"
    )
    persist = RecordingPersist()

    summary = await run_import(table, _auto(RecordType.DOCUMENT, table), RecordType.DOCUMENT, persist)

    assert summary.success_count == 2
    assert summary.failure_count == 0
    assert summary.message == "Imported 2 documents"
    first = persist.calls[0]
    assert first["title"] == "A"
    assert first["tags"] == ["x", "y"]
    assert first["isPublished"] is True
    assert first["author"] == "Admin"
    assert persist.calls[1]["isPublished"] is False


@pytest.mark.asyncio
async def test_run_import_partial_failure_continues() -> None:
    """A failing row is counted and the following rows are still imported."""
    table = parse_csv_text(
        "Title,Content,Category\n"
        "A,x,gacha\n"
        "Duplicate,x,gacha\n"
        "C,x,gacha\n"
    )
    persist = RecordingPersist(fail_titles={"Duplicate"})

    summary = await run_import(table, _auto(RecordType.DOCUMENT, table), RecordType.DOCUMENT, persist)

    assert [c["title"] for c in persist.calls] == ["A", "Duplicate", "C"]
    assert summary.success_count == 2
    assert summary.failure_count == 1
    assert summary.total == table.row_count
    assert summary.failures[0].row_index == 2
    assert summary.failures[0].message == "Title already exists"
    assert summary.message == "Imported 2 documents (1 errors)"


@pytest.mark.asyncio
async def test_run_import_failure_is_logged(caplog) -> None:
    table = parse_csv_text("Title,Content,Category\nBad,x,gacha\n")
    persist = RecordingPersist(fail_titles={"Bad"})

    with caplog.at_level("WARNING"):
        await run_import(table, _auto(RecordType.DOCUMENT, table), RecordType.DOCUMENT, persist)

    assert "row 1" in caplog.text
    assert "'Bad'" in caplog.text


@pytest.mark.asyncio
async def test_run_import_blocked_persists_nothing() -> None:
    table = parse_csv_text("Title,Content,Category\nA,,gacha\nB,x,gacha\n")
    persist = RecordingPersist()
    progress = ImportProgress()

    with pytest.raises(ImportBlockedError) as exc_info:
        await run_import(
            table, _auto(RecordType.DOCUMENT, table), RecordType.DOCUMENT, persist, progress=progress
        )

    assert persist.calls == []
    assert len(exc_info.value.issues) == 1
    assert str(exc_info.value) == "Found 1 critical errors. Please fix them before importing."
    assert progress.stage == ImportStage.VALIDATING


@pytest.mark.asyncio
async def test_run_import_warnings_do_not_block() -> None:
    table = parse_csv_text("Title,Content,Category,Published\nA,x,gacha,maybe\n")
    persist = RecordingPersist()

    summary = await run_import(table, _auto(RecordType.DOCUMENT, table), RecordType.DOCUMENT, persist)

    assert summary.success_count == 1
    assert persist.calls[0]["isPublished"] is False


@pytest.mark.asyncio
async def test_run_import_progress_sequence() -> None:
    table = parse_csv_text("Title,Content,Category\nA,x,gacha\nB,x,gacha\nC,x,gacha\n")
    snapshots: list[ImportProgress] = []

    await run_import(
        table,
        _auto(RecordType.DOCUMENT, table),
        RecordType.DOCUMENT,
        RecordingPersist(),
        on_progress=snapshots.append,
    )

    stages = [s.stage for s in snapshots]
    assert stages[:3] == [ImportStage.PARSING, ImportStage.VALIDATING, ImportStage.IMPORTING]
    assert stages[-1] == ImportStage.COMPLETE
    processed = [s.processed for s in snapshots if s.stage == ImportStage.IMPORTING]
    assert processed == [0, 1, 2, 3]
    assert all(s.total == 3 for s in snapshots)
    assert snapshots[-1].percent == 100


@pytest.mark.asyncio
async def test_run_import_async_progress_callback() -> None:
    table = parse_csv_text("Title,Content,Category\nA,x,gacha\n")
    seen: list[ImportStage] = []

    async def on_progress(progress: ImportProgress) -> None:
        seen.append(progress.stage)

    await run_import(
        table, _auto(RecordType.DOCUMENT, table), RecordType.DOCUMENT, RecordingPersist(), on_progress=on_progress
    )

    assert seen[-1] == ImportStage.COMPLETE


@pytest.mark.asyncio
async def test_run_import_update_logs_into_store() -> None:
    table = parse_csv_text(
        "Version,Title,Content,Date,Tags\n"
        "v2.1.0,Summer update,New swimsuits,2024-07-01,event;swimsuit\n"
    )
    store = InMemoryRecordStore(RecordType.UPDATE_LOG)

    summary = await run_import(table, _auto(RecordType.UPDATE_LOG, table), RecordType.UPDATE_LOG, store.create)

    assert summary.success_count == 1
    records = await store.list_all()
    assert records[0]["version"] == "v2.1.0"
    assert records[0]["date"] == date(2024, 7, 1)
    assert records[0]["tags"] == ["event", "swimsuit"]
    assert records[0]["metrics"]["bugReports"] == 0


@pytest.mark.asyncio
async def test_run_import_target_page_category() -> None:
    table = parse_csv_text("Title,Content,Category\nA,x,\n")
    mapping = _auto(RecordType.DOCUMENT, table)
    # Drop the category requirement's column so the target page supplies it
    mapping = [m for m in mapping if m.logical_field != "category"]
    persist = RecordingPersist()

    await run_import(table, mapping, RecordType.DOCUMENT, persist, target_category="skill")

    assert persist.calls[0]["category"] == "skill"


def test_progress_cannot_regress() -> None:
    progress = ImportProgress()
    progress.advance_to(ImportStage.IMPORTING)
    with pytest.raises(ValueError):
        progress.advance_to(ImportStage.PARSING)
