"""VenusCMS command line tool.

Usage:
    venuscms import FILE [--type TYPE] [--target-page PAGE] [--dry-run]
    venuscms export [--type TYPE] [--format FORMAT] [--columns A,B] [--search TEXT]
                    [--category NAME] [--status STATE] [--start DATE --end DATE]
                    [--output PATH]
    venuscms serve [--host HOST] [--port PORT] [--reload]
"""

import argparse
import asyncio
import logging
import sys
from datetime import date
from pathlib import Path

from pydantic import ValidationError

from venuscms import __version__
from venuscms.config import Settings, get_settings
from venuscms.schemas.export import DateRange, ExportFilters, ExportFormat, ExportRequest, PublishedState
from venuscms.schemas.import_schemas import RecordType
from venuscms.services import export_service
from venuscms.services.import_service import (
    ALL_PAGES,
    IMPORT_TARGET_PAGES,
    EmptyExportError,
    EmptyInputError,
    ImportBlockedError,
    InputRejectedError,
    auto_assign,
    check_upload,
    default_mapping,
    has_blocking_errors,
    parse_csv,
    run_import,
    validate_table,
)
from venuscms.services.records import PersistError, RecordStore, get_record_store

logger = logging.getLogger(__name__)


def _split_columns(value: str) -> list[str]:
    return [column.strip() for column in value.split(",") if column.strip()]


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="venuscms",
        description="Bulk CSV import and export for VenusCMS content",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="More log output (-vv for debug)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    record_types = [t.value for t in RecordType]

    import_parser = subparsers.add_parser("import", help="Import records from a CSV file")
    import_parser.add_argument("file", type=Path, help="CSV file to import")
    import_parser.add_argument("--type", dest="record_type", choices=record_types, default=RecordType.DOCUMENT.value)
    import_parser.add_argument(
        "--target-page",
        choices=[ALL_PAGES, *IMPORT_TARGET_PAGES],
        default=ALL_PAGES,
        help="Page used as the category of imported documents",
    )
    import_parser.add_argument("--dry-run", action="store_true", help="Validate only, create nothing")

    export_parser = subparsers.add_parser("export", help="Export records to a file")
    export_parser.add_argument("--type", dest="record_type", choices=record_types, default=RecordType.DOCUMENT.value)
    export_parser.add_argument("--format", choices=[f.value for f in ExportFormat], default=None)
    export_parser.add_argument("--columns", type=_split_columns, default=[], help="Comma-separated columns")
    export_parser.add_argument("--search", default=None, help="Free-text filter")
    export_parser.add_argument("--category", action="append", default=[], help="Category to include (repeatable)")
    export_parser.add_argument(
        "--status",
        action="append",
        choices=[s.value for s in PublishedState],
        default=[],
        help="Publication state to include (repeatable)",
    )
    export_parser.add_argument("--start", type=date.fromisoformat, default=None, help="Start date (YYYY-MM-DD)")
    export_parser.add_argument("--end", type=date.fromisoformat, default=None, help="End date (YYYY-MM-DD)")
    export_parser.add_argument("--output", type=Path, default=None, help="Output path")

    serve_parser = subparsers.add_parser("serve", help="Run the API server")
    serve_parser.add_argument("--host", default=None)
    serve_parser.add_argument("--port", type=int, default=None)
    serve_parser.add_argument("--reload", action="store_true", help="Enable auto-reload for development")

    return parser


async def import_file(args: argparse.Namespace, settings: Settings, store: RecordStore | None = None) -> int:
    """Import a CSV file through the configured record store.

    Returns:
        Process exit code.
    """
    record_type = RecordType(args.record_type)
    path: Path = args.file

    try:
        content = path.read_bytes()
    except OSError as e:
        print(f"Error: cannot read {path}: {e}", file=sys.stderr)
        return 1

    try:
        check_upload(path.name, None, size=len(content), max_bytes=settings.max_upload_size_bytes)
        table = parse_csv(content, max_rows=settings.max_import_rows)
    except (InputRejectedError, EmptyInputError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    mapping = auto_assign(default_mapping(record_type), table.headers)
    for entry in mapping:
        column = entry.source_column or "(unmapped)"
        print(f"  {entry.logical_field:<12} <- {column}")

    issues = validate_table(table, mapping)
    for issue in issues:
        print(f"  row {issue.row_index} [{issue.severity.value}] {issue.column}: {issue.message}")

    if args.dry_run:
        verdict = "blocked" if has_blocking_errors(issues) else "ready"
        print(f"Dry run: {table.row_count} rows, {len(issues)} issues, import {verdict}")
        return 1 if verdict == "blocked" else 0

    store = store or get_record_store(record_type, settings)
    try:
        summary = await run_import(
            table,
            mapping,
            record_type,
            store.create,
            target_category=args.target_page,
        )
    except ImportBlockedError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        await store.aclose()

    print(summary.message)
    for failure in summary.failures:
        print(f"  row {failure.row_index}: {failure.message}")
    return 0


async def export_file(args: argparse.Namespace, settings: Settings, store: RecordStore | None = None) -> int:
    """Export a collection to a file.

    Returns:
        Process exit code.
    """
    record_type = RecordType(args.record_type)

    if (args.start is None) != (args.end is None):
        print("Error: --start and --end must be given together", file=sys.stderr)
        return 1

    try:
        request = ExportRequest(
            format=ExportFormat(args.format or settings.default_export_format),
            columns=args.columns,
            filters=ExportFilters(
                search_text=args.search,
                categories=args.category,
                statuses=[PublishedState(s) for s in args.status],
                date_range=DateRange(start=args.start, end=args.end) if args.start else None,
            ),
            filename_override=args.output.name if args.output else None,
        )
    except ValidationError as e:
        print(f"Error: {e.errors()[0]['msg']}", file=sys.stderr)
        return 1

    store = store or get_record_store(record_type, settings)
    try:
        records = await store.list_all()
    except PersistError as e:
        print(f"Error: could not load {record_type.value}: {e}", file=sys.stderr)
        return 1
    finally:
        await store.aclose()

    try:
        filename, content = export_service.export_records(records, request, record_type)
    except EmptyExportError as e:
        print(f"No Data to Export: {e}", file=sys.stderr)
        return 1

    output = args.output or Path(filename)
    output.write_bytes(content)
    print(f"Exported {record_type.value} to {output}")
    return 0


def serve(args: argparse.Namespace, settings: Settings) -> int:
    """Run the API server with uvicorn."""
    import uvicorn

    host = args.host or settings.host
    port = args.port or settings.port
    print(f"Starting {settings.app_name} server on http://{host}:{port}")
    uvicorn.run("venuscms.main:app", host=host, port=port, reload=args.reload)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the venuscms command."""
    parser = build_parser()
    args = parser.parse_args(argv)

    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    settings = get_settings()

    if args.command == "import":
        return asyncio.run(import_file(args, settings))
    elif args.command == "export":
        return asyncio.run(export_file(args, settings))
    else:
        return serve(args, settings)


if __name__ == "__main__":
    sys.exit(main())
