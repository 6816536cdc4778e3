"""Upload checks and CSV parsing for content imports."""

import logging

from venuscms.schemas.import_schemas import ParseIssue, RawTable, Severity

from .constants import ALLOWED_CONTENT_TYPES, ALLOWED_EXTENSIONS, MAX_UPLOAD_BYTES
from .errors import EmptyInputError, InputRejectedError

logger = logging.getLogger(__name__)


def check_upload(
    filename: str | None,
    content_type: str | None,
    size: int | None = None,
    max_bytes: int = MAX_UPLOAD_BYTES,
) -> None:
    """Reject uploads that are not CSV or exceed the size limit.

    Args:
        filename: Client-supplied file name.
        content_type: Client-supplied MIME type (parameters are ignored).
        size: Size in bytes, if known.
        max_bytes: Upper size limit.

    Raises:
        InputRejectedError: With status 400 for a wrong type, 413 for size.
    """
    name = (filename or "").lower()
    mime = (content_type or "").split(";", 1)[0].strip().lower()
    if not any(name.endswith(ext) for ext in ALLOWED_EXTENSIONS) and mime not in ALLOWED_CONTENT_TYPES:
        raise InputRejectedError("Please select a CSV file", status_code=400)

    if size is not None and size > max_bytes:
        limit_mb = max_bytes // (1024 * 1024)
        raise InputRejectedError(f"File size must be less than {limit_mb}MB", status_code=413)


def decode_csv_bytes(file_content: bytes) -> str:
    """Decode uploaded CSV bytes, trying UTF-8 (with or without BOM) then Latin-1."""
    try:
        return file_content.decode("utf-8-sig")
    except UnicodeDecodeError:
        logger.debug("CSV is not valid UTF-8, falling back to Latin-1")
        return file_content.decode("latin-1")


def _split_header(line: str) -> list[str]:
    return [name.strip().strip('"').strip() for name in line.split(",")]


def _split_row(line: str) -> tuple[list[str], bool]:
    """Split one line into trimmed fields.

    Returns:
        Tuple of (fields, closed) where closed is False if the line ended
        inside a quoted field.
    """
    values: list[str] = []
    current: list[str] = []
    in_quotes = False
    i = 0
    while i < len(line):
        char = line[i]
        if char == '"':
            if in_quotes and i + 1 < len(line) and line[i + 1] == '"':
                current.append('"')
                i += 1
            else:
                in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            values.append("".join(current).strip())
            current = []
        else:
            current.append(char)
        i += 1
    values.append("".join(current).strip())
    return values, not in_quotes


def parse_csv_text(text: str, max_rows: int | None = None) -> RawTable:
    """Parse CSV text into a RawTable.

    The first non-blank line is the header. Blank lines are skipped and not
    counted. Rows whose field count differs from the header are kept with a
    warning; rows ending inside a quoted field are kept with an error.

    Args:
        text: Raw CSV text.
        max_rows: Optional limit on stored rows.

    Returns:
        The parsed table.

    Raises:
        EmptyInputError: If the text has no content.
    """
    if not text.strip():
        raise EmptyInputError("CSV file is empty")

    lines = (line.rstrip("\r") for line in text.split("\n"))
    content_lines = (line for line in lines if line.strip())

    headers = _split_header(next(content_lines))
    rows: list[tuple[str, ...]] = []
    issues: list[ParseIssue] = []
    truncated = False

    for line in content_lines:
        if max_rows is not None and len(rows) >= max_rows:
            truncated = True
            break

        row_index = len(rows) + 1
        values, closed = _split_row(line)

        if not closed:
            issues.append(ParseIssue(
                row_index=row_index,
                message="Failed to parse row: unterminated quoted field",
                severity=Severity.ERROR,
            ))
        if len(values) != len(headers):
            issues.append(ParseIssue(
                row_index=row_index,
                message=f"Expected {len(headers)} columns, found {len(values)}",
                severity=Severity.WARNING,
            ))

        rows.append(tuple(values))

    if truncated:
        issues.append(ParseIssue(
            row_index=0,
            message=f"Row limit of {max_rows} reached; remaining rows were not loaded",
            severity=Severity.WARNING,
        ))
        logger.info("CSV truncated at %d rows", max_rows)

    return RawTable(headers=tuple(headers), rows=tuple(rows), issues=tuple(issues))


def parse_csv(file_content: bytes, max_rows: int | None = None) -> RawTable:
    """Decode and parse uploaded CSV bytes.

    Raises:
        EmptyInputError: If the file has no content.
    """
    return parse_csv_text(decode_csv_bytes(file_content), max_rows=max_rows)
