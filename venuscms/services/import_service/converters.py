"""Cell parsing and row coercion for content imports."""

import math
import re
from collections.abc import Sequence
from datetime import date, datetime, timezone
from typing import Any

from venuscms.schemas.import_schemas import FieldMapping, FieldShape

from .constants import BOOLEAN_TRUE_VALUES, BOOLEAN_VALUES, DATE_FORMATS, LIST_SEPARATOR

INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")
DECIMAL_PATTERN = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


def parse_number(value: str) -> int | float | None:
    """Parse a finite ASCII decimal number, keeping integer literals as int."""
    cleaned = value.strip()
    if not DECIMAL_PATTERN.fullmatch(cleaned):
        return None
    number = float(cleaned)
    if not math.isfinite(number):
        return None
    if INTEGER_PATTERN.fullmatch(cleaned):
        try:
            return int(cleaned)
        except ValueError:
            # Over the interpreter's int digit limit
            return number
    return number


def is_boolean_text(value: str) -> bool:
    """Check a cell against the accepted boolean vocabulary."""
    return value.strip().lower() in BOOLEAN_VALUES


def parse_date(value: str) -> date | None:
    """Parse a calendar date from ISO 8601 or one of DATE_FORMATS."""
    cleaned = value.strip()
    if not cleaned:
        return None
    try:
        return date.fromisoformat(cleaned)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(cleaned.replace("Z", "+00:00")).date()
    except ValueError:
        pass
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(cleaned, fmt).date()
        except ValueError:
            continue
    return None


def _coerce_number(value: str) -> int | float:
    number = parse_number(value)
    return 0 if number is None else number


def _coerce_boolean(value: str) -> bool:
    return value.strip().lower() in BOOLEAN_TRUE_VALUES


def _coerce_string_list(value: str) -> list[str]:
    return [part.strip() for part in value.split(LIST_SEPARATOR) if part.strip()]


def _coerce_date(value: str) -> date:
    return parse_date(value) or datetime.now(timezone.utc).date()


def coerce_value(raw: str | None, shape: FieldShape) -> Any:
    """Convert a raw cell to the field's shape. Never raises.

    Missing or unparseable input falls back to "", 0, False, [] or today.
    """
    value = raw or ""
    if shape == FieldShape.NUMBER:
        return _coerce_number(value)
    if shape == FieldShape.BOOLEAN:
        return _coerce_boolean(value)
    if shape == FieldShape.STRING_LIST:
        return _coerce_string_list(value)
    if shape == FieldShape.DATE:
        return _coerce_date(value)
    return value


def coerce_row(
    row: Sequence[str],
    headers: Sequence[str],
    mapping: Sequence[FieldMapping],
) -> dict[str, Any]:
    """Turn one table row into a candidate record.

    Fields without a source column, or whose column is not among the
    headers, are left out for the record defaults or backend to fill.

    Args:
        row: Cells of the row.
        headers: Table headers.
        mapping: Mapping set.

    Returns:
        Candidate record keyed by logical field.
    """
    positions: dict[str, int] = {}
    for index, header in enumerate(headers):
        positions.setdefault(header, index)

    candidate: dict[str, Any] = {}
    for entry in mapping:
        if not entry.is_mapped or entry.source_column not in positions:
            continue
        index = positions[entry.source_column]
        raw = row[index] if index < len(row) else None
        candidate[entry.logical_field] = coerce_value(raw, entry.shape)
    return candidate
