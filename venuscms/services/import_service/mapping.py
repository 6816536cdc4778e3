"""Column mapping functions for content imports."""

import logging
from collections.abc import Sequence

from venuscms.schemas.import_schemas import FieldMapping, RecordType

from .constants import FIELD_REGISTRY

logger = logging.getLogger(__name__)


def default_mapping(record_type: RecordType) -> list[FieldMapping]:
    """Build the unassigned mapping set for a record type.

    Args:
        record_type: Target record type.

    Returns:
        Fresh FieldMapping objects, one per registered field, none mapped.
    """
    return [
        FieldMapping(logical_field=spec.logical_field, required=spec.required, shape=spec.shape)
        for spec in FIELD_REGISTRY[record_type]
    ]


def _headers_match(header: str, logical_field: str) -> bool:
    header_lower = header.lower()
    field_lower = logical_field.lower()
    return field_lower in header_lower or header_lower in field_lower


def auto_assign(mapping: Sequence[FieldMapping], headers: Sequence[str]) -> list[FieldMapping]:
    """Suggest a source column for every unmapped field.

    Uses a case-insensitive substring match in either direction; the first
    matching header wins. Fields that already have a column keep it.

    Args:
        mapping: Current mapping set.
        headers: Column headers from the uploaded table.

    Returns:
        New mapping set with suggestions filled in.
    """
    assigned: list[FieldMapping] = []
    for entry in mapping:
        if entry.is_mapped:
            assigned.append(entry.model_copy())
            continue

        column = next(
            (h for h in headers if h.strip() and _headers_match(h.strip(), entry.logical_field)),
            "",
        )
        if column:
            logger.debug("Auto-mapped column '%s' -> '%s'", column, entry.logical_field)
        assigned.append(entry.model_copy(update={"source_column": column}))
    return assigned


def check_mapping(mapping: Sequence[FieldMapping], record_type: RecordType) -> None:
    """Check that a user-edited mapping only names known fields, once each.

    Raises:
        ValueError: On an unknown or duplicated logical field.
    """
    known = {spec.logical_field for spec in FIELD_REGISTRY[record_type]}
    seen: set[str] = set()
    for entry in mapping:
        if entry.logical_field not in known:
            raise ValueError(
                f"Unknown field '{entry.logical_field}' for {record_type.value}"
            )
        if entry.logical_field in seen:
            raise ValueError(f"Field '{entry.logical_field}' is mapped more than once")
        seen.add(entry.logical_field)


def merge_user_mapping(mapping: Sequence[FieldMapping], record_type: RecordType) -> list[FieldMapping]:
    """Apply user-chosen source columns to the registered mapping set.

    Only source_column is taken from the user; required and shape always
    come from the registry, and fields the user left out stay unmapped.

    Raises:
        ValueError: On an unknown or duplicated logical field.
    """
    check_mapping(mapping, record_type)
    chosen = {entry.logical_field: entry.source_column.strip() for entry in mapping}
    return [
        entry.model_copy(update={"source_column": chosen.get(entry.logical_field, "")})
        for entry in default_mapping(record_type)
    ]
