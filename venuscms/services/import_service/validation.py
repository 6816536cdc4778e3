"""Validation of parsed tables against a mapping set."""

from collections.abc import Sequence

from venuscms.schemas.import_schemas import (
    FieldMapping,
    FieldShape,
    RawTable,
    Severity,
    TableIssue,
    ValidationIssue,
)

from .converters import is_boolean_text, parse_date, parse_number


def _check_shape(value: str, entry: FieldMapping, row_index: int) -> ValidationIssue | None:
    """Check a non-blank cell against the field's declared shape."""
    if entry.shape == FieldShape.NUMBER and parse_number(value) is None:
        return ValidationIssue(
            row_index=row_index,
            column=entry.source_column,
            message=f"Invalid number format: '{value}'",
            severity=Severity.ERROR,
        )
    if entry.shape == FieldShape.BOOLEAN and not is_boolean_text(value):
        return ValidationIssue(
            row_index=row_index,
            column=entry.source_column,
            message=f"Invalid boolean format: '{value}'. Use true/false, 1/0, or yes/no",
            severity=Severity.WARNING,
        )
    if entry.shape == FieldShape.DATE and parse_date(value) is None:
        return ValidationIssue(
            row_index=row_index,
            column=entry.source_column,
            message=f"Invalid date format: '{value}'",
            severity=Severity.ERROR,
        )
    return None


def validate_table(table: RawTable, mapping: Sequence[FieldMapping]) -> list[TableIssue]:
    """Validate every row of a table against a mapping set.

    Parse issues are carried over first. A required field with no usable
    column yields one error for the whole table rather than one per row.

    Args:
        table: Parsed table.
        mapping: Mapping set to validate against.

    Returns:
        All issues, parse issues first.
    """
    issues: list[TableIssue] = list(table.issues)

    resolved: list[FieldMapping] = []
    for entry in mapping:
        if table.column_index(entry.source_column) is not None:
            resolved.append(entry)
        elif entry.required:
            label = entry.source_column or entry.logical_field
            issues.append(ValidationIssue(
                row_index=0,
                column="general",
                message=f"Required column '{label}' not found",
                severity=Severity.ERROR,
            ))

    for position, row in enumerate(table.rows, start=1):
        for entry in resolved:
            value = table.cell(row, entry.source_column) or ""
            if not value.strip():
                if entry.required:
                    issues.append(ValidationIssue(
                        row_index=position,
                        column=entry.source_column,
                        message=f"Required field '{entry.logical_field}' is empty",
                        severity=Severity.ERROR,
                    ))
                continue

            issue = _check_shape(value, entry, position)
            if issue is not None:
                issues.append(issue)

    return issues


def has_blocking_errors(issues: Sequence[TableIssue]) -> bool:
    """True iff any issue has error severity."""
    return any(issue.is_error for issue in issues)


def count_by_severity(issues: Sequence[TableIssue]) -> tuple[int, int]:
    """Return (error_count, warning_count)."""
    errors = sum(1 for issue in issues if issue.is_error)
    return errors, len(issues) - errors


def summarize_rows(table: RawTable, issues: Sequence[TableIssue]) -> tuple[int, int]:
    """Return (valid_rows, invalid_rows), where invalid rows have any issue."""
    flagged = {issue.row_index for issue in issues if issue.row_index > 0}
    invalid = len(flagged)
    return table.row_count - invalid, invalid
