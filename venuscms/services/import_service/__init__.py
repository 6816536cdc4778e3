"""Import service package for parsing CSV content and creating records."""

from .constants import (
    ALL_PAGES,
    FIELD_REGISTRY,
    IMPORT_TARGET_PAGES,
    MAX_UPLOAD_BYTES,
    RECORD_DEFAULTS,
    FieldSpec,
)
from .converters import coerce_row, coerce_value, is_boolean_text, parse_date, parse_number
from .errors import (
    EmptyExportError,
    EmptyInputError,
    ImportBlockedError,
    ImportServiceError,
    InputRejectedError,
)
from .mapping import auto_assign, check_mapping, default_mapping, merge_user_mapping
from .parsers import check_upload, decode_csv_bytes, parse_csv, parse_csv_text
from .processor import apply_record_defaults, run_import
from .validation import count_by_severity, has_blocking_errors, summarize_rows, validate_table

__all__ = [
    # Constants
    "ALL_PAGES",
    "FIELD_REGISTRY",
    "IMPORT_TARGET_PAGES",
    "MAX_UPLOAD_BYTES",
    "RECORD_DEFAULTS",
    "FieldSpec",
    # Errors
    "EmptyExportError",
    "EmptyInputError",
    "ImportBlockedError",
    "ImportServiceError",
    "InputRejectedError",
    # Parsers
    "check_upload",
    "decode_csv_bytes",
    "parse_csv",
    "parse_csv_text",
    # Mapping
    "auto_assign",
    "check_mapping",
    "default_mapping",
    "merge_user_mapping",
    # Validation
    "count_by_severity",
    "has_blocking_errors",
    "summarize_rows",
    "validate_table",
    # Converters
    "coerce_row",
    "coerce_value",
    "is_boolean_text",
    "parse_date",
    "parse_number",
    # Processor
    "apply_record_defaults",
    "run_import",
]
