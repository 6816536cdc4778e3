"""Exceptions raised by the import/export pipeline."""

from venuscms.schemas.import_schemas import TableIssue


class ImportServiceError(Exception):
    """Base class for import pipeline errors."""


class InputRejectedError(ImportServiceError):
    """Raised when an upload has the wrong type or is too large."""

    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message)
        self.status_code = status_code


class EmptyInputError(ImportServiceError, ValueError):
    """Raised when the input has no parseable content."""


class ImportBlockedError(ImportServiceError):
    """Raised when validation found error-severity issues."""

    def __init__(self, issues: list[TableIssue]) -> None:
        self.issues = [issue for issue in issues if issue.is_error]
        super().__init__(
            f"Found {len(self.issues)} critical errors. Please fix them before importing."
        )


class EmptyExportError(ImportServiceError):
    """Raised when no records are left to export after filtering."""
