"""Constants and declarative tables for content imports."""

import uuid
from datetime import date, datetime, timezone
from typing import Any, Callable, NamedTuple

from venuscms.schemas.import_schemas import FieldShape, RecordType

# Uploads are accepted by extension or by content type
ALLOWED_EXTENSIONS = {".csv"}
ALLOWED_CONTENT_TYPES = {"text/csv"}
MAX_UPLOAD_BYTES = 10 * 1024 * 1024

# Boolean vocabulary (lowercase)
BOOLEAN_TRUE_VALUES = {"true", "1", "yes"}
BOOLEAN_VALUES = BOOLEAN_TRUE_VALUES | {"false", "0", "no"}

# Cell separator for string-list fields on import, and the joiner on export
LIST_SEPARATOR = ";"
EXPORT_LIST_SEPARATOR = "; "

# Non-ISO date layouts accepted in date cells (ISO 8601 is always tried first)
DATE_FORMATS = [
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%m-%d-%Y",
    "%d %b %Y",
    "%d %B %Y",
    "%b %d, %Y",
    "%B %d, %Y",
    "%b %d %Y",
    "%B %d %Y",
]


class FieldSpec(NamedTuple):
    """Declaration of one importable field."""

    logical_field: str
    required: bool
    shape: FieldShape


# Record type -> importable fields, in display order
FIELD_REGISTRY: dict[RecordType, tuple[FieldSpec, ...]] = {
    RecordType.DOCUMENT: (
        FieldSpec("title", True, FieldShape.STRING),
        FieldSpec("content", True, FieldShape.STRING),
        FieldSpec("category", True, FieldShape.STRING),
        FieldSpec("tags", False, FieldShape.STRING_LIST),
        FieldSpec("author", False, FieldShape.STRING),
        FieldSpec("isPublished", False, FieldShape.BOOLEAN),
        FieldSpec("createdAt", False, FieldShape.DATE),
        FieldSpec("updatedAt", False, FieldShape.DATE),
    ),
    RecordType.UPDATE_LOG: (
        FieldSpec("version", True, FieldShape.STRING),
        FieldSpec("title", True, FieldShape.STRING),
        FieldSpec("description", False, FieldShape.STRING),
        FieldSpec("content", True, FieldShape.STRING),
        FieldSpec("date", True, FieldShape.DATE),
        FieldSpec("tags", False, FieldShape.STRING_LIST),
        FieldSpec("isPublished", False, FieldShape.BOOLEAN),
    ),
}


def _today() -> date:
    return datetime.now(timezone.utc).date()


def _new_id() -> str:
    return str(uuid.uuid4())


def _default_metrics() -> dict[str, Any]:
    return {
        "performanceImprovement": "0%",
        "userSatisfaction": "0%",
        "bugReports": 0,
    }


# Record type -> field -> factory for values the backend expects.
# Applied when the candidate's value is missing or empty.
RECORD_DEFAULTS: dict[RecordType, dict[str, Callable[[], Any]]] = {
    RecordType.DOCUMENT: {
        "id": _new_id,
        "createdAt": _today,
        "updatedAt": _today,
        "author": lambda: "Admin",
    },
    RecordType.UPDATE_LOG: {
        "id": _new_id,
        "version": lambda: "v1.0.0",
        "title": lambda: "Untitled Update",
        "content": lambda: "",
        "date": _today,
        "tags": list,
        "technicalDetails": list,
        "bugFixes": list,
        "screenshots": list,
        "metrics": _default_metrics,
    },
}

# Flags defaulted only when absent, so an explicit False from the CSV survives
RECORD_FLAG_DEFAULTS: dict[RecordType, dict[str, bool]] = {
    RecordType.DOCUMENT: {"isPublished": False},
    RecordType.UPDATE_LOG: {"isPublished": False},
}

# Pages a document import can be targeted at (id -> display name)
IMPORT_TARGET_PAGES: dict[str, str] = {
    "accessory": "Accessory",
    "decoratebromide": "Decorate Bromide",
    "event": "Event",
    "festival": "Festival",
    "gacha": "Gacha",
    "girllist": "Girl List",
    "memories": "Memories",
    "ownerroom": "Owner Room",
    "shop": "Shop",
    "skill": "Skill",
}
ALL_PAGES = "all"

# Record keys consulted by the export date-range filter, in order
RECORD_DATE_FIELDS = ("createdAt", "date")
