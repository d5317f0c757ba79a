import re
from dataclasses import dataclass
from typing import List, Optional, Dict, Any

EDITABLE_FIELDS = ("title", "author", "genre", "year")
YEAR_PATTERN = re.compile(r"^\d{1,4}$")


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str


def normalize_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
    """Keep only editable fields, trimmed; blank optional values become None."""
    cleaned: Dict[str, Any] = {}
    for name in EDITABLE_FIELDS:
        if name not in fields:
            continue
        value = fields[name]
        if isinstance(value, str):
            value = value.strip()
        if name in ("genre", "year") and value in ("", None):
            value = None
        cleaned[name] = value
    return cleaned


def validate_fields(fields: Dict[str, Any]) -> List[FieldError]:
    """Check a complete set of book fields. Returns one error per invalid field."""
    errors: List[FieldError] = []
    if not str(fields.get("title") or "").strip():
        errors.append(FieldError("title", 'Please provide a value for "Title"'))
    if not str(fields.get("author") or "").strip():
        errors.append(FieldError("author", 'Please provide a value for "Author"'))
    year = fields.get("year")
    if year is not None and not YEAR_PATTERN.match(str(year).strip()):
        errors.append(FieldError("year", 'Please provide a valid year for "Year"'))
    return errors


def year_value(year: Any) -> Optional[int]:
    return int(year) if year is not None else None
