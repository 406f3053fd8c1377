from __future__ import annotations

from datetime import date
from typing import Optional

from ..core.enums import EntryStatus
from ..core.exceptions import ValidationError
from .datetime_utils import ISO_DATE_RE, parse_iso_date


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_iso_date(value, field_name: str = "date") -> date:
    if isinstance(value, date):
        return value
    text = (value or "").strip()
    if not ISO_DATE_RE.match(text):
        raise ValidationError(f"Invalid {field_name} format. Use YYYY-MM-DD")
    try:
        return parse_iso_date(text)
    except ValueError:
        raise ValidationError(f"Invalid {field_name}: {text}")


def optional_iso_date(value, field_name: str = "date") -> Optional[date]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return require_iso_date(value, field_name)


def require_entry_status(value) -> EntryStatus:
    text = (value or "").strip().upper() if isinstance(value, str) else value
    try:
        return EntryStatus(text)
    except ValueError:
        raise ValidationError("Invalid status. Must be 'PENDING' or 'APPROVED'")
