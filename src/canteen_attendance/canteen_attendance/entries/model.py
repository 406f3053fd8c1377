from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import EntryStatus


@dataclass(frozen=True)
class AttendanceEntry:
    """Persisted canteen entry. (employee_id, log_time) is unique."""

    entry_id: int
    employee_id: int
    site_id: Optional[int]
    log_time: datetime
    location: Optional[str]
    status: EntryStatus
    approved_at: Optional[datetime] = None


@dataclass(frozen=True)
class EntryView:
    """Read-model for the approval screen: entry joined with employee identity."""

    entry: AttendanceEntry
    employee_no: Optional[str]
    employee_name: Optional[str]
    email: Optional[str] = None
    photo_url: Optional[str] = None


@dataclass(frozen=True)
class EntryReportRow:
    """Read-model for site-grouped reports."""

    entry_id: int
    employee_id: int
    employee_no: str
    employee_name: str
    department: Optional[str]
    site_id: Optional[int]
    plant_name: Optional[str]
    plant_code: Optional[str]
    log_time: datetime
    status: EntryStatus
