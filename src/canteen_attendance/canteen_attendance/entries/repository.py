from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence, Tuple

from ..core.enums import EntryStatus
from .model import AttendanceEntry, EntryReportRow, EntryView


class EntryStore(Protocol):
    def insert_if_absent(
        self,
        *,
        employee_id: int,
        site_id: Optional[int],
        log_time: datetime,
        location: Optional[str],
    ) -> Tuple[AttendanceEntry, bool]:
        """Create a PENDING entry unless (employee_id, log_time) exists.

        Returns (entry, created). An existing entry comes back unchanged.
        """

        raise NotImplementedError

    def get_by_id(self, entry_id: int) -> Optional[AttendanceEntry]:
        raise NotImplementedError

    def set_status(self, *, entry_id: int, status: EntryStatus, approved_at: Optional[datetime]) -> bool:
        raise NotImplementedError

    def get_view(self, entry_id: int) -> Optional[EntryView]:
        raise NotImplementedError

    def list_views(
        self,
        *,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        site_id: Optional[int] = None,
        status: Optional[EntryStatus] = None,
    ) -> Sequence[EntryView]:
        """Entries with start <= log_time < end, newest first."""

        raise NotImplementedError

    def list_report_rows(
        self,
        *,
        start: datetime,
        end: datetime,
        site_id: Optional[int] = None,
    ) -> Sequence[EntryReportRow]:
        raise NotImplementedError
