from __future__ import annotations

import logging
from typing import Optional, Tuple

from ..directory.model import EmployeeRef, SiteRef
from ..punches.model import PunchEvent
from .model import AttendanceEntry
from .repository import EntryStore

logger = logging.getLogger(__name__)

_NOT_A_LOCATION = {"nan", "null", "none", "undefined"}


def clean_location(value: Optional[str]) -> Optional[str]:
    """Raw location text, or None when the device sent nothing usable."""
    text = (value or "").strip()
    if not text or text.lower() in _NOT_A_LOCATION:
        return None
    return text


class ReconciliationStore:
    """The single write path from punch events to canteen entries.

    Devices are re-polled for the same day many times, so every punch arrives
    repeatedly; only the first arrival per (employee, time) creates a row. The
    unique key in storage is what makes concurrent passes safe.
    """

    def __init__(self, entries: EntryStore):
        self._entries = entries

    def upsert(
        self,
        employee: EmployeeRef,
        event: PunchEvent,
        site: Optional[SiteRef] = None,
    ) -> Tuple[AttendanceEntry, bool]:
        entry, created = self._entries.insert_if_absent(
            employee_id=employee.employee_id,
            site_id=site.site_id if site else None,
            log_time=event.normalized_time,
            location=clean_location(event.location_label),
        )
        if created:
            logger.info("Created canteen entry for employee %s at %s", employee.worker_code, event.normalized_time)
        return entry, created

    def reconcile(
        self,
        employee: EmployeeRef,
        event: PunchEvent,
        site: Optional[SiteRef] = None,
    ) -> AttendanceEntry:
        entry, _ = self.upsert(employee, event, site)
        return entry
