from __future__ import annotations

import logging
from datetime import date, tzinfo
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import day_bounds, now_local, reference_zone, to_display
from ..common.validators import require_entry_status
from ..core.enums import EntryStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError
from ..directory.model import Caller, SiteRef
from ..directory.resolver import IdentitySiteResolver
from ..sync.service import SyncService
from .model import EntryView
from .repository import EntryStore

logger = logging.getLogger(__name__)


def _at_sites(view: EntryView, sites: Sequence[SiteRef], processed: set[int]) -> bool:
    """Whether an entry belongs to one of the filtered sites: by plant, by having
    just been polled there, or by its device location text."""
    if view.entry.entry_id in processed:
        return True
    if view.entry.site_id is not None and view.entry.site_id in {s.site_id for s in sites}:
        return True
    location = (view.entry.location or "").strip().lower()
    return bool(location) and any(location == s.location_label.lower() for s in sites)


def entry_columns(role: Role) -> list[dict]:
    """Column definitions for the approval table."""
    columns = [
        {"field": "photoUrl", "headerName": "Photo", "width": 100, "renderCell": True},
        {"field": "employeeNo", "headerName": "Employee No", "width": 150},
        {"field": "employeeName", "headerName": "Employee Name", "width": 180},
        {"field": "email", "headerName": "Email", "width": 220},
        {"field": "logTime", "headerName": "Entry Time", "width": 180},
        {"field": "location", "headerName": "Location", "width": 150},
        {"field": "status", "headerName": "Status", "width": 120},
    ]
    if role != Role.EMPLOYEE:
        columns.append({"field": "actions", "headerName": "Actions", "width": 150})
    return columns


class EntryService:
    """Role-scoped listing and the PENDING -> APPROVED workflow."""

    def __init__(
        self,
        entries: EntryStore,
        resolver: IdentitySiteResolver,
        sync: Optional[SyncService] = None,
        *,
        tz: Optional[tzinfo] = None,
        clock: Optional[Callable] = None,
    ):
        self._entries = entries
        self._resolver = resolver
        self._sync = sync
        self._tz = tz or reference_zone()
        self._clock = clock or (lambda: now_local(self._tz))

    @staticmethod
    def _require_operator(caller: Caller) -> None:
        if caller.role == Role.EMPLOYEE:
            raise AuthorizationError("You are not authorized to access this resource")

    def format_entry(self, view: EntryView) -> dict:
        e = view.entry
        return {
            "id": e.entry_id,
            "employeeId": e.employee_id,
            "plantId": e.site_id,
            "status": e.status.value,
            "location": e.location,
            "approveTime": e.approved_at.isoformat() if e.approved_at else None,
            "employeeNo": view.employee_no or "N/A",
            "employeeName": view.employee_name or "N/A",
            "email": view.email or "N/A",
            "photoUrl": view.photo_url,
            "logTime": to_display(e.log_time, self._tz),
            "date": e.log_time.astimezone(self._tz).date().isoformat(),
        }

    def list_entries(
        self,
        caller: Caller,
        *,
        day: Optional[date] = None,
        location: Optional[str] = None,
        resync: bool = True,
    ) -> dict:
        """PENDING entries visible to the caller.

        With a day, the caller's sites are re-polled first so late punches show
        up; a single-site caller only ever sees their own plant's entries.
        """
        self._require_operator(caller)
        result = {"entries": [], "columns": entry_columns(caller.role)}

        scope_site_id: Optional[int] = None
        if not caller.is_elevated:
            plant = self._resolver.caller_plant(caller)
            if plant is None:
                logger.info("User %s with role %s has no assigned plant", caller.user_id, caller.role.value)
                return result
            scope_site_id = plant.plant_id

        sites = None
        if location or (day is not None and resync and self._sync is not None):
            sites = self._resolver.resolve_sites(caller)
            if location:
                needle = location.strip().lower()
                sites = [s for s in sites if needle in s.location_label.lower()]

        processed: set[int] = set()
        if day is not None and resync and self._sync is not None and sites:
            logger.info("Processing %d locations for user with role %s", len(sites), caller.role.value)
            report = self._sync.run(day, sites)
            processed = {e.entry_id for s in report.sites for e in s.entries}

        if day is not None:
            start, end = day_bounds(day, self._tz)
            views: Sequence[EntryView] = self._entries.list_views(
                start=start, end=end, site_id=scope_site_id, status=EntryStatus.PENDING
            )
        else:
            views = self._entries.list_views(site_id=scope_site_id, status=EntryStatus.PENDING)

        if location:
            views = [v for v in views if _at_sites(v, sites or [], processed)]

        result["entries"] = [self.format_entry(v) for v in views]
        return result

    def approve(self, entry_id: int, status, *, caller: Optional[Caller] = None) -> dict:
        """Set an entry's status; APPROVED stamps approve time, anything else clears it."""
        target = require_entry_status(status)

        entry = self._entries.get_by_id(int(entry_id))
        if entry is None:
            raise NotFoundError(f"Canteen entry {entry_id} not found")

        if caller is not None:
            self._require_operator(caller)
            if not caller.is_elevated:
                plant = self._resolver.caller_plant(caller)
                if plant is None or entry.site_id != plant.plant_id:
                    raise AuthorizationError("Entry belongs to another plant")

        approved_at = self._clock() if target == EntryStatus.APPROVED else None
        # MySQL reports 0 affected rows when nothing changed; existence was checked above.
        self._entries.set_status(entry_id=entry.entry_id, status=target, approved_at=approved_at)

        view = self._entries.get_view(entry.entry_id)
        if view is None:
            raise NotFoundError(f"Canteen entry {entry_id} not found")
        return self.format_entry(view)
