from __future__ import annotations

from calendar import monthrange
from dataclasses import dataclass, field
from datetime import date, tzinfo
from typing import Optional

from ..common.datetime_utils import day_bounds, reference_zone, to_display, today_local
from ..core.exceptions import ValidationError
from ..directory.model import Caller
from ..directory.resolver import IdentitySiteResolver
from ..entries.model import EntryReportRow
from ..entries.repository import EntryStore

UNASSIGNED = "N/A"


@dataclass(frozen=True)
class SiteReport:
    from_date: date
    to_date: date
    sites: list[dict] = field(default_factory=list)
    total: int = 0

    def as_dict(self) -> dict:
        return {
            "period": {"fromDate": self.from_date.isoformat(), "toDate": self.to_date.isoformat()},
            "total": self.total,
            "sites": self.sites,
        }


def _shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def monthly_period(months: int, today: date) -> tuple[date, date]:
    """0 = the current month; n > 0 = the n full months before it."""
    if months < 0:
        raise ValidationError("Month parameter must be 0 or a positive integer")
    if months == 0:
        return today.replace(day=1), today.replace(day=monthrange(today.year, today.month)[1])

    end_y, end_m = _shift_month(today.year, today.month, -1)
    start_y, start_m = _shift_month(today.year, today.month, -months)
    return date(start_y, start_m, 1), date(end_y, end_m, monthrange(end_y, end_m)[1])


class EntryReportService:
    def __init__(self, entries: EntryStore, resolver: IdentitySiteResolver, *, tz: Optional[tzinfo] = None):
        self._entries = entries
        self._resolver = resolver
        self._tz = tz or reference_zone()

    def _scope(self, caller: Optional[Caller]) -> tuple[bool, Optional[int]]:
        """(visible, site_id filter) for a caller; None caller means system-wide."""
        if caller is None or caller.is_elevated:
            return True, None
        plant = self._resolver.caller_plant(caller)
        if plant is None:
            return False, None
        return True, plant.plant_id

    def _rows(self, caller: Optional[Caller], start: date, end: date) -> list[EntryReportRow]:
        visible, site_id = self._scope(caller)
        if not visible:
            return []
        range_start, _ = day_bounds(start, self._tz)
        _, range_end = day_bounds(end, self._tz)
        return list(self._entries.list_report_rows(start=range_start, end=range_end, site_id=site_id))

    def _row_dict(self, r: EntryReportRow) -> dict:
        return {
            "id": r.entry_id,
            "date": r.log_time.astimezone(self._tz).date().isoformat(),
            "employeeNo": r.employee_no,
            "employeeName": r.employee_name,
            "department": r.department or UNASSIGNED,
            "plantName": r.plant_name or UNASSIGNED,
            "plantCode": r.plant_code or UNASSIGNED,
            "logTime": to_display(r.log_time, self._tz),
            "status": r.status.value,
            "quantity": 1,
        }

    def build_site_report(self, caller: Optional[Caller], *, from_date: date, to_date: Optional[date] = None) -> SiteReport:
        """Entries in [from_date, to_date] (a single day when to_date is omitted), grouped by plant code."""
        to_date = to_date or from_date
        if to_date < from_date:
            raise ValidationError("To date must not be before from date")

        groups: dict[str, dict] = {}
        total = 0
        for r in self._rows(caller, from_date, to_date):
            code = r.plant_code or UNASSIGNED
            g = groups.get(code)
            if not g:
                g = {"plantCode": code, "plantName": r.plant_name or UNASSIGNED, "total": 0, "entries": []}
                groups[code] = g
            g["entries"].append(self._row_dict(r))
            g["total"] += 1
            total += 1

        sites = sorted(groups.values(), key=lambda g: g["plantCode"])
        return SiteReport(from_date=from_date, to_date=to_date, sites=sites, total=total)

    def build_monthly_report(self, caller: Optional[Caller], *, months: int = 0, today: Optional[date] = None) -> dict:
        months = int(months)
        from_date, to_date = monthly_period(months, today or today_local(self._tz))
        rows = [self._row_dict(r) for r in self._rows(caller, from_date, to_date)]

        plant_counts: dict[str, int] = {}
        department_counts: dict[str, int] = {}
        date_counts: dict[str, int] = {}
        for row in rows:
            plant_counts[row["plantName"]] = plant_counts.get(row["plantName"], 0) + 1
            department_counts[row["department"]] = department_counts.get(row["department"], 0) + 1
            date_counts[row["date"]] = date_counts.get(row["date"], 0) + 1

        if months == 0:
            report_type = "Current Month"
        elif months == 1:
            report_type = "Previous Month"
        else:
            report_type = f"Last {months} Months"

        return {
            "reportType": report_type,
            "period": {"fromDate": from_date.isoformat(), "toDate": to_date.isoformat()},
            "entries": rows,
            "summary": {
                "reportPeriod": f"{from_date.isoformat()} to {to_date.isoformat()}",
                "totalEntries": len(rows),
                "totalEmployees": len({row["employeeNo"] for row in rows}),
                "plantWiseCounts": plant_counts,
                "departmentWiseCounts": department_counts,
                "dateWiseCounts": date_counts,
            },
        }
