from __future__ import annotations

from datetime import datetime, tzinfo
from typing import Optional, Sequence, Tuple

from ..common.datetime_utils import as_zone, reference_zone, to_wall_clock
from ..core.enums import EntryStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceEntry, EntryReportRow, EntryView
from .repository import EntryStore

_ENTRY_COLUMNS = "ce.entry_id, ce.employee_id, ce.plant_id, ce.log_time, ce.location, ce.status, ce.approved_at"

_VIEW_SELECT = f"""
    SELECT {_ENTRY_COLUMNS},
           e.employee_no, e.email,
           CONCAT_WS(' ', e.first_name, e.last_name) AS employee_name,
           (SELECT p.url FROM employee_photos p
             WHERE p.employee_id = ce.employee_id
             ORDER BY p.photo_id LIMIT 1) AS photo_url
    FROM canteen_entries ce
    LEFT JOIN employees e ON e.employee_id = ce.employee_id
"""


class MySQLEntryRepository(EntryStore):
    def __init__(self, conn_factory: DatabaseConnection, *, tz: Optional[tzinfo] = None):
        self._conn_factory = conn_factory
        self._tz = tz or reference_zone()

    def _to_entry(self, r: dict) -> AttendanceEntry:
        approved_at = r.get("approved_at")
        return AttendanceEntry(
            entry_id=int(r["entry_id"]),
            employee_id=int(r["employee_id"]),
            site_id=r.get("plant_id"),
            log_time=as_zone(r["log_time"], self._tz),
            location=r.get("location"),
            status=EntryStatus(r["status"]),
            approved_at=as_zone(approved_at, self._tz) if approved_at else None,
        )

    def _to_view(self, r: dict) -> EntryView:
        return EntryView(
            entry=self._to_entry(r),
            employee_no=r.get("employee_no"),
            employee_name=r.get("employee_name"),
            email=r.get("email"),
            photo_url=r.get("photo_url"),
        )

    def insert_if_absent(
        self,
        *,
        employee_id: int,
        site_id: Optional[int],
        log_time: datetime,
        location: Optional[str],
    ) -> Tuple[AttendanceEntry, bool]:
        wall_clock = to_wall_clock(log_time, self._tz)
        with db_cursor(self._conn_factory) as (_, cur):
            # No-op update keeps an existing row untouched; rowcount is 1 only on insert.
            cur.execute(
                """
                INSERT INTO canteen_entries(employee_id, plant_id, log_time, location, status)
                VALUES(%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE entry_id=entry_id
                """,
                (int(employee_id), site_id, wall_clock, location, EntryStatus.PENDING.value),
            )
            created = cur.rowcount == 1

            cur.execute(
                f"""
                SELECT {_ENTRY_COLUMNS}
                FROM canteen_entries ce
                WHERE ce.employee_id=%s AND ce.log_time=%s
                """,
                (int(employee_id), wall_clock),
            )
            r = fetchone(cur)
            return self._to_entry(r), created

    def get_by_id(self, entry_id: int) -> Optional[AttendanceEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_ENTRY_COLUMNS} FROM canteen_entries ce WHERE ce.entry_id=%s", (int(entry_id),))
            r = fetchone(cur)
            return self._to_entry(r) if r else None

    def set_status(self, *, entry_id: int, status: EntryStatus, approved_at: Optional[datetime]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE canteen_entries
                SET status=%s, approved_at=%s
                WHERE entry_id=%s
                """,
                (
                    status.value,
                    to_wall_clock(approved_at, self._tz) if approved_at else None,
                    int(entry_id),
                ),
            )
            return cur.rowcount > 0

    def get_view(self, entry_id: int) -> Optional[EntryView]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_VIEW_SELECT} WHERE ce.entry_id=%s", (int(entry_id),))
            r = fetchone(cur)
            return self._to_view(r) if r else None

    def list_views(
        self,
        *,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        site_id: Optional[int] = None,
        status: Optional[EntryStatus] = None,
    ) -> Sequence[EntryView]:
        clauses = ["1=1"]
        params: list[object] = []

        if start is not None:
            clauses.append("ce.log_time >= %s")
            params.append(to_wall_clock(start, self._tz))
        if end is not None:
            clauses.append("ce.log_time < %s")
            params.append(to_wall_clock(end, self._tz))
        if site_id is not None:
            clauses.append("ce.plant_id=%s")
            params.append(int(site_id))
        if status is not None:
            clauses.append("ce.status=%s")
            params.append(status.value)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_VIEW_SELECT} WHERE {where} ORDER BY ce.log_time DESC", tuple(params))
            return [self._to_view(r) for r in fetchall(cur)]

    def list_report_rows(
        self,
        *,
        start: datetime,
        end: datetime,
        site_id: Optional[int] = None,
    ) -> Sequence[EntryReportRow]:
        clauses = ["ce.log_time >= %s", "ce.log_time < %s"]
        params: list[object] = [to_wall_clock(start, self._tz), to_wall_clock(end, self._tz)]
        if site_id is not None:
            clauses.append("ce.plant_id=%s")
            params.append(int(site_id))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT
                    ce.entry_id, ce.employee_id, ce.plant_id, ce.log_time, ce.status,
                    e.employee_no, e.department,
                    CONCAT_WS(' ', e.first_name, e.last_name) AS employee_name,
                    pl.name AS plant_name, pl.plant_code
                FROM canteen_entries ce
                JOIN employees e ON e.employee_id = ce.employee_id
                LEFT JOIN plants pl ON pl.plant_id = ce.plant_id
                WHERE {where}
                ORDER BY ce.log_time ASC, ce.employee_id ASC
                """,
                tuple(params),
            )
            rows = fetchall(cur)

            return [
                EntryReportRow(
                    entry_id=int(r["entry_id"]),
                    employee_id=int(r["employee_id"]),
                    employee_no=r.get("employee_no") or "",
                    employee_name=r.get("employee_name") or "",
                    department=r.get("department"),
                    site_id=r.get("plant_id"),
                    plant_name=r.get("plant_name"),
                    plant_code=r.get("plant_code"),
                    log_time=as_zone(r["log_time"], self._tz),
                    status=EntryStatus(r["status"]),
                )
                for r in rows
            ]
