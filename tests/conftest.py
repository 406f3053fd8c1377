from __future__ import annotations

from typing import Optional

import pytest

from src.canteen_attendance.canteen_attendance.common.datetime_utils import reference_zone
from src.canteen_attendance.canteen_attendance.container import assemble_container
from src.canteen_attendance.canteen_attendance.core.enums import EntryStatus
from src.canteen_attendance.canteen_attendance.core.exceptions import StorageError
from src.canteen_attendance.canteen_attendance.device.model import DeviceInfo
from src.canteen_attendance.canteen_attendance.directory.model import DeviceLocation, EmployeeRef, Plant
from src.canteen_attendance.canteen_attendance.entries.model import AttendanceEntry, EntryReportRow, EntryView

IST = reference_zone("Asia/Kolkata")


class InMemoryEmployees:
    def __init__(self, employees=(), *, details=None):
        self._by_code = {e.worker_code: e for e in employees}
        # employee_id -> {"email": ..., "department": ..., "photo_url": ...}
        self.details = dict(details or {})
        self.fail_for: set[str] = set()

    def get_by_worker_code(self, worker_code):
        if worker_code in self.fail_for:
            raise StorageError("simulated lookup failure")
        return self._by_code.get(worker_code)

    def by_id(self, employee_id) -> Optional[EmployeeRef]:
        for e in self._by_code.values():
            if e.employee_id == employee_id:
                return e
        return None


class InMemoryPlants:
    def __init__(self, plants=()):
        self._plants = list(plants)

    def get_by_id(self, plant_id):
        return next((p for p in self._plants if p.plant_id == int(plant_id)), None)

    def get_by_location(self, location):
        key = (location or "").strip().lower()
        return next((p for p in self._plants if (p.location or "").strip().lower() == key), None)

    def get_headed_by(self, user_id):
        return next((p for p in self._plants if p.plant_head_id == int(user_id)), None)


class InMemoryLocations:
    def __init__(self, rows=()):
        self._rows = {r.location_id: r for r in rows}
        self._next_id = max(self._rows, default=0) + 1

    def list_all(self):
        return [self._rows[k] for k in sorted(self._rows)]

    def get_by_id(self, location_id):
        return self._rows.get(int(location_id))

    def create(self, *, device_name, serial_number, location_label):
        location_id = self._next_id
        self._next_id += 1
        self._rows[location_id] = DeviceLocation(location_id, device_name, serial_number, location_label)
        return location_id

    def update(self, *, location_id, device_name, serial_number, location_label):
        if location_id not in self._rows:
            return False
        self._rows[location_id] = DeviceLocation(location_id, device_name, serial_number, location_label)
        return True

    def delete(self, *, location_id):
        return self._rows.pop(int(location_id), None) is not None


class InMemoryEntries:
    """EntryStore keyed on (employee_id, log_time) like the unique index."""

    def __init__(self, employees: InMemoryEmployees, plants: InMemoryPlants):
        self._employees = employees
        self._plants = plants
        self._rows: dict[int, AttendanceEntry] = {}
        self._keys: dict[tuple, int] = {}
        self._next_id = 1
        self.fail_for: set[int] = set()

    def insert_if_absent(self, *, employee_id, site_id, log_time, location):
        if employee_id in self.fail_for:
            raise StorageError("simulated write failure")

        key = (employee_id, log_time)
        if key in self._keys:
            return self._rows[self._keys[key]], False

        entry = AttendanceEntry(
            entry_id=self._next_id,
            employee_id=employee_id,
            site_id=site_id,
            log_time=log_time,
            location=location,
            status=EntryStatus.PENDING,
        )
        self._rows[entry.entry_id] = entry
        self._keys[key] = entry.entry_id
        self._next_id += 1
        return entry, True

    def add(self, *, employee_id, site_id, log_time, location=None, status=EntryStatus.PENDING):
        entry, _ = self.insert_if_absent(employee_id=employee_id, site_id=site_id, log_time=log_time, location=location)
        if status != EntryStatus.PENDING:
            self.set_status(entry_id=entry.entry_id, status=status, approved_at=log_time)
        return self._rows[entry.entry_id]

    def all(self):
        return list(self._rows.values())

    def get_by_id(self, entry_id):
        return self._rows.get(int(entry_id))

    def set_status(self, *, entry_id, status, approved_at):
        entry = self._rows.get(int(entry_id))
        if entry is None:
            return False
        self._rows[entry.entry_id] = AttendanceEntry(
            entry_id=entry.entry_id,
            employee_id=entry.employee_id,
            site_id=entry.site_id,
            log_time=entry.log_time,
            location=entry.location,
            status=status,
            approved_at=approved_at,
        )
        return True

    def _view(self, entry):
        employee = self._employees.by_id(entry.employee_id)
        details = self._employees.details.get(entry.employee_id, {})
        return EntryView(
            entry=entry,
            employee_no=employee.worker_code if employee else None,
            employee_name=employee.full_name if employee else None,
            email=details.get("email"),
            photo_url=details.get("photo_url"),
        )

    def get_view(self, entry_id):
        entry = self._rows.get(int(entry_id))
        return self._view(entry) if entry else None

    def list_views(self, *, start=None, end=None, site_id=None, status=None):
        rows = [
            e
            for e in self._rows.values()
            if (start is None or e.log_time >= start)
            and (end is None or e.log_time < end)
            and (site_id is None or e.site_id == site_id)
            and (status is None or e.status == status)
        ]
        rows.sort(key=lambda e: e.log_time, reverse=True)
        return [self._view(e) for e in rows]

    def list_report_rows(self, *, start, end, site_id=None):
        out = []
        for e in sorted(self._rows.values(), key=lambda e: (e.log_time, e.employee_id)):
            if not (start <= e.log_time < end) or (site_id is not None and e.site_id != site_id):
                continue
            employee = self._employees.by_id(e.employee_id)
            plant = self._plants.get_by_id(e.site_id) if e.site_id is not None else None
            out.append(
                EntryReportRow(
                    entry_id=e.entry_id,
                    employee_id=e.employee_id,
                    employee_no=employee.worker_code if employee else "",
                    employee_name=employee.full_name if employee else "",
                    department=self._employees.details.get(e.employee_id, {}).get("department"),
                    site_id=e.site_id,
                    plant_name=plant.name if plant else None,
                    plant_code=plant.plant_code if plant else None,
                    log_time=e.log_time,
                    status=e.status,
                )
            )
        return out


class FakeEsslClient:
    """Serves canned records (or raises) per location label; records every call."""

    def __init__(self, logs=None, *, devices=()):
        self.logs = dict(logs or {})
        self.devices = list(devices)
        self.fetch_calls: list[tuple] = []
        self.enrolled: list[dict] = []
        self.resets: list[str] = []

    def fetch_logs(self, day, location):
        self.fetch_calls.append((day, location))
        outcome = self.logs.get(location, [])
        if isinstance(outcome, Exception):
            raise outcome
        return list(outcome)

    def list_devices(self, location="1"):
        return list(self.devices)

    def update_employee(self, *, worker_code, name, serial_number, card_number=""):
        self.enrolled.append(
            {"worker_code": worker_code, "name": name, "serial_number": serial_number, "card_number": card_number}
        )
        return "Success"

    def reset_checkpoint(self, serial_number):
        self.resets.append(serial_number)
        return "Success"


@pytest.fixture
def employees():
    return InMemoryEmployees(
        [
            EmployeeRef(employee_id=1, worker_code="E1001", site_id=1, full_name="Anitha Raman"),
            EmployeeRef(employee_id=2, worker_code="E2001", site_id=2, full_name="Rahul Patil"),
            EmployeeRef(employee_id=3, worker_code="E1002", site_id=1, full_name="Kavya Menon"),
        ],
        details={
            1: {"email": "anitha@example.com", "department": "Production", "photo_url": "/photos/1.jpg"},
            2: {"email": "rahul@example.com", "department": "Quality"},
            3: {"department": "Production"},
        },
    )


@pytest.fixture
def plants():
    return InMemoryPlants(
        [
            Plant(plant_id=1, name="Chennai Plant", plant_code="CHN", location="Chennai", plant_head_id=50),
            Plant(plant_id=2, name="Pune Plant", plant_code="PUN", location="Pune", plant_head_id=60),
        ]
    )


@pytest.fixture
def locations():
    return InMemoryLocations(
        [
            DeviceLocation(1, "Chennai Canteen", "SN-CHN-01", "Chennai"),
            DeviceLocation(2, "Pune Canteen", "SN-PUN-01", "Pune"),
        ]
    )


@pytest.fixture
def entries(employees, plants):
    return InMemoryEntries(employees, plants)


@pytest.fixture
def client():
    return FakeEsslClient(devices=[DeviceInfo(name="Chennai Canteen", serial_number="SN-CHN-01", location="Chennai")])


@pytest.fixture
def container(employees, plants, locations, entries, client):
    return assemble_container(
        employees=employees,
        plants=plants,
        locations=locations,
        entries=entries,
        client=client,
        tz=IST,
    )


@pytest.fixture
def make_locations():
    return lambda rows: InMemoryLocations(rows)


@pytest.fixture
def make_plants():
    return lambda rows: InMemoryPlants(rows)
